import enum


class Role(str, enum.Enum):
    ADMIN = 'ADMIN'
    GUARD = 'GUARD'
    STUDENT = 'STUDENT'
    FACULTY = 'FACULTY'
    STAFF = 'STAFF'


SELF_REGISTRABLE_ROLES = frozenset({Role.STUDENT, Role.FACULTY, Role.STAFF})


class EntryType(str, enum.Enum):
    ENTRY = 'ENTRY'
    EXIT = 'EXIT'


class VisitorStatus(str, enum.Enum):
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'
    EXPIRED = 'EXPIRED'


class EmergencyType(str, enum.Enum):
    EARTHQUAKE = 'EARTHQUAKE'
    FIRE = 'FIRE'
    SECURITY_THREAT = 'SECURITY_THREAT'
    WEATHER_WARNING = 'WEATHER_WARNING'
    CUSTOM = 'CUSTOM'


class Severity(str, enum.Enum):
    LOW = 'LOW'
    MEDIUM = 'MEDIUM'
    HIGH = 'HIGH'
    CRITICAL = 'CRITICAL'


class IncidentStatus(str, enum.Enum):
    PENDING = 'PENDING'
    RESOLVED = 'RESOLVED'
