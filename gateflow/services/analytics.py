from sqlalchemy import func

from gateflow.models.base import utcnow
from gateflow.models.entry_record import EntryRecord
from gateflow.models.enums import IncidentStatus, Role, VisitorStatus
from gateflow.models.incident import Incident
from gateflow.models.principal import Principal
from gateflow.models.sos_broadcast import SOSBroadcast
from gateflow.models.visitor_pass import VisitorPass
from gateflow.services import authorization
from gateflow.services.authorization import Operation


class AnalyticsOverview:

    def __init__(self, session):
        self._session = session

    def _count(self, column, *criteria):
        return self._session.query(func.count(column)).filter(*criteria).scalar() or 0

    def overview(self, actor):
        authorization.ensure(actor, Operation.READ_ANALYTICS)
        now = utcnow()
        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

        return {
            'totalUsers': self._count(Principal.id),
            'totalStudents': self._count(Principal.id, Principal.role == Role.STUDENT),
            'totalFaculty': self._count(Principal.id, Principal.role == Role.FACULTY),
            'totalStaff': self._count(Principal.id, Principal.role == Role.STAFF),
            'totalGuards': self._count(Principal.id, Principal.role == Role.GUARD),
            'entriesToday': self._count(EntryRecord.id, EntryRecord.timestamp >= today_start),
            'totalEntryLogs': self._count(EntryRecord.id),
            'pendingIncidents': self._count(Incident.id, Incident.status == IncidentStatus.PENDING),
            'resolvedIncidents': self._count(Incident.id, Incident.status == IncidentStatus.RESOLVED),
            'pendingVisitors': self._count(
                VisitorPass.id,
                VisitorPass.status == VisitorStatus.PENDING,
                VisitorPass.time_window_end >= now
            ),
            'approvedVisitors': self._count(
                VisitorPass.id,
                VisitorPass.status == VisitorStatus.APPROVED,
                VisitorPass.time_window_end >= now
            ),
            'activeSos': self._count(SOSBroadcast.id, SOSBroadcast.is_active.is_(True)),
        }
