"""Role-based access policy.

``allows`` is a pure lookup over ``POLICY``; ``ensure`` is the guard every
public service operation calls first.
"""

import enum

from gateflow.models.enums import Role
from gateflow.services.errors import Forbidden, Unauthorized


class Operation(enum.Enum):
    REGISTER = 'register'
    LOGIN = 'login'
    REQUEST_PASSWORD_RESET = 'request_password_reset'
    RESET_PASSWORD = 'reset_password'
    CREATE_VISITOR_PASS = 'create_visitor_pass'

    READ_OWN_PROFILE = 'read_own_profile'
    READ_OWN_ENTRIES = 'read_own_entries'
    CREATE_INCIDENT = 'create_incident'
    READ_OWN_INCIDENTS = 'read_own_incidents'
    READ_ACTIVE_SOS = 'read_active_sos'

    RESOLVE_QR = 'resolve_qr'
    VERIFY_VISITOR_QR = 'verify_visitor_qr'
    RECORD_SCAN = 'record_scan'
    READ_ENTRIES = 'read_entries'
    LIST_VISITOR_PASSES = 'list_visitor_passes'
    APPROVE_VISITOR_PASS = 'approve_visitor_pass'
    REJECT_VISITOR_PASS = 'reject_visitor_pass'
    TRIGGER_SOS = 'trigger_sos'
    CLOSE_SOS = 'close_sos'
    LIST_ALL_SOS = 'list_all_sos'
    LIST_INCIDENTS = 'list_incidents'
    RESOLVE_INCIDENT = 'resolve_incident'

    MANAGE_PRINCIPALS = 'manage_principals'
    READ_SYSTEM_LOGS = 'read_system_logs'
    READ_ANALYTICS = 'read_analytics'


PUBLIC = None
AUTHENTICATED = frozenset(Role)
GATEKEEPERS = frozenset({Role.GUARD, Role.ADMIN})
ADMINS = frozenset({Role.ADMIN})

# PUBLIC operations need no session at all
POLICY = {
    Operation.REGISTER: PUBLIC,
    Operation.LOGIN: PUBLIC,
    Operation.REQUEST_PASSWORD_RESET: PUBLIC,
    Operation.RESET_PASSWORD: PUBLIC,
    Operation.CREATE_VISITOR_PASS: PUBLIC,

    Operation.READ_OWN_PROFILE: AUTHENTICATED,
    Operation.READ_OWN_ENTRIES: AUTHENTICATED,
    Operation.CREATE_INCIDENT: AUTHENTICATED,
    Operation.READ_OWN_INCIDENTS: AUTHENTICATED,
    Operation.READ_ACTIVE_SOS: AUTHENTICATED,

    Operation.RESOLVE_QR: GATEKEEPERS,
    Operation.VERIFY_VISITOR_QR: GATEKEEPERS,
    Operation.RECORD_SCAN: GATEKEEPERS,
    Operation.READ_ENTRIES: GATEKEEPERS,
    Operation.LIST_VISITOR_PASSES: GATEKEEPERS,
    Operation.APPROVE_VISITOR_PASS: GATEKEEPERS,
    Operation.REJECT_VISITOR_PASS: GATEKEEPERS,
    Operation.TRIGGER_SOS: GATEKEEPERS,
    Operation.CLOSE_SOS: GATEKEEPERS,
    Operation.LIST_ALL_SOS: GATEKEEPERS,
    Operation.LIST_INCIDENTS: GATEKEEPERS,
    Operation.RESOLVE_INCIDENT: GATEKEEPERS,

    Operation.MANAGE_PRINCIPALS: ADMINS,
    Operation.READ_SYSTEM_LOGS: ADMINS,
    Operation.READ_ANALYTICS: ADMINS,
}


def allows(role, operation):
    """Return True when ``role`` (None for anonymous callers) may run ``operation``."""
    allowed = POLICY[operation]
    if allowed is PUBLIC:
        return True
    if role is None:
        return False
    return Role(role) in allowed


def ensure(principal, operation):
    """Raise unless ``principal`` may run ``operation``.

    Anonymous callers of a protected operation get ``Unauthorized``;
    authenticated callers without the role get ``Forbidden``.
    """
    role = principal.role if principal is not None else None
    if allows(role, operation):
        return
    if principal is None:
        raise Unauthorized()
    raise Forbidden()
