"""Administrative management of principals, with an audit trail in SystemLog."""

import logging

from gateflow.models.enums import Role
from gateflow.models.system_logs import SystemLog
from gateflow.services import authorization
from gateflow.services.authorization import Operation
from gateflow.services.errors import BadRequest, Conflict, NotFound
from gateflow.services.principal_store import DUPLICATE_EMAIL_MESSAGE
from gateflow.services.visitor_passes import parse_timestamp

logger = logging.getLogger(__name__)


class PrincipalAdministration:

    def __init__(self, store, issuer):
        self._store = store
        self._issuer = issuer

    @property
    def _session(self):
        return self._store.session

    def _log_admin_action(self, actor, action, details, ip_address=None):
        self._session.add(SystemLog(
            log_type='admin_action',
            action=action,
            details=details,
            principal_id=actor.id,
            ip_address=ip_address
        ))
        self._session.commit()

    def _load(self, principal_id):
        principal = self._store.get(principal_id)
        if principal is None:
            raise NotFound(f'User {principal_id} was not found')
        return principal

    def list_principals(self, actor):
        authorization.ensure(actor, Operation.MANAGE_PRINCIPALS)
        return self._store.list_all()

    def get_principal(self, actor, principal_id):
        authorization.ensure(actor, Operation.MANAGE_PRINCIPALS)
        return self._load(principal_id)

    def create_principal(self, actor, email=None, password=None, first_name=None, last_name=None,
                         role=None, contact_number=None, ip_address=None):
        authorization.ensure(actor, Operation.MANAGE_PRINCIPALS)

        fields = self._issuer.clean_profile(email, password, first_name, last_name, contact_number)
        try:
            role = Role(role)
        except ValueError:
            raise BadRequest('Invalid role')
        if self._store.find_by_email(fields['email']):
            raise Conflict(DUPLICATE_EMAIL_MESSAGE)

        principal = self._store.create(
            password_hash=self._issuer.hash_password(password),
            role=role,
            **fields
        )
        self._log_admin_action(actor, 'create_user', {
            'user_id': principal.id,
            'email': principal.email,
            'role': principal.role.value
        }, ip_address)
        return principal

    def toggle_active(self, actor, principal_id, ip_address=None):
        authorization.ensure(actor, Operation.MANAGE_PRINCIPALS)
        principal = self._load(principal_id)
        if principal.id == actor.id:
            raise BadRequest('Cannot deactivate your own account')

        principal.is_active = not principal.is_active
        self._store.save()
        self._log_admin_action(actor, 'toggle_active', {
            'user_id': principal.id,
            'is_active': principal.is_active
        }, ip_address)
        logger.info("Principal %s active=%s", principal.id, principal.is_active)
        return principal

    def change_role(self, actor, principal_id, role, ip_address=None):
        authorization.ensure(actor, Operation.MANAGE_PRINCIPALS)
        principal = self._load(principal_id)
        try:
            role = Role(role)
        except ValueError:
            raise BadRequest('Invalid role')
        if principal.id == actor.id:
            raise BadRequest('Cannot change your own role')

        old_role = principal.role
        principal.role = role
        self._store.save()
        self._log_admin_action(actor, 'change_user_role', {
            'user_id': principal.id,
            'old_role': old_role.value,
            'new_role': role.value
        }, ip_address)
        return principal

    def delete_principal(self, actor, principal_id, ip_address=None):
        authorization.ensure(actor, Operation.MANAGE_PRINCIPALS)
        principal = self._load(principal_id)
        if principal.id == actor.id:
            raise BadRequest('Cannot delete your own account')
        if self._store.has_audit_history(principal.id):
            raise Conflict('User has audit history; deactivate the account instead')

        snapshot = principal.to_summary()
        self._store.delete(principal)
        self._log_admin_action(actor, 'delete_user', {
            'user_id': principal_id,
            'user_data': snapshot
        }, ip_address)
        return snapshot

    def system_logs(self, actor, page=1, per_page=50, log_type=None, start_date=None, end_date=None):
        authorization.ensure(actor, Operation.READ_SYSTEM_LOGS)

        query = self._session.query(SystemLog)
        if log_type:
            query = query.filter_by(log_type=log_type)
        if start_date:
            query = query.filter(SystemLog.timestamp >= parse_timestamp(start_date, 'start_date'))
        if end_date:
            query = query.filter(SystemLog.timestamp <= parse_timestamp(end_date, 'end_date'))

        logs = query.order_by(SystemLog.timestamp.desc()).paginate(
            page=page or 1,
            per_page=per_page or 50,
            max_per_page=200,
            error_out=False
        )
        return {
            'logs': [log.to_dict() for log in logs.items],
            'total': logs.total,
            'pages': logs.pages,
            'current_page': logs.page
        }
