"""Maps scanned QR strings to principals or visitor credentials.

Principal QR codes and visitor QR codes live in disjoint namespaces; a
successful lookup only identifies the holder, it does not grant entry.
"""

from gateflow.models.base import utcnow
from gateflow.models.enums import VisitorStatus
from gateflow.services import authorization
from gateflow.services.authorization import Operation
from gateflow.services.errors import NotFound

UNKNOWN_QR_MESSAGE = 'No user found for this QR code'
UNKNOWN_VISITOR_QR_MESSAGE = 'No visitor pass found for this QR code'


class QrIdentityResolver:

    def __init__(self, store, visitor_passes):
        self._store = store
        self._visitor_passes = visitor_passes

    def lookup(self, qr_token):
        principal = self._store.find_by_qr_token(qr_token)
        if principal is None:
            raise NotFound(UNKNOWN_QR_MESSAGE)
        return principal

    def resolve_by_qr(self, actor, qr_token):
        authorization.ensure(actor, Operation.RESOLVE_QR)
        return self.lookup(qr_token).to_summary()

    def resolve_visitor_by_qr(self, actor, qr_token):
        authorization.ensure(actor, Operation.VERIFY_VISITOR_QR)
        visitor_pass = self._visitor_passes.find_by_qr(qr_token)
        if visitor_pass is None:
            raise NotFound(UNKNOWN_VISITOR_QR_MESSAGE)

        now = utcnow()
        eligible = (
            visitor_pass.status == VisitorStatus.APPROVED
            and visitor_pass.time_window_start <= now <= visitor_pass.time_window_end
        )
        return {
            'pass': visitor_pass.to_dict(),
            'eligible': eligible
        }
