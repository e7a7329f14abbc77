"""Visitor pass state machine.

PENDING -> APPROVED | REJECTED, APPROVED -> REJECTED, and PENDING or
APPROVED -> EXPIRED once ``time_window_end`` has passed. Expiry is
applied lazily whenever a pass is read or transitioned. A pass carries a
QR token exactly while it is APPROVED.
"""

import logging
from datetime import datetime, timezone

from gateflow.models.base import utcnow
from gateflow.models.enums import VisitorStatus
from gateflow.models.visitor_pass import VisitorPass
from gateflow.services import authorization
from gateflow.services.authorization import Operation
from gateflow.services.errors import BadRequest, Conflict, NotFound
from gateflow.services.validation import column_length, optional_text, require_text

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    ('fullName', 'full_name'),
    ('contactNumber', 'contact_number'),
    ('purpose', 'purpose'),
    ('personToVisit', 'person_to_visit'),
)
LAPSING_STATUSES = (VisitorStatus.PENDING, VisitorStatus.APPROVED)


def parse_timestamp(value, field):
    """Accept ISO-8601 strings or datetimes; return naive UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise BadRequest(f'{field} must be an ISO-8601 date')
    else:
        raise BadRequest(f'{field} is required')
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class VisitorPassLifecycle:

    def __init__(self, session, store):
        self._session = session
        self._store = store

    def _lapse_if_expired(self, visitor_pass, now):
        if visitor_pass.status in LAPSING_STATUSES and visitor_pass.time_window_end < now:
            visitor_pass.status = VisitorStatus.EXPIRED
            visitor_pass.qr_token = None
            logger.info("Visitor pass %s lapsed", visitor_pass.id)
            return True
        return False

    def _load(self, pass_id):
        visitor_pass = self._session.get(VisitorPass, pass_id) if pass_id else None
        if visitor_pass is None:
            raise NotFound(f'Visitor pass {pass_id} not found')
        if self._lapse_if_expired(visitor_pass, utcnow()):
            self._session.commit()
        return visitor_pass

    def create(self, full_name=None, contact_number=None, purpose=None, person_to_visit=None,
               visit_date=None, time_window_start=None, time_window_end=None,
               email=None, address=None):
        authorization.ensure(None, Operation.CREATE_VISITOR_PASS)

        values = {
            'full_name': full_name,
            'contact_number': contact_number,
            'purpose': purpose,
            'person_to_visit': person_to_visit,
        }
        for label, key in REQUIRED_FIELDS:
            values[key] = require_text(values[key], label, column_length(VisitorPass, key))
        values['email'] = optional_text(email, 'email', column_length(VisitorPass, 'email'))
        values['address'] = optional_text(address, 'address', column_length(VisitorPass, 'address'))

        visit_date = parse_timestamp(visit_date, 'visitDate')
        window_start = parse_timestamp(time_window_start, 'timeWindowStart')
        window_end = parse_timestamp(time_window_end, 'timeWindowEnd')
        if window_end < window_start:
            raise BadRequest('timeWindowEnd must not be before timeWindowStart')

        visitor_pass = VisitorPass(
            visit_date=visit_date,
            time_window_start=window_start,
            time_window_end=window_end,
            status=VisitorStatus.PENDING,
            qr_token=None,
            **values
        )
        self._session.add(visitor_pass)
        self._session.commit()
        logger.info("Visitor pass %s requested", visitor_pass.id)
        return visitor_pass

    def list(self, actor):
        authorization.ensure(actor, Operation.LIST_VISITOR_PASSES)
        passes = self._session.query(VisitorPass).order_by(VisitorPass.created_at.desc()).all()
        now = utcnow()
        lapsed = [p for p in passes if self._lapse_if_expired(p, now)]
        if lapsed:
            self._session.commit()
        return passes

    def get(self, actor, pass_id):
        authorization.ensure(actor, Operation.LIST_VISITOR_PASSES)
        return self._load(pass_id)

    def find_by_qr(self, qr_token):
        if not qr_token:
            return None
        visitor_pass = self._session.query(VisitorPass).filter_by(qr_token=qr_token).first()
        if visitor_pass is not None and self._lapse_if_expired(visitor_pass, utcnow()):
            self._session.commit()
        return visitor_pass

    def approve(self, actor, pass_id):
        """Approve a pending pass and mint its QR token.

        Approving an already approved pass returns it untouched so the QR
        already handed out stays valid.
        """
        authorization.ensure(actor, Operation.APPROVE_VISITOR_PASS)
        visitor_pass = self._load(pass_id)

        if visitor_pass.status == VisitorStatus.APPROVED:
            return visitor_pass
        if visitor_pass.status != VisitorStatus.PENDING:
            raise Conflict(f'Visitor pass is already {visitor_pass.status.value}')

        # Conditional on PENDING so concurrent approvals mint exactly one QR
        updated = self._session.query(VisitorPass).filter_by(
            id=visitor_pass.id, status=VisitorStatus.PENDING
        ).update(
            {
                VisitorPass.status: VisitorStatus.APPROVED,
                VisitorPass.qr_token: self._store.mint_qr_token(),
                VisitorPass.approved_by_id: actor.id,
                VisitorPass.updated_at: utcnow()
            },
            synchronize_session=False
        )
        self._session.commit()
        self._session.refresh(visitor_pass)

        if not updated and visitor_pass.status != VisitorStatus.APPROVED:
            raise Conflict(f'Visitor pass is already {visitor_pass.status.value}')
        if updated:
            logger.info("Visitor pass %s approved by %s", visitor_pass.id, actor.id)
        return visitor_pass

    def reject(self, actor, pass_id):
        authorization.ensure(actor, Operation.REJECT_VISITOR_PASS)
        visitor_pass = self._load(pass_id)

        if visitor_pass.status == VisitorStatus.REJECTED:
            return visitor_pass
        if visitor_pass.status == VisitorStatus.EXPIRED:
            raise Conflict('Visitor pass has already expired')

        visitor_pass.status = VisitorStatus.REJECTED
        visitor_pass.qr_token = None
        self._session.commit()
        logger.info("Visitor pass %s rejected by %s", visitor_pass.id, actor.id)
        return visitor_pass
