"""Append-only log of gate scans.

There is deliberately no update or delete here; corrections are new
records written by whoever owns the policy for them.
"""

import logging

from gateflow.models.entry_record import EntryRecord
from gateflow.models.enums import EntryType
from gateflow.services import authorization
from gateflow.services.authorization import Operation
from gateflow.services.errors import BadRequest
from gateflow.services.validation import column_length, require_text

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 50
DEFAULT_PRINCIPAL_LIMIT = 20


def _coerce_limit(limit, default):
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        return default
    return limit if limit > 0 else default


class EntryLedger:

    def __init__(self, session, resolver):
        self._session = session
        self._resolver = resolver

    def record_scan(self, guard, qr_token, entry_type, location):
        authorization.ensure(guard, Operation.RECORD_SCAN)

        if not isinstance(qr_token, str) or not qr_token:
            raise BadRequest('qrToken is required')
        try:
            entry_type = EntryType(entry_type)
        except ValueError:
            raise BadRequest('type must be ENTRY or EXIT')
        location = require_text(location, 'location', column_length(EntryRecord, 'location'))

        principal = self._resolver.lookup(qr_token)

        record = EntryRecord(
            principal_id=principal.id,
            guard_id=guard.id,
            type=entry_type,
            location=location
        )
        self._session.add(record)
        self._session.commit()
        logger.info("Guard %s recorded %s for %s at %s",
                    guard.id, entry_type.value, principal.id, record.location)
        return record

    def recent(self, actor, limit=None):
        authorization.ensure(actor, Operation.READ_ENTRIES)
        return self._session.query(EntryRecord).order_by(
            EntryRecord.timestamp.desc()
        ).limit(_coerce_limit(limit, DEFAULT_RECENT_LIMIT)).all()

    def for_principal(self, actor, principal_id=None, limit=None):
        """Entries of ``principal_id``; defaults to the caller's own."""
        if principal_id is None or principal_id == getattr(actor, 'id', None):
            authorization.ensure(actor, Operation.READ_OWN_ENTRIES)
            principal_id = actor.id
        else:
            authorization.ensure(actor, Operation.READ_ENTRIES)
        return self._session.query(EntryRecord).filter_by(
            principal_id=principal_id
        ).order_by(
            EntryRecord.timestamp.desc()
        ).limit(_coerce_limit(limit, DEFAULT_PRINCIPAL_LIMIT)).all()
