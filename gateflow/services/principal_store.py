"""Durable identity records.

Every query goes through the session handed to the constructor; the
store never reaches for a module-level session of its own.
"""

import logging
import re
import uuid

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from gateflow.models.base import utcnow
from gateflow.models.entry_record import EntryRecord
from gateflow.models.incident import Incident
from gateflow.models.principal import Principal
from gateflow.models.sos_broadcast import SOSBroadcast
from gateflow.models.visitor_pass import VisitorPass
from gateflow.services.errors import Conflict

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
DUPLICATE_EMAIL_MESSAGE = 'Email is already registered'


def normalize_email(email):
    if not isinstance(email, str):
        return ''
    return email.strip().lower()


def is_valid_email(email):
    return bool(EMAIL_PATTERN.match(email or ''))


class PrincipalStore:

    def __init__(self, session):
        self._session = session

    @property
    def session(self):
        return self._session

    def get(self, principal_id):
        if not principal_id:
            return None
        return self._session.get(Principal, principal_id)

    def find_by_email(self, email):
        return self._session.query(Principal).filter_by(email=normalize_email(email)).first()

    def find_by_qr_token(self, qr_token):
        if not qr_token:
            return None
        return self._session.query(Principal).filter_by(qr_token=qr_token).first()

    def find_by_live_reset_token(self, token, now=None):
        if not token:
            return None
        now = now or utcnow()
        return self._session.query(Principal).filter(
            Principal.reset_token == token,
            Principal.reset_expiry > now
        ).first()

    def list_all(self):
        return self._session.query(Principal).order_by(Principal.created_at.desc()).all()

    def qr_token_taken(self, qr_token):
        principal_hit = self._session.query(Principal.id).filter_by(qr_token=qr_token).first()
        if principal_hit:
            return True
        return self._session.query(VisitorPass.id).filter_by(qr_token=qr_token).first() is not None

    def mint_qr_token(self):
        """Return a QR token unused by any principal or visitor pass."""
        while True:
            token = str(uuid.uuid4())
            if not self.qr_token_taken(token):
                return token

    def create(self, email, password_hash, first_name, last_name, role, contact_number=None):
        principal = Principal(
            email=normalize_email(email),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=role,
            contact_number=contact_number,
            qr_token=self.mint_qr_token(),
            is_active=True
        )
        self._session.add(principal)
        try:
            self._session.commit()
        except IntegrityError:
            # Concurrent insert with the same email won the race
            self._session.rollback()
            logger.info("Uniqueness violation while creating principal %s", principal.email)
            raise Conflict(DUPLICATE_EMAIL_MESSAGE)
        return principal

    def store_reset_secret(self, principal, token, expiry):
        # Overwrites any earlier secret: at most one live secret per principal
        principal.reset_token = token
        principal.reset_expiry = expiry
        self._session.commit()

    def consume_reset_secret(self, token, password_hash, now=None):
        """Swap in ``password_hash`` and clear the secret in one conditional UPDATE.

        Returns True only for the single caller whose UPDATE matched.
        """
        now = now or utcnow()
        updated = self._session.query(Principal).filter(
            Principal.reset_token == token,
            Principal.reset_expiry > now
        ).update(
            {
                Principal.password_hash: password_hash,
                Principal.reset_token: None,
                Principal.reset_expiry: None,
                Principal.updated_at: now
            },
            synchronize_session=False
        )
        self._session.commit()
        return updated == 1

    def has_audit_history(self, principal_id):
        """True when any audit row (scan, SOS, incident, approval) references the principal."""
        probes = (
            self._session.query(EntryRecord.id).filter(
                or_(EntryRecord.principal_id == principal_id, EntryRecord.guard_id == principal_id)
            ),
            self._session.query(SOSBroadcast.id).filter_by(triggered_by_id=principal_id),
            self._session.query(Incident.id).filter(
                or_(Incident.reported_by_id == principal_id, Incident.resolved_by_id == principal_id)
            ),
            self._session.query(VisitorPass.id).filter_by(approved_by_id=principal_id),
        )
        return any(probe.first() is not None for probe in probes)

    def save(self):
        self._session.commit()

    def delete(self, principal):
        self._session.delete(principal)
        self._session.commit()
