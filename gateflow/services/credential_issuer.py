"""Password verification, session tokens and password-reset secrets."""

import logging
import secrets
from datetime import timedelta

from flask_jwt_extended import create_access_token
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash, check_password_hash

from gateflow.models.base import utcnow
from gateflow.models.enums import Role, SELF_REGISTRABLE_ROLES
from gateflow.models.principal import Principal
from gateflow.services import authorization
from gateflow.services.authorization import Operation
from gateflow.services.errors import BadRequest, Conflict, InternalFailure, Unauthorized
from gateflow.services.principal_store import (
    DUPLICATE_EMAIL_MESSAGE,
    is_valid_email,
    normalize_email,
)
from gateflow.services.validation import column_length, optional_text, require_text

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = 'Invalid email or password'
INVALID_RESET_TOKEN_MESSAGE = 'Invalid or expired reset token'
RESET_REQUESTED_MESSAGE = 'If that email is registered, a reset link has been sent.'
RESET_FALLBACK_MESSAGE = 'Email delivery unavailable. Use the link below to reset your password.'

# One throwaway hash per method, compared against when the email is unknown
_DUMMY_HASHES = {}


class CredentialIssuer:

    def __init__(self, store, notifier, link_builder, config):
        self._store = store
        self._notifier = notifier
        self._link_builder = link_builder
        self._hash_method = config.get('PASSWORD_HASH_METHOD', 'scrypt')
        self._min_length = config.get('PASSWORD_MIN_LENGTH', 8)
        self._reset_ttl = timedelta(minutes=config.get('RESET_TOKEN_TTL_MINUTES', 15))

    def hash_password(self, password):
        return generate_password_hash(password, method=self._hash_method)

    def validate_password(self, password, field='password'):
        if not isinstance(password, str) or len(password) < self._min_length:
            raise BadRequest(f'{field} must be at least {self._min_length} characters long')

    def issue_session_token(self, principal):
        return create_access_token(
            identity=principal.id,
            additional_claims={
                'email': principal.email,
                'role': principal.role.value
            }
        )

    def _session_payload(self, principal):
        return {
            'accessToken': self.issue_session_token(principal),
            'user': principal.to_dict()
        }

    def clean_profile(self, email, password, first_name, last_name, contact_number=None):
        """Validate account fields shared by registration and admin creation."""
        email = normalize_email(email)
        if not is_valid_email(email) or len(email) > column_length(Principal, 'email'):
            raise BadRequest('A valid email is required')
        self.validate_password(password)
        return {
            'email': email,
            'first_name': require_text(first_name, 'firstName', column_length(Principal, 'first_name')),
            'last_name': require_text(last_name, 'lastName', column_length(Principal, 'last_name')),
            'contact_number': optional_text(
                contact_number, 'contactNumber', column_length(Principal, 'contact_number')
            )
        }

    def register(self, email, password, first_name, last_name, role, contact_number=None):
        authorization.ensure(None, Operation.REGISTER)

        fields = self.clean_profile(email, password, first_name, last_name, contact_number)
        try:
            role = Role(role)
        except ValueError:
            raise BadRequest('Invalid role')
        if role not in SELF_REGISTRABLE_ROLES:
            raise BadRequest('Role must be one of STUDENT, FACULTY, STAFF')

        try:
            existing = self._store.find_by_email(fields['email'])
        except SQLAlchemyError:
            logger.exception("Database error while checking for existing principal")
            raise InternalFailure()
        if existing:
            raise Conflict(DUPLICATE_EMAIL_MESSAGE)

        password_hash = self.hash_password(password)
        try:
            principal = self._store.create(password_hash=password_hash, role=role, **fields)
        except SQLAlchemyError:
            self._store.session.rollback()
            logger.exception("Database error while creating principal")
            raise InternalFailure('Could not create account. Please try again later.')

        logger.info("Registered %s principal %s", role.value, principal.id)
        return self._session_payload(principal)

    def _dummy_hash(self):
        if self._hash_method not in _DUMMY_HASHES:
            _DUMMY_HASHES[self._hash_method] = self.hash_password(secrets.token_hex(16))
        return _DUMMY_HASHES[self._hash_method]

    def login(self, email, password):
        authorization.ensure(None, Operation.LOGIN)

        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            raise BadRequest('Email and password are required')

        principal = self._store.find_by_email(email)
        # Unknown emails still pay for one hash check
        password_hash = principal.password_hash if principal is not None else self._dummy_hash()
        password_ok = check_password_hash(password_hash, password)
        # Same message for every failure cause
        if principal is None or not password_ok:
            logger.info("Failed login attempt")
            raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)
        if not principal.is_active:
            logger.info("Login refused for inactive principal %s", principal.id)
            raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)

        return self._session_payload(principal)

    def profile(self, principal):
        authorization.ensure(principal, Operation.READ_OWN_PROFILE)
        return principal.to_dict()

    def request_password_reset(self, email):
        authorization.ensure(None, Operation.REQUEST_PASSWORD_RESET)

        principal = self._store.find_by_email(email) if email else None
        if principal is None:
            return {'message': RESET_REQUESTED_MESSAGE}

        reset_token = secrets.token_hex(32)
        self._store.store_reset_secret(principal, reset_token, utcnow() + self._reset_ttl)
        logger.info("Issued password reset secret for principal %s", principal.id)

        reset_link = self._link_builder(reset_token)
        ttl_minutes = int(self._reset_ttl.total_seconds() // 60)
        if self._notifier(principal.email, reset_link, ttl_minutes):
            return {'message': RESET_REQUESTED_MESSAGE}

        logger.warning("Reset email delivery unavailable, returning fallback link")
        return {
            'message': RESET_FALLBACK_MESSAGE,
            'resetToken': reset_token,
            'resetLink': reset_link
        }

    def reset_password(self, token, new_password):
        authorization.ensure(None, Operation.RESET_PASSWORD)

        if not isinstance(token, str) or not token:
            raise BadRequest(INVALID_RESET_TOKEN_MESSAGE)
        self.validate_password(new_password, field='newPassword')

        if self._store.find_by_live_reset_token(token) is None:
            raise BadRequest(INVALID_RESET_TOKEN_MESSAGE)
        if not self._store.consume_reset_secret(token, self.hash_password(new_password)):
            # Another request consumed the token between lookup and update
            raise BadRequest(INVALID_RESET_TOKEN_MESSAGE)

        logger.info("Password reset secret consumed")
        return {'message': 'Password has been reset successfully.'}
