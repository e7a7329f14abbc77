"""Typed outcomes shared by every service.

Services raise a ``ServiceError`` subclass for the expected failure
outcomes (conflict, not found, ...). Each carries an ``ErrorKind`` and
the HTTP status the web layer renders it with, so blueprints never
translate errors by hand.
"""

import enum


class ErrorKind(enum.Enum):
    CONFLICT = 409
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    BAD_REQUEST = 400
    INTERNAL_FAILURE = 503


class ServiceError(Exception):
    kind = ErrorKind.INTERNAL_FAILURE
    default_message = 'Service unavailable'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self):
        return self.kind.value

    def to_dict(self):
        return {'error': self.message}


class Conflict(ServiceError):
    kind = ErrorKind.CONFLICT
    default_message = 'Conflict'


class Unauthorized(ServiceError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = 'Authentication required'


class Forbidden(ServiceError):
    kind = ErrorKind.FORBIDDEN
    default_message = 'Insufficient permissions'


class NotFound(ServiceError):
    kind = ErrorKind.NOT_FOUND
    default_message = 'Not found'


class BadRequest(ServiceError):
    kind = ErrorKind.BAD_REQUEST
    default_message = 'Bad request'


class InternalFailure(ServiceError):
    kind = ErrorKind.INTERNAL_FAILURE
    default_message = 'Unable to reach the database. Please try again later.'
