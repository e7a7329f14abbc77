"""Field checks shared by the services.

Bounded text fields are measured against the column they land in, so an
over-long value is a ``BadRequest`` before it ever reaches the database.
"""

from gateflow.services.errors import BadRequest


def column_length(model, name):
    """Declared length of ``model.name``; None for unbounded columns."""
    return getattr(model.__table__.c[name].type, 'length', None)


def require_text(value, label, max_length=None):
    """Return ``value`` stripped, or raise when it is missing, not text or too long."""
    if not isinstance(value, str) or not value.strip():
        raise BadRequest(f'Missing required field: {label}')
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise BadRequest(f'{label} must be at most {max_length} characters')
    return value


def optional_text(value, label, max_length=None):
    if value is None:
        return None
    if not isinstance(value, str):
        raise BadRequest(f'{label} must be a string')
    value = value.strip()
    if not value:
        return None
    if max_length is not None and len(value) > max_length:
        raise BadRequest(f'{label} must be at most {max_length} characters')
    return value
