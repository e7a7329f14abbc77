import uuid
from datetime import datetime, timezone

from gateflow.db.db import db


def generate_uuid():
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp; every datetime column stores UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value else None
