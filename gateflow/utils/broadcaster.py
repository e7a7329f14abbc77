import logging
from flask_socketio import SocketIO

logger = logging.getLogger(__name__)

socketio = SocketIO()


def emit_sos_event(event, payload):
    """Push an SOS event to every connected dashboard."""
    try:
        socketio.emit(event, payload)
    except Exception:
        # The broadcast is already persisted; clients also poll /sos/active
        logger.exception("Failed to emit %s", event)
