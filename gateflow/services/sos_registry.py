"""Emergency broadcasts.

Any number of broadcasts can be active at once. Closing is idempotent:
a closed broadcast keeps its first ``closed_at``.
"""

import logging

from gateflow.models.base import utcnow
from gateflow.models.enums import EmergencyType
from gateflow.models.sos_broadcast import SOSBroadcast
from gateflow.services import authorization
from gateflow.services.authorization import Operation
from gateflow.services.errors import BadRequest, NotFound

logger = logging.getLogger(__name__)

SOS_TRIGGERED = 'sos_triggered'
SOS_CLOSED = 'sos_closed'


class SosBroadcastRegistry:

    def __init__(self, session, broadcaster=None):
        self._session = session
        self._broadcaster = broadcaster

    def _publish(self, event, broadcast):
        if self._broadcaster is not None:
            self._broadcaster(event, broadcast.to_dict())

    def trigger(self, actor, emergency_type, message):
        authorization.ensure(actor, Operation.TRIGGER_SOS)

        try:
            emergency_type = EmergencyType(emergency_type)
        except ValueError:
            raise BadRequest('Invalid emergency type')
        if not isinstance(message, str) or not message.strip():
            raise BadRequest('message is required')

        broadcast = SOSBroadcast(
            type=emergency_type,
            message=message.strip(),
            triggered_by_id=actor.id,
            is_active=True,
            closed_at=None
        )
        self._session.add(broadcast)
        self._session.commit()
        logger.warning("SOS %s triggered by %s (%s)", emergency_type.value, actor.id, broadcast.id)
        self._publish(SOS_TRIGGERED, broadcast)
        return broadcast

    def close(self, actor, broadcast_id):
        authorization.ensure(actor, Operation.CLOSE_SOS)

        broadcast = self._session.get(SOSBroadcast, broadcast_id) if broadcast_id else None
        if broadcast is None:
            raise NotFound(f'SOS broadcast {broadcast_id} not found')
        if not broadcast.is_active:
            return broadcast

        broadcast.is_active = False
        broadcast.closed_at = utcnow()
        self._session.commit()
        logger.info("SOS %s closed by %s", broadcast.id, actor.id)
        self._publish(SOS_CLOSED, broadcast)
        return broadcast

    def list_active(self, actor):
        authorization.ensure(actor, Operation.READ_ACTIVE_SOS)
        return self._session.query(SOSBroadcast).filter_by(
            is_active=True
        ).order_by(SOSBroadcast.created_at.desc()).all()

    def list_all(self, actor):
        authorization.ensure(actor, Operation.LIST_ALL_SOS)
        return self._session.query(SOSBroadcast).order_by(SOSBroadcast.created_at.desc()).all()
