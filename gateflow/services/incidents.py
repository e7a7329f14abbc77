"""Incident reports: any principal reports, guards and admins resolve."""

import logging

from gateflow.models.base import utcnow
from gateflow.models.enums import IncidentStatus, Severity
from gateflow.models.incident import Incident
from gateflow.services import authorization
from gateflow.services.authorization import Operation
from gateflow.services.errors import BadRequest, NotFound
from gateflow.services.validation import column_length, optional_text, require_text

logger = logging.getLogger(__name__)


class IncidentDesk:

    def __init__(self, session):
        self._session = session

    def report(self, actor, title=None, description=None, location=None, severity=None,
               image_url=None, anonymous=False):
        authorization.ensure(actor, Operation.CREATE_INCIDENT)

        title = require_text(title, 'title', column_length(Incident, 'title'))
        description = require_text(description, 'description')
        location = require_text(location, 'location', column_length(Incident, 'location'))
        image_url = optional_text(image_url, 'imageUrl')
        try:
            severity = Severity(severity)
        except ValueError:
            raise BadRequest('severity must be one of LOW, MEDIUM, HIGH, CRITICAL')

        incident = Incident(
            title=title,
            description=description,
            location=location,
            severity=severity,
            image_url=image_url,
            anonymous=bool(anonymous),
            reported_by_id=actor.id
        )
        self._session.add(incident)
        self._session.commit()
        logger.info("Incident %s reported (%s)", incident.id, severity.value)
        return incident

    def mine(self, actor):
        authorization.ensure(actor, Operation.READ_OWN_INCIDENTS)
        return self._session.query(Incident).filter_by(
            reported_by_id=actor.id
        ).order_by(Incident.created_at.desc()).all()

    def list_all(self, actor):
        authorization.ensure(actor, Operation.LIST_INCIDENTS)
        return self._session.query(Incident).order_by(Incident.created_at.desc()).all()

    def resolve(self, actor, incident_id, action_taken=None):
        authorization.ensure(actor, Operation.RESOLVE_INCIDENT)
        action_taken = optional_text(action_taken, 'actionTaken')

        incident = self._session.get(Incident, incident_id) if incident_id else None
        if incident is None:
            raise NotFound(f'Incident {incident_id} not found')
        if incident.status == IncidentStatus.RESOLVED:
            return incident

        incident.status = IncidentStatus.RESOLVED
        incident.action_taken = action_taken
        incident.resolved_by_id = actor.id
        incident.resolved_at = utcnow()
        self._session.commit()
        logger.info("Incident %s resolved by %s", incident.id, actor.id)
        return incident
