"""Per-request wiring of services onto the shared session."""

from flask import current_app, request
from flask_jwt_extended import get_current_user

from gateflow.db.db import db
from gateflow.services.analytics import AnalyticsOverview
from gateflow.services.credential_issuer import CredentialIssuer
from gateflow.services.entry_ledger import EntryLedger
from gateflow.services.errors import BadRequest
from gateflow.services.incidents import IncidentDesk
from gateflow.services.principal_admin import PrincipalAdministration
from gateflow.services.principal_store import PrincipalStore
from gateflow.services.qr_resolver import QrIdentityResolver
from gateflow.services.sos_registry import SosBroadcastRegistry
from gateflow.services.visitor_passes import VisitorPassLifecycle
from gateflow.utils.broadcaster import emit_sos_event
from gateflow.utils.email_sender import build_reset_link, send_password_reset_email


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest('Request body must be a JSON object')
    return data


def current_principal():
    return get_current_user()


def principal_store():
    return PrincipalStore(db.session)


def credential_issuer():
    return CredentialIssuer(
        principal_store(),
        notifier=send_password_reset_email,
        link_builder=build_reset_link,
        config=current_app.config
    )


def visitor_pass_lifecycle():
    return VisitorPassLifecycle(db.session, principal_store())


def qr_resolver():
    return QrIdentityResolver(principal_store(), visitor_pass_lifecycle())


def entry_ledger():
    return EntryLedger(db.session, qr_resolver())


def sos_registry():
    return SosBroadcastRegistry(db.session, broadcaster=emit_sos_event)


def incident_desk():
    return IncidentDesk(db.session)


def principal_admin():
    return PrincipalAdministration(principal_store(), credential_issuer())


def analytics_overview():
    return AnalyticsOverview(db.session)
