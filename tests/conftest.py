"""
GateFlow - Test Configuration and Fixtures
"""
import pytest
from faker import Faker
from flask_jwt_extended import create_access_token

from gateflow.config import TestConfig
from gateflow.db.db import db
from gateflow.manage import create_app
from gateflow.models.enums import Role
from gateflow.services.credential_issuer import CredentialIssuer
from gateflow.services.principal_store import PrincipalStore

fake = Faker()

DEFAULT_PASSWORD = 'testpassword123'


class RecordingNotifier:
    """Stands in for the email sender; ``deliver`` controls the outcome."""

    def __init__(self, deliver=True):
        self.deliver = deliver
        self.sent = []

    def __call__(self, email, reset_link, ttl_minutes):
        self.sent.append((email, reset_link, ttl_minutes))
        return self.deliver


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    return db.session


@pytest.fixture
def store(session):
    return PrincipalStore(session)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def issuer(app, store, notifier):
    return CredentialIssuer(
        store,
        notifier=notifier,
        link_builder=lambda token: f'http://frontend.test/reset-password?token={token}',
        config=app.config
    )


@pytest.fixture
def make_principal(store, issuer):
    """Create a principal directly in the store."""

    def _make(role=Role.STUDENT, email=None, password=DEFAULT_PASSWORD, is_active=True):
        principal = store.create(
            email=email or fake.unique.email(),
            password_hash=issuer.hash_password(password),
            first_name=fake.first_name(),
            last_name=fake.last_name(),
            role=role,
            contact_number=fake.phone_number()
        )
        if not is_active:
            principal.is_active = False
            store.save()
        return principal

    return _make


@pytest.fixture
def student(make_principal):
    return make_principal(Role.STUDENT)


@pytest.fixture
def guard(make_principal):
    return make_principal(Role.GUARD)


@pytest.fixture
def admin(make_principal):
    return make_principal(Role.ADMIN)


@pytest.fixture
def auth_headers(app):
    """Bearer headers for a principal."""

    def _headers(principal):
        token = create_access_token(
            identity=principal.id,
            additional_claims={'email': principal.email, 'role': principal.role.value}
        )
        return {'Authorization': f'Bearer {token}'}

    return _headers


@pytest.fixture
def visitor_payload():
    def _payload(**overrides):
        payload = {
            'fullName': 'Juan Dela Cruz',
            'contactNumber': '+639001234567',
            'purpose': 'Meeting with department head',
            'personToVisit': 'Dr. Maria Santos',
            'visitDate': '2099-03-01T08:00:00.000Z',
            'timeWindowStart': '2099-03-01T08:00:00.000Z',
            'timeWindowEnd': '2099-03-01T17:00:00.000Z',
        }
        payload.update(overrides)
        return payload

    return _payload
