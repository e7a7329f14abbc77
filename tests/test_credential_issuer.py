from datetime import timedelta

import pytest
from flask_jwt_extended import decode_token
from werkzeug.security import check_password_hash

from gateflow.models.base import utcnow
from gateflow.models.enums import Role
from gateflow.models.principal import Principal
from gateflow.services.credential_issuer import (
    INVALID_CREDENTIALS_MESSAGE,
    RESET_REQUESTED_MESSAGE,
)
from gateflow.services.errors import BadRequest, Conflict, Unauthorized


def register(issuer, email='alice@x.edu', password='password123', role='STUDENT'):
    return issuer.register(
        email=email,
        password=password,
        first_name='Alice',
        last_name='Reyes',
        role=role
    )


def test_register_mints_token_and_unique_qr(issuer, store):
    first = register(issuer)
    second = register(issuer, email='bob@x.edu')

    assert first['accessToken']
    assert first['user']['qrToken']
    assert first['user']['qrToken'] != second['user']['qrToken']
    assert 'password_hash' not in first['user']
    assert 'resetToken' not in first['user']

    claims = decode_token(first['accessToken'])
    assert claims['sub'] == first['user']['id']
    assert claims['email'] == 'alice@x.edu'
    assert claims['role'] == 'STUDENT'


def test_register_normalizes_email_and_hashes_password(issuer, store):
    register(issuer, email='  Alice@X.edu ')
    principal = store.find_by_email('alice@x.edu')

    assert principal.email == 'alice@x.edu'
    assert principal.password_hash != 'password123'
    assert check_password_hash(principal.password_hash, 'password123')


def test_register_duplicate_email_conflicts(issuer):
    register(issuer)
    with pytest.raises(Conflict):
        register(issuer, email='ALICE@x.edu')


def test_register_race_is_resolved_by_uniqueness_violation(issuer, store, monkeypatch):
    register(issuer)
    # The pre-flight check misses the concurrent insert
    monkeypatch.setattr(store, 'find_by_email', lambda email: None)

    with pytest.raises(Conflict):
        register(issuer)
    assert store.session.query(Principal).count() == 1


@pytest.mark.parametrize('role', ['GUARD', 'ADMIN', 'JANITOR'])
def test_register_rejects_privileged_or_unknown_roles(issuer, role):
    with pytest.raises(BadRequest):
        register(issuer, role=role)


def test_register_enforces_password_length(issuer):
    with pytest.raises(BadRequest):
        register(issuer, password='short')


def test_login_succeeds_for_active_principal(issuer):
    register(issuer)
    result = issuer.login('alice@x.edu', 'password123')
    assert result['user']['email'] == 'alice@x.edu'
    assert result['accessToken']


def test_login_failures_share_one_message(issuer, make_principal):
    register(issuer)
    make_principal(Role.STUDENT, email='inactive@x.edu', password='password123', is_active=False)

    messages = []
    for email, password in [
        ('alice@x.edu', 'wrong-password'),
        ('nobody@x.edu', 'password123'),
        ('inactive@x.edu', 'password123'),
    ]:
        with pytest.raises(Unauthorized) as excinfo:
            issuer.login(email, password)
        messages.append(excinfo.value.message)

    assert set(messages) == {INVALID_CREDENTIALS_MESSAGE}


def test_reset_request_for_unknown_email_is_generic(issuer, notifier):
    result = issuer.request_password_reset('nobody@x.edu')
    assert result == {'message': RESET_REQUESTED_MESSAGE}
    assert notifier.sent == []


def test_reset_request_delivers_without_leaking_token(issuer, notifier, store):
    register(issuer)
    result = issuer.request_password_reset('alice@x.edu')

    assert result == {'message': RESET_REQUESTED_MESSAGE}
    principal = store.find_by_email('alice@x.edu')
    assert principal.reset_token
    assert len(principal.reset_token) == 64
    assert notifier.sent[0][0] == 'alice@x.edu'
    assert principal.reset_token in notifier.sent[0][1]
    assert notifier.sent[0][2] == 15


def test_reset_request_falls_back_to_link_when_delivery_fails(issuer, notifier, store):
    notifier.deliver = False
    register(issuer)
    result = issuer.request_password_reset('alice@x.edu')

    principal = store.find_by_email('alice@x.edu')
    assert result['resetToken'] == principal.reset_token
    assert result['resetLink'].endswith(principal.reset_token)


def test_reset_secret_expires_after_fifteen_minutes(issuer, store):
    register(issuer)
    before = utcnow()
    issuer.request_password_reset('alice@x.edu')
    principal = store.find_by_email('alice@x.edu')

    window = principal.reset_expiry - before
    assert timedelta(minutes=14, seconds=59) <= window <= timedelta(minutes=15, seconds=5)


def test_new_reset_request_overwrites_previous_secret(issuer, notifier, store):
    notifier.deliver = False
    register(issuer)
    first = issuer.request_password_reset('alice@x.edu')['resetToken']
    second = issuer.request_password_reset('alice@x.edu')['resetToken']

    assert first != second
    with pytest.raises(BadRequest):
        issuer.reset_password(first, 'newpassword1')
    issuer.reset_password(second, 'newpassword1')


def test_reset_token_is_single_use(issuer, notifier, store):
    notifier.deliver = False
    register(issuer)
    token = issuer.request_password_reset('alice@x.edu')['resetToken']

    issuer.reset_password(token, 'newpassword1')
    with pytest.raises(BadRequest):
        issuer.reset_password(token, 'anotherpassword')

    principal = store.find_by_email('alice@x.edu')
    store.session.refresh(principal)
    assert principal.reset_token is None
    assert principal.reset_expiry is None
    issuer.login('alice@x.edu', 'newpassword1')
    with pytest.raises(Unauthorized):
        issuer.login('alice@x.edu', 'password123')


def test_expired_reset_token_is_rejected(issuer, notifier, store):
    notifier.deliver = False
    register(issuer)
    token = issuer.request_password_reset('alice@x.edu')['resetToken']
    principal = store.find_by_email('alice@x.edu')
    principal.reset_expiry = utcnow() - timedelta(seconds=1)
    store.save()

    with pytest.raises(BadRequest):
        issuer.reset_password(token, 'newpassword1')


def test_consume_reset_secret_matches_only_once(issuer, notifier, store):
    notifier.deliver = False
    register(issuer)
    token = issuer.request_password_reset('alice@x.edu')['resetToken']
    new_hash = issuer.hash_password('newpassword1')

    assert store.consume_reset_secret(token, new_hash) is True
    assert store.consume_reset_secret(token, new_hash) is False


@pytest.mark.parametrize('overrides', [
    {'first_name': 12345},
    {'last_name': ['Reyes']},
    {'contact_number': 639001234567},
    {'first_name': 'A' * 101},
    {'email': 'a' * 250 + '@x.edu'},
])
def test_register_rejects_malformed_fields(issuer, store, overrides):
    fields = {
        'email': 'alice@x.edu',
        'password': 'password123',
        'first_name': 'Alice',
        'last_name': 'Reyes',
        'role': 'STUDENT',
    }
    fields.update(overrides)
    with pytest.raises(BadRequest):
        issuer.register(**fields)
    assert store.session.query(Principal).count() == 0


def test_login_rejects_non_text_credentials(issuer):
    register(issuer)
    with pytest.raises(BadRequest):
        issuer.login('alice@x.edu', 12345678)
    with pytest.raises(BadRequest):
        issuer.login(['alice@x.edu'], 'password123')


def test_reset_rejects_non_text_token(issuer):
    with pytest.raises(BadRequest):
        issuer.reset_password(12345, 'newpassword1')


def test_unknown_email_still_checks_a_password_hash(issuer, monkeypatch):
    from gateflow.services import credential_issuer

    checked = []
    real_check = credential_issuer.check_password_hash

    def recording_check(password_hash, password):
        checked.append(password_hash)
        return real_check(password_hash, password)

    monkeypatch.setattr(credential_issuer, 'check_password_hash', recording_check)
    with pytest.raises(Unauthorized):
        issuer.login('ghost@x.edu', 'password123')
    assert len(checked) == 1
