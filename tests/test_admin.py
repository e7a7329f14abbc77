import pytest

from gateflow.db.initializers.account_initializer import DEFAULT_ACCOUNTS, initialize_default_accounts
from gateflow.models.enums import Role
from gateflow.models.system_logs import SystemLog
from gateflow.services.analytics import AnalyticsOverview
from gateflow.services.entry_ledger import EntryLedger
from gateflow.services.errors import BadRequest, Conflict, Forbidden, NotFound
from gateflow.services.principal_admin import PrincipalAdministration
from gateflow.services.qr_resolver import QrIdentityResolver
from gateflow.services.visitor_passes import VisitorPassLifecycle


@pytest.fixture
def administration(store, issuer):
    return PrincipalAdministration(store, issuer)


def test_admin_can_create_any_role(administration, admin, session):
    guard = administration.create_principal(
        admin,
        email='New.Guard@vsu.edu.ph',
        password='guardpass1',
        first_name='Pedro',
        last_name='Penduko',
        role='GUARD'
    )
    assert guard.role == Role.GUARD
    assert guard.email == 'new.guard@vsu.edu.ph'
    assert guard.qr_token

    log = session.query(SystemLog).filter_by(action='create_user').one()
    assert log.principal_id == admin.id
    assert log.details['user_id'] == guard.id


def test_create_rejects_duplicates_and_bad_input(administration, admin, student):
    with pytest.raises(Conflict):
        administration.create_principal(
            admin, email=student.email, password='password123',
            first_name='Dup', last_name='Licate', role='STAFF'
        )
    with pytest.raises(BadRequest):
        administration.create_principal(
            admin, email='x@vsu.edu.ph', password='password123',
            first_name='Bad', last_name='Role', role='SUPERUSER'
        )


def test_non_admins_cannot_manage_principals(administration, guard, student):
    with pytest.raises(Forbidden):
        administration.list_principals(guard)
    with pytest.raises(Forbidden):
        administration.toggle_active(guard, student.id)


def test_toggle_and_role_change(administration, admin, student):
    assert administration.toggle_active(admin, student.id).is_active is False
    assert administration.toggle_active(admin, student.id).is_active is True

    promoted = administration.change_role(admin, student.id, 'GUARD')
    assert promoted.role == Role.GUARD


def test_admin_cannot_lock_themselves_out(administration, admin):
    with pytest.raises(BadRequest):
        administration.toggle_active(admin, admin.id)
    with pytest.raises(BadRequest):
        administration.change_role(admin, admin.id, 'STUDENT')
    with pytest.raises(BadRequest):
        administration.delete_principal(admin, admin.id)


def test_delete_principal(administration, admin, store, make_principal):
    target = make_principal(Role.STAFF)
    target_id = target.id

    snapshot = administration.delete_principal(admin, target_id)
    assert snapshot['id'] == target_id
    assert store.get(target_id) is None
    with pytest.raises(NotFound):
        administration.get_principal(admin, target_id)


def test_delete_refuses_principals_with_audit_history(administration, admin, guard, student, session, store):
    ledger = EntryLedger(session, QrIdentityResolver(store, VisitorPassLifecycle(session, store)))
    ledger.record_scan(guard, student.qr_token, 'ENTRY', 'Main Gate')

    with pytest.raises(Conflict):
        administration.delete_principal(admin, student.id)
    with pytest.raises(Conflict):
        administration.delete_principal(admin, guard.id)
    assert store.get(student.id) is not None


def test_system_logs_are_paginated(administration, admin, make_principal):
    for _ in range(3):
        administration.toggle_active(admin, make_principal().id)

    result = administration.system_logs(admin, page=1, per_page=2, log_type='admin_action')
    assert result['total'] == 3
    assert result['pages'] == 2
    assert len(result['logs']) == 2
    assert administration.system_logs(admin, log_type='something_else')['total'] == 0


def test_admin_endpoints(client, admin, student, auth_headers):
    headers = auth_headers(admin)

    response = client.post('/admin/users', json={
        'email': 'faculty@vsu.edu.ph',
        'password': 'facultypass',
        'firstName': 'Rosa',
        'lastName': 'Lim',
        'role': 'FACULTY'
    }, headers=headers)
    assert response.status_code == 201
    created_id = response.get_json()['id']
    assert 'passwordHash' not in response.get_json()

    users = client.get('/admin/users', headers=headers).get_json()
    assert {u['id'] for u in users} == {admin.id, student.id, created_id}

    response = client.put(f'/admin/users/{created_id}/role', json={'role': 'STAFF'}, headers=headers)
    assert response.get_json()['role'] == 'STAFF'

    response = client.patch(f'/admin/users/{student.id}/toggle-active', headers=headers)
    assert response.get_json()['isActive'] is False

    assert client.delete(f'/admin/users/{created_id}', headers=headers).status_code == 200
    assert client.get(f'/admin/users/{created_id}', headers=headers).status_code == 404

    logs = client.get('/admin/logs?type=admin_action', headers=headers).get_json()
    assert logs['total'] == 4
    assert client.get('/admin/users', headers=auth_headers(student)).status_code == 401


def test_seed_accounts_are_created_once(store, issuer):
    created = initialize_default_accounts(store, issuer.hash_password)
    assert created == [account['email'] for account in DEFAULT_ACCOUNTS]
    assert store.find_by_email(DEFAULT_ACCOUNTS[0]['email']).role == Role.ADMIN
    assert store.find_by_email(DEFAULT_ACCOUNTS[1]['email']).role == Role.GUARD

    assert initialize_default_accounts(store, issuer.hash_password) == []


def test_seeded_admin_can_log_in(store, issuer):
    initialize_default_accounts(store, issuer.hash_password)
    account = DEFAULT_ACCOUNTS[0]
    session = issuer.login(account['email'], account['password'])
    assert session['user']['role'] == 'ADMIN'


def test_analytics_overview(session, admin, guard, student, store):
    ledger = EntryLedger(session, QrIdentityResolver(store, VisitorPassLifecycle(session, store)))
    ledger.record_scan(guard, student.qr_token, 'ENTRY', 'Main Gate')

    overview = AnalyticsOverview(session).overview(admin)
    assert overview['totalUsers'] == 3
    assert overview['totalStudents'] == 1
    assert overview['totalGuards'] == 1
    assert overview['entriesToday'] == 1
    assert overview['activeSos'] == 0

    with pytest.raises(Forbidden):
        AnalyticsOverview(session).overview(guard)


def test_analytics_endpoint(client, admin, auth_headers):
    response = client.get('/analytics/overview', headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.get_json()['totalUsers'] == 1


def test_create_principal_rejects_malformed_fields(administration, admin, store):
    with pytest.raises(BadRequest):
        administration.create_principal(
            admin, email='staff@vsu.edu.ph', password='password123',
            first_name='Rosa', last_name=12345, role='STAFF'
        )
    with pytest.raises(BadRequest):
        administration.create_principal(
            admin, email='staff@vsu.edu.ph', password=12345678,
            first_name='Rosa', last_name='Lim', role='STAFF'
        )
    assert store.find_by_email('staff@vsu.edu.ph') is None


def test_system_logs_later_pages_and_per_page_cap(administration, admin, make_principal):
    for _ in range(3):
        administration.toggle_active(admin, make_principal().id)

    second = administration.system_logs(admin, page=2, per_page=2)
    assert second['current_page'] == 2
    assert len(second['logs']) == 1

    beyond = administration.system_logs(admin, page=9, per_page=2)
    assert beyond['logs'] == []
    assert beyond['total'] == 3

    capped = administration.system_logs(admin, per_page=1000)
    assert capped['pages'] == 1
    assert len(capped['logs']) == 3


def test_analytics_ignores_visitor_passes_past_their_window(session, admin, store):
    from datetime import timedelta

    from gateflow.models.base import utcnow

    lifecycle = VisitorPassLifecycle(session, store)
    now = utcnow()
    fields = {
        'full_name': 'Juan Dela Cruz',
        'contact_number': '+639001234567',
        'purpose': 'Delivery',
        'person_to_visit': 'Registrar',
    }
    lifecycle.create(
        visit_date=now - timedelta(days=1),
        time_window_start=now - timedelta(days=1),
        time_window_end=now - timedelta(hours=1),
        **fields
    )
    lifecycle.create(
        visit_date=now,
        time_window_start=now,
        time_window_end=now + timedelta(hours=8),
        **fields
    )

    overview = AnalyticsOverview(session).overview(admin)
    assert overview['pendingVisitors'] == 1
    assert overview['approvedVisitors'] == 0
