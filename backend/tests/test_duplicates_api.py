from erp import get_db
from erp.models.duplicate_alert import DuplicateAlert
from tests.test_utils_seed import add_client, add_staff, auth_headers


def _admin():
    return auth_headers('Super Admin', name='Alice Admin')


def test_scan_and_list(app_context, client):
    add_client('a', 'Acme')
    add_client('b', 'ACME')
    add_client('c', 'Other')
    headers = _admin()
    resp = client.post('/settings/duplicates/scan', headers=headers)
    assert resp.status_code == 200
    assert resp.get_json() == {'alerts_created': 1}
    again = client.post('/settings/duplicates/scan', headers=headers)
    assert again.get_json() == {'alerts_created': 0}

    body = client.get('/settings/duplicates?status=Open', headers=headers).get_json()
    assert body['pagination']['total'] == 1
    assert body['pagination']['total_pages'] == 1
    [alert] = body['data']
    assert alert['entity_type'] == 'Client'
    assert (alert['entity_id1'], alert['entity_id2']) == ('a', 'b')
    assert alert['value'] == 'Acme'
    assert alert['resolved_by'] is None


def test_manager_cannot_scan(app_context, client):
    resp = client.post('/settings/duplicates/scan', headers=auth_headers('Manager'))
    assert resp.status_code == 403
    err = resp.get_json()['error']
    assert err['status'] == 403
    assert err['permission'] == 'manage_system_settings'
    assert get_db().query(DuplicateAlert).count() == 0


def test_stale_role_cannot_list(app_context, client):
    resp = client.get('/settings/duplicates', headers=auth_headers('Owner'))
    assert resp.status_code == 403


def test_missing_token_is_401(client):
    assert client.post('/settings/duplicates/scan').status_code == 401


def test_bad_status_filter_is_400(app_context, client):
    resp = client.get('/settings/duplicates?status=Closed', headers=_admin())
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == 'status invalid'


def test_bad_page_is_400(app_context, client):
    resp = client.get('/settings/duplicates?page=0', headers=_admin())
    assert resp.status_code == 400


def test_resolve_then_ignore_conflicts(app_context, client):
    add_staff('s1', 'Ann', phone='555')
    add_staff('s2', 'Anne', phone='555')
    headers = _admin()
    client.post('/settings/duplicates/scan', headers=headers)
    alert_id = get_db().query(DuplicateAlert).one().id

    ok = client.post(f'/settings/duplicates/{alert_id}/resolve', headers=headers)
    assert ok.status_code == 200
    body = ok.get_json()
    assert body['status'] == 'Resolved'
    assert body['resolved_by'] == 'Alice Admin'
    assert body['resolved_at']

    again = client.post(f'/settings/duplicates/{alert_id}/ignore', headers=auth_headers('Super Admin', name='Bob'))
    assert again.status_code == 409
    assert again.get_json()['error']['status'] == 409

    listed = client.get('/settings/duplicates?status=Resolved', headers=headers).get_json()
    assert listed['data'][0]['resolved_by'] == 'Alice Admin'


def test_ignore_missing_alert_is_404(app_context, client):
    resp = client.post('/settings/duplicates/4242/ignore', headers=_admin())
    assert resp.status_code == 404


def test_open_count_degrades_for_unprivileged(app_context, client):
    add_client('a', 'Acme')
    add_client('b', 'acme')
    client.post('/settings/duplicates/scan', headers=_admin())
    assert client.get('/settings/duplicates/count', headers=_admin()).get_json() == {'open': 1}
    storekeeper = client.get('/settings/duplicates/count', headers=auth_headers('Storekeeper'))
    assert storekeeper.status_code == 200
    assert storekeeper.get_json() == {'open': 0}


def test_compare_entities(app_context, client):
    add_client('a', 'Acme', phone='9')
    add_client('b', 'Beta', phone='9')
    headers = _admin()
    client.post('/settings/duplicates/scan', headers=headers)
    alert_id = get_db().query(DuplicateAlert).one().id
    body = client.get(f'/settings/duplicates/{alert_id}/entities', headers=headers).get_json()
    assert body['alert']['field'] == 'phone'
    assert body['entity1']['name'] == 'Acme'
    assert body['entity2']['name'] == 'Beta'
