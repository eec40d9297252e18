from conftest import msisdn_payload, tower_payload


def _create_tower(client, headers, **overrides):
    response = client.post('/api/bts', json=tower_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_bts_routes_require_session(client):
    assert client.get('/api/bts').status_code == 401
    assert client.post('/api/bts', json=tower_payload()).status_code == 401
    assert client.get('/api/bts/1').status_code == 401
    assert client.put('/api/bts/1', json={'height': 1}).status_code == 401
    assert client.delete('/api/bts/1').status_code == 401


def test_api_key_does_not_open_bts_routes(client, app):
    with app.app_context():
        app.extensions['storage'].create_api_key({'key': 'sk_test_bts_key', 'owner': 'Ops'})

    response = client.get('/api/bts', headers={'x-api-key': 'sk_test_bts_key'})
    assert response.status_code == 401


def test_create_tower_returns_camel_case_record(client, auth_headers):
    tower = _create_tower(client, auth_headers)

    assert tower['id'] > 0
    assert tower['cellId'] == 'CID-1001'
    assert tower['networkType'] == '4G'
    assert tower['coverageRadius'] == 1500
    assert tower['villageId'] is None
    assert tower['updatedAt']


def test_create_tower_validation_reports_first_field(client, auth_headers):
    payload = tower_payload()
    payload.pop('cellId')
    response = client.post('/api/bts', json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()['message'].startswith('cellId:')

    bad_lat = client.post('/api/bts', json=tower_payload(lat=123.0), headers=auth_headers)
    assert bad_lat.status_code == 400
    assert bad_lat.get_json()['message'].startswith('lat:')

    bad_network = client.post('/api/bts', json=tower_payload(networkType='LTE'), headers=auth_headers)
    assert bad_network.status_code == 400
    assert bad_network.get_json()['message'].startswith('networkType:')


def test_list_towers_paginates_with_filtered_total(client, auth_headers):
    for idx in range(15):
        _create_tower(client, auth_headers, cellId=f'TSEL-{idx:02d}', operator='Telkomsel')
    for idx in range(3):
        _create_tower(client, auth_headers, cellId=f'XL-{idx:02d}', operator='XL Axiata')

    response = client.get('/api/bts?operator=Telkomsel&page=1&limit=10', headers=auth_headers)

    assert response.status_code == 200
    payload = response.get_json()
    assert len(payload['items']) == 10
    assert payload['total'] == 15
    assert payload['page'] == 1
    assert payload['limit'] == 10
    assert payload['totalPages'] == 2
    assert {item['operator'] for item in payload['items']} == {'Telkomsel'}

    page_two = client.get('/api/bts?operator=Telkomsel&page=2&limit=10', headers=auth_headers).get_json()
    assert len(page_two['items']) == 5
    seen = {item['id'] for item in payload['items']} | {item['id'] for item in page_two['items']}
    assert len(seen) == 15


def test_list_towers_defaults_and_bad_paging_values(client, auth_headers):
    for idx in range(12):
        _create_tower(client, auth_headers, cellId=f'CID-{idx}')

    default = client.get('/api/bts', headers=auth_headers).get_json()
    assert default['page'] == 1
    assert default['limit'] == 10
    assert len(default['items']) == 10
    assert default['total'] == 12

    garbage = client.get('/api/bts?page=abc&limit=-5', headers=auth_headers).get_json()
    assert garbage['page'] == 1
    assert garbage['limit'] == 10

    capped = client.get('/api/bts?limit=5000', headers=auth_headers).get_json()
    assert capped['limit'] == 100
    assert len(capped['items']) == 12


def test_list_towers_search_matches_address_case_insensitively(client, auth_headers):
    _create_tower(client, auth_headers, cellId='A', address='Jl. Thamrin, Central JAKARTA')
    _create_tower(client, auth_headers, cellId='B', address='Jl. Asia Afrika, Bandung')

    response = client.get('/api/bts?search=jakarta', headers=auth_headers)

    payload = response.get_json()
    assert payload['total'] == 1
    assert payload['items'][0]['cellId'] == 'A'


def test_get_tower_and_missing_tower(client, auth_headers):
    tower = _create_tower(client, auth_headers)

    found = client.get(f"/api/bts/{tower['id']}", headers=auth_headers)
    assert found.status_code == 200
    assert found.get_json()['cellId'] == 'CID-1001'

    missing = client.get('/api/bts/999', headers=auth_headers)
    assert missing.status_code == 404
    assert missing.get_json() == {'message': 'BTS tower not found'}


def test_update_tower_applies_only_supplied_fields(client, auth_headers):
    tower = _create_tower(client, auth_headers)

    response = client.put(
        f"/api/bts/{tower['id']}",
        json={'height': 60, 'networkType': '5G'},
        headers=auth_headers,
    )

    assert response.status_code == 200
    updated = response.get_json()
    assert updated['height'] == 60
    assert updated['networkType'] == '5G'
    assert updated['cellId'] == tower['cellId']
    assert updated['address'] == tower['address']
    assert updated['updatedAt'] >= tower['updatedAt']


def test_update_tower_rejects_null_for_required_field(client, auth_headers):
    tower = _create_tower(client, auth_headers)

    response = client.put(f"/api/bts/{tower['id']}", json={'cellId': None}, headers=auth_headers)

    assert response.status_code == 400
    assert 'cellId cannot be null' in response.get_json()['message']


def test_update_missing_tower_returns_404(client, auth_headers):
    response = client.put('/api/bts/404', json={'height': 5}, headers=auth_headers)

    assert response.status_code == 404


def test_delete_tower_is_idempotent(client, auth_headers):
    tower = _create_tower(client, auth_headers)

    first = client.delete(f"/api/bts/{tower['id']}", headers=auth_headers)
    second = client.delete(f"/api/bts/{tower['id']}", headers=auth_headers)
    unknown = client.delete('/api/bts/987654', headers=auth_headers)

    assert first.status_code == 204
    assert second.status_code == 204
    assert unknown.status_code == 204
    assert client.get(f"/api/bts/{tower['id']}", headers=auth_headers).status_code == 404


def test_delete_tower_keeps_subscriber_lookup_working(client, auth_headers):
    tower = _create_tower(client, auth_headers)
    created = client.post('/api/msisdn', json=msisdn_payload(lastBtsId=tower['id']), headers=auth_headers)
    assert created.status_code == 201

    assert client.delete(f"/api/bts/{tower['id']}", headers=auth_headers).status_code == 204

    lookup = client.get('/api/msisdn/lookup?msisdn=628120000001', headers=auth_headers)
    assert lookup.status_code == 200
    assert lookup.get_json()['location'] is None
    assert lookup.get_json()['lastBtsId'] is None


def test_ids_and_pages_beyond_integer_range(client, auth_headers):
    tower = _create_tower(client, auth_headers)
    huge = '99999999999999999999999'

    assert client.delete(f'/api/bts/{huge}', headers=auth_headers).status_code == 204
    assert client.delete('/api/bts/3000000000', headers=auth_headers).status_code == 204
    assert client.get(f'/api/bts/{huge}', headers=auth_headers).status_code == 404
    assert client.put(f'/api/bts/{huge}', json={'height': 1}, headers=auth_headers).status_code == 404

    far_page = client.get('/api/bts?page=99999999999999999999', headers=auth_headers)
    assert far_page.status_code == 200
    payload = far_page.get_json()
    assert payload['items'] == []
    assert payload['total'] == 1
    assert payload['limit'] == 10

    assert client.get(f"/api/bts/{tower['id']}", headers=auth_headers).status_code == 200


def test_tower_with_out_of_range_village_is_rejected(client, auth_headers):
    response = client.post('/api/bts', json=tower_payload(villageId=3000000000), headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()['message'].startswith('villageId:')
