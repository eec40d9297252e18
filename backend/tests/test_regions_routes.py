def _post(client, path, payload, headers):
    response = client.post(path, json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_region_routes_require_session(client):
    assert client.get('/api/regions/islands').status_code == 401
    assert client.get('/api/regions/provinces').status_code == 401
    assert client.post('/api/regions/villages', json={'name': 'Gambir'}).status_code == 401


def test_build_region_hierarchy(client, auth_headers):
    island = _post(client, '/api/regions/islands', {'name': 'Java', 'code': 'java', 'lat': -7.6, 'long': 110.7}, auth_headers)
    province = _post(client, '/api/regions/provinces', {'name': 'DKI Jakarta', 'islandId': island['id']}, auth_headers)
    regency = _post(
        client, '/api/regions/regencies',
        {'name': 'Kota Jakarta Pusat', 'provinceId': province['id'], 'type': 'KOTA'},
        auth_headers,
    )
    district = _post(client, '/api/regions/districts', {'name': 'Gambir', 'regencyId': regency['id']}, auth_headers)
    village = _post(
        client, '/api/regions/villages',
        {'name': 'Gambir', 'districtId': district['id'], 'postalCode': '10110'},
        auth_headers,
    )

    assert island['code'] == 'JAVA'
    assert province['islandId'] == island['id']
    assert regency['type'] == 'KOTA'
    assert district['regencyId'] == regency['id']
    assert village['postalCode'] == '10110'
    assert village['districtId'] == district['id']


def test_list_islands_and_filter_provinces(client, auth_headers):
    java = _post(client, '/api/regions/islands', {'name': 'Java', 'code': 'JAVA'}, auth_headers)
    sumatra = _post(client, '/api/regions/islands', {'name': 'Sumatra', 'code': 'SUMATRA'}, auth_headers)
    _post(client, '/api/regions/provinces', {'name': 'West Java', 'islandId': java['id']}, auth_headers)
    _post(client, '/api/regions/provinces', {'name': 'DKI Jakarta', 'islandId': java['id']}, auth_headers)
    _post(client, '/api/regions/provinces', {'name': 'Aceh', 'islandId': sumatra['id']}, auth_headers)

    islands = client.get('/api/regions/islands', headers=auth_headers).get_json()
    assert [island['name'] for island in islands] == ['Java', 'Sumatra']

    java_provinces = client.get(f"/api/regions/provinces?islandId={java['id']}", headers=auth_headers).get_json()
    assert [province['name'] for province in java_provinces] == ['DKI Jakarta', 'West Java']

    all_provinces = client.get('/api/regions/provinces', headers=auth_headers).get_json()
    assert len(all_provinces) == 3

    ignored_filter = client.get('/api/regions/provinces?islandId=abc', headers=auth_headers).get_json()
    assert len(ignored_filter) == 3


def test_region_validation_errors(client, auth_headers):
    no_name = client.post('/api/regions/islands', json={'code': 'BALI'}, headers=auth_headers)
    assert no_name.status_code == 400
    assert no_name.get_json()['message'].startswith('name:')

    bad_type = client.post('/api/regions/regencies', json={'name': 'Kab. Bogor', 'type': 'CITY'}, headers=auth_headers)
    assert bad_type.status_code == 400
    assert bad_type.get_json()['message'].startswith('type:')

    orphan = client.post('/api/regions/districts', json={'name': 'Gambir', 'regencyId': 77}, headers=auth_headers)
    assert orphan.status_code == 400
    assert orphan.get_json()['message'] == 'regencyId: referenced record 77 does not exist'


def test_duplicate_island_code_is_rejected(client, auth_headers):
    _post(client, '/api/regions/islands', {'name': 'Bali', 'code': 'BALI'}, auth_headers)

    duplicate = client.post('/api/regions/islands', json={'name': 'Bali Island', 'code': 'bali'}, headers=auth_headers)

    assert duplicate.status_code == 400
    assert duplicate.get_json()['message'].startswith('code:')


def test_provinces_filter_beyond_range_is_empty(client, auth_headers):
    client.post('/api/regions/provinces', json={'name': 'Bali'}, headers=auth_headers)

    response = client.get('/api/regions/provinces?islandId=99999999999999999999', headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json() == []

