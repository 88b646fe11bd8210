def test_health_and_ping(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    body = res.get_json()
    assert body['status'] == 'ok'
    assert body['uptime'] >= 0

    res = client.get('/api/ping')
    assert res.get_json()['pong'] is True


def test_info_counts_joined_players(client, sio_factory):
    assert client.get('/api/info').get_json()['onlinePlayers'] == 0
    a = sio_factory()
    sio_factory()  # connected but never joins
    a.emit('join', {'playerId': 'p1', 'username': 'Harry', 'house': 'Gryffindor'})
    info = client.get('/api/info').get_json()
    assert info['onlinePlayers'] == 1
    assert info['name'] == 'Wizard Game Server'
    assert info['maintenanceMode'] is False


def test_active_players_lists_presence(client, sio_factory):
    a = sio_factory()
    a.emit('join', {'playerId': 'p1', 'username': 'Harry', 'house': 'Gryffindor', 'position': {'x': 2, 'y': 3}})
    players = client.get('/api/game/player/active').get_json()['players']
    assert players == [{
        'playerId': 'p1', 'username': 'Harry', 'house': 'Gryffindor',
        'position': {'x': 2, 'y': 3}, 'zoneId': 'great_hall', 'health': 100, 'maxHealth': 100,
    }]


def test_position_update_requires_fields(client):
    res = client.post('/api/game/player/position', json={'playerId': 'p1'})
    assert res.status_code == 400
    res = client.post('/api/game/player/position', json={'position': {'x': 1, 'y': 1}})
    assert res.status_code == 400
    res = client.post('/api/game/player/position', json={'playerId': 'p1', 'position': {'x': 'a'}})
    assert res.status_code == 400


def test_position_update_touches_live_session_only(client, sio_factory, relay):
    res = client.post('/api/game/player/position', json={'playerId': 'p1', 'position': {'x': 1, 'y': 1}})
    assert res.get_json() == {'success': True, 'live': False}

    a = sio_factory()
    a.emit('join', {'playerId': 'p1', 'username': 'Harry', 'house': 'Gryffindor'})
    res = client.post('/api/game/player/position', json={
        'playerId': 'p1', 'position': {'x': 9, 'y': 8}, 'zoneId': 'library', 'health': 60, 'maxHealth': 110,
    })
    assert res.get_json() == {'success': True, 'live': True}
    session = relay.registry.get(relay.registry.resolve('p1'))
    assert (session.position.x, session.position.y) == (9, 8)
    assert (session.zone_id, session.health, session.max_health) == ('library', 60, 110)


def test_debug_views(client, sio_factory):
    a = sio_factory()
    a.emit('join', {'playerId': 'p1', 'username': 'Harry', 'house': 'Gryffindor'})
    a.emit('spell-cast', {'spellName': 'Lumos', 'position': {'x': 0, 'y': 0}})

    active = client.get('/api/debug/active-players').get_json()
    assert active['activeCount'] == 1
    assert active['players'][0]['connectionId']

    spells = client.get('/api/debug/recent-spells').get_json()
    assert spells['count'] == 1
    assert spells['spells'][0]['spellName'] == 'Lumos'
    assert spells['spells'][0]['casterId'] == 'p1'


def test_unknown_route_is_json_404(client):
    res = client.get('/api/nope')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Endpoint not found', 'path': '/api/nope', 'method': 'GET'}
