from flask import Blueprint, current_app, jsonify, request
from datetime import datetime, timezone
from wizardgame.services.realtime import parse_position


presence = Blueprint('presence', __name__)


def _relay():
    return current_app.extensions['wizardgame.relay']


def _optional_int(value):
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@presence.route('/game/player/active', methods=['GET'])
def active_players():
    return jsonify(_relay().active_players())


@presence.route('/game/player/position', methods=['POST'])
def update_position():
    """Refresh the live presence snapshot of a connected player.

    Persisting the position belongs to the player store; this only touches
    the in-memory session, and reports whether one was live.
    """
    data = request.get_json(silent=True) or {}
    player_id = data.get('playerId')
    position = parse_position(data.get('position'))
    if not player_id or position is None:
        return jsonify({'error': 'playerId and position required'}), 400

    session = _relay().registry.update_presence(
        player_id,
        position=position,
        zone_id=data.get('zoneId') if isinstance(data.get('zoneId'), str) else None,
        health=_optional_int(data.get('health')),
        max_health=_optional_int(data.get('maxHealth')),
    )
    return jsonify({'success': True, 'live': session is not None})


@presence.route('/debug/active-players', methods=['GET'])
def debug_active_players():
    sessions = _relay().registry.list_all()
    players = []
    for s in sessions:
        pd = s.presence_dict()
        pd['connectionId'] = s.connection_id
        players.append(pd)
    return jsonify({
        'activeCount': len(players),
        'players': players,
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })


@presence.route('/debug/recent-spells', methods=['GET'])
def debug_recent_spells():
    spells = _relay().spells.snapshot()
    return jsonify({'count': len(spells), 'spells': spells})
