from flask import current_app, request

from wizardgame import socketio
from wizardgame.services.realtime import EventRelay
from wizardgame.services.realtime.scheduler import start_spell_sweeper


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _relay() -> EventRelay:
    return current_app.extensions['wizardgame.relay']


def handle_connect(auth=None):
    _relay().connect(_get_sid())
    start_spell_sweeper(current_app._get_current_object())


def handle_disconnect(reason=None):
    _relay().disconnect(_get_sid())


def handle_join(data):
    _relay().join(_get_sid(), data)


def handle_move(data):
    _relay().move(_get_sid(), data)


def handle_spell_cast(data):
    _relay().spell_cast(_get_sid(), data)


def handle_damage_dealt(data):
    _relay().damage_dealt(_get_sid(), data)


def handle_player_death(data=None):
    _relay().player_death(_get_sid(), data)


def handle_chat_message(data):
    _relay().chat_message(_get_sid(), data)


def handle_socket_error(exc):
    # Fire-and-forget channel: log and keep the connection open
    event = (getattr(request, 'event', None) or {}).get('message')
    current_app.logger.exception(f"[socket-error] sid={_get_sid()} event={event}: {exc}")


EVENT_HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'join': handle_join,
    'move': handle_move,
    'spell-cast': handle_spell_cast,
    'damage-dealt': handle_damage_dealt,
    'player-death': handle_player_death,
    'chat-message': handle_chat_message,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    for event, handler in EVENT_HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
    socketio.on_error_default(handle_socket_error)
