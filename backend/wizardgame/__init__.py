from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

# Inline handlers: a connection's events and its disconnect run in arrival order
socketio = SocketIO(async_mode=None, async_handlers=False)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        ping_timeout=flask_app.config.get('SOCKETIO_PING_TIMEOUT', 60),
        ping_interval=flask_app.config.get('SOCKETIO_PING_INTERVAL', 25),
    )

    # Live-session state is per app: one registry, one spell buffer, one relay
    from wizardgame.services.realtime import (
        DEFAULT_MAX_HEALTH, DEFAULT_ZONE_ID, EventRelay, FanOut, SessionRegistry, SpellBuffer,
    )
    registry = SessionRegistry(
        default_zone_id=flask_app.config.get('DEFAULT_ZONE_ID', DEFAULT_ZONE_ID),
        default_max_health=flask_app.config.get('DEFAULT_MAX_HEALTH', DEFAULT_MAX_HEALTH),
    )
    spells = SpellBuffer(
        capacity=flask_app.config.get('SPELL_HISTORY_MAX', 50),
        max_age_ms=flask_app.config.get('SPELL_MAX_AGE_MS', 5000),
    )
    flask_app.extensions['wizardgame.relay'] = EventRelay(
        registry, spells, FanOut(socketio, namespace), logger=flask_app.logger
    )

    # Import and register blueprints here
    from wizardgame.main import main
    flask_app.register_blueprint(main)

    from wizardgame.api.presence import presence
    flask_app.register_blueprint(presence, url_prefix='/api')

    # Register Socket.IO event handlers on the initialized socketio instance
    from wizardgame.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    return flask_app
