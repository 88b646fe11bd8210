import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list; defaults cover the Vite dev server
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',') if o.strip()
    ]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Engine.IO heartbeat (seconds)
    SOCKETIO_PING_TIMEOUT = int(os.environ.get('SOCKETIO_PING_TIMEOUT', '60'))
    SOCKETIO_PING_INTERVAL = int(os.environ.get('SOCKETIO_PING_INTERVAL', '25'))
    # Recent-spell buffer: capacity, max age (ms) and sweep interval (sec)
    SPELL_HISTORY_MAX = int(os.environ.get('SPELL_HISTORY_MAX', '50'))
    SPELL_MAX_AGE_MS = int(os.environ.get('SPELL_MAX_AGE_MS', '5000'))
    SPELL_SWEEP_INTERVAL_SEC = float(os.environ.get('SPELL_SWEEP_INTERVAL_SEC', '5'))
    # Presence defaults for freshly joined sessions
    DEFAULT_ZONE_ID = os.environ.get('DEFAULT_ZONE_ID', 'great_hall')
    DEFAULT_MAX_HEALTH = int(os.environ.get('DEFAULT_MAX_HEALTH', '100'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    SERVER_NAME_LABEL = os.environ.get('SERVER_NAME_LABEL', 'Wizard Game Server')
    SERVER_VERSION = os.environ.get('SERVER_VERSION', '1.0.0')
