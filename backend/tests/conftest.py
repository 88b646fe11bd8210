import os
import sys
import pytest

# Ensure the backend root (containing the `wizardgame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from wizardgame import create_app, socketio


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'


class RecordingFanOut:
    """Stands in for FanOut and keeps every delivery as (target, to, event, data)."""

    def __init__(self):
        self.sent = []

    def reply(self, connection_id, event, data):
        self.sent.append(('one', connection_id, event, data))

    def to_one(self, connection_id, event, data):
        self.sent.append(('one', connection_id, event, data))

    def to_others(self, sender_id, event, data, exclude=()):
        skipped = (sender_id, *exclude) if exclude else sender_id
        self.sent.append(('others', skipped, event, data))

    def to_all(self, event, data):
        self.sent.append(('all', None, event, data))

    def events(self, name):
        return [s for s in self.sent if s[2] == name]


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def relay(flask_app):
    return flask_app.extensions['wizardgame.relay']


@pytest.fixture()
def sio_factory(flask_app):
    """Open as many Socket.IO test clients as a test needs."""
    opened = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        assert test_client.is_connected()
        opened.append(test_client)
        return test_client

    yield _connect
    for test_client in opened:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def recording_fanout():
    return RecordingFanOut()
