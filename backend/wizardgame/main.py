import time

from flask import Blueprint, current_app, jsonify, request

main = Blueprint('main', __name__)

_started_at = time.time()


def _relay():
    return current_app.extensions['wizardgame.relay']


@main.route('/')
def index():
    return jsonify({'message': f"Welcome to the {current_app.config.get('SERVER_NAME_LABEL')}!"})


@main.route('/api/health')
def health():
    return jsonify({
        'status': 'ok',
        'timestamp': int(time.time() * 1000),
        'uptime': round(time.time() - _started_at, 3),
    })


@main.route('/api/ping')
def ping():
    return jsonify({'pong': True, 'timestamp': int(time.time() * 1000)})


@main.route('/api/info')
def info():
    return jsonify({
        'version': current_app.config.get('SERVER_VERSION'),
        'name': current_app.config.get('SERVER_NAME_LABEL'),
        'onlinePlayers': _relay().online_count,
        'maintenanceMode': False,
        'message': 'Welcome to Hogwarts!',
    })


@main.app_errorhandler(404)
def not_found(error):
    return jsonify({'error': 'Endpoint not found', 'path': request.path, 'method': request.method}), 404


@main.app_errorhandler(500)
def internal_error(error):
    current_app.logger.error(f"[http-error] {request.method} {request.path}: {error}")
    message = str(error) if current_app.debug else 'Internal server error'
    return jsonify({'error': message}), 500
