import logging
from flask import Flask, current_app, request, jsonify
from flask_compress import Compress
from werkzeug.exceptions import HTTPException

from config import Config
from database import init_db
from routes.api import ALL_BLUEPRINTS
from services.auth import seed_default_password
from services.cache import ResponseCache, EXTENSION_KEY

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = 'authorization, x-client-info, apikey, content-type'


def configure_logging(level='INFO'):
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        root.addHandler(handler)
    # Reduce request/connection noise
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def create_app(overrides=None):
    """Build the app, its response cache and its admin store."""
    app = Flask(__name__)
    app.config.from_object(Config())
    if overrides:
        app.config.update(overrides)

    # Gzip/Brotli compression for all responses
    app.config['COMPRESS_ALGORITHM'] = ['br', 'gzip']
    app.config['COMPRESS_MIMETYPES'] = ['application/json']
    Compress(app)

    if not app.config['TMDB_API_KEY'] or not app.config['RAWG_API_KEY']:
        logger.warning('TMDB_API_KEY or RAWG_API_KEY not set in environment variables')

    # One cache per process, shared by every proxy blueprint
    app.extensions[EXTENSION_KEY] = ResponseCache()

    init_db(app.config['DATABASE_PATH'])
    if app.config.get('ADMIN_DEFAULT_PASSWORD'):
        seed_default_password(app.config['ADMIN_DEFAULT_PASSWORD'], app.config['DATABASE_PATH'])

    for bp in ALL_BLUEPRINTS:
        app.register_blueprint(bp)

    app.after_request(add_api_headers)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)
    return app


def add_api_headers(response):
    """CORS, cache and security headers for API responses."""
    if request.path.startswith('/api/'):
        response.headers['Access-Control-Allow-Origin'] = current_app.config['CORS_ORIGIN']
        response.headers['Access-Control-Allow-Headers'] = CORS_ALLOW_HEADERS
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
        # Only successful reads may be stored downstream; errors must hit the upstream again
        if (request.method == 'GET' and response.status_code < 400
                and not request.path.startswith('/api/auth')):
            response.headers['Cache-Control'] = 'public, max-age=60'
        else:
            response.headers['Cache-Control'] = 'no-store'
    # Security headers
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'SAMEORIGIN'
    return response


def handle_http_error(e):
    messages = {404: 'Not found', 405: 'Method not allowed'}
    return jsonify({'error': messages.get(e.code, e.name)}), e.code


def handle_unexpected_error(e):
    logger.exception(f'Unhandled error on {request.path}: {e}')
    return jsonify({'error': 'An error occurred processing your request'}), 500


if __name__ == '__main__':
    config = Config()
    configure_logging(config.LOG_LEVEL)
    create_app().run(host='0.0.0.0', port=config.PORT, debug=False, threaded=True)
