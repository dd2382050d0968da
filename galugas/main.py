# ==============================================================================
# GALUGAS - SERVIDOR API (Flask)
# ==============================================================================
# Fábrica de la aplicación API:
#   - Sesión firmada (cookie galugas.sid, 24 h)
#   - Cabeceras de seguridad y límite de peticiones por IP (Flask-Limiter)
#   - Profiling de rutas y auditoría automática de peticiones
#   - Blueprints bajo /api y archivos subidos en /uploads/<archivo>
#   - Manejo centralizado de errores en formato JSON
#
# USO:
#   app = create_app()                                 # producción / desarrollo
#   app = create_app({'DATABASE_URL': 'sqlite://'})    # pruebas
# ==============================================================================

import datetime
import logging
from typing import Any, Dict, Optional

from flask import Flask, send_from_directory
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from galugas import config
from galugas.app_container import EXTENSION_KEY, AppContainer, get_container
from galugas.errors import AppError, error_response, register_error_handlers
from galugas.logging_setup import setup_logging
from galugas.middleware.auth import inject_user_data
from galugas.middleware.logging_middleware import init_activity_logging
from galugas.performance_logger import init_profiling
from galugas.routes import register_blueprints
from galugas.schema import init_db

logger = logging.getLogger('galugas')

RATE_LIMIT_MESSAGE = 'Demasiadas solicitudes desde esta IP, intente nuevamente más tarde.'


def _default_config() -> Dict[str, Any]:
    return {
        'SECRET_KEY': config.SESSION_SECRET,
        'SESSION_COOKIE_NAME': config.SESSION_COOKIE_NAME,
        'SESSION_COOKIE_HTTPONLY': True,
        'SESSION_COOKIE_SAMESITE': 'Lax',
        'SESSION_COOKIE_SECURE': config.SESSION_COOKIE_SECURE,
        'PERMANENT_SESSION_LIFETIME': datetime.timedelta(seconds=config.SESSION_MAX_AGE),
        'MAX_CONTENT_LENGTH': config.MAX_FILE_SIZE,
        'UPLOAD_PATH': config.UPLOAD_PATH,
        'LOG_RETENTION_DAYS': config.LOG_RETENTION_DAYS,
        'GALUGAS_ENV': config.NODE_ENV,
        'APP_VERSION': config.APP_VERSION,
        'DATABASE_URL': config.get_database_url(),
        'AUTO_INIT_DB': config.AUTO_INIT_DB,
        'LOG_TO_FILES': True,
        'ENABLE_PROFILING': True,
        'RATELIMIT_ENABLED': True,
        'RATELIMIT_STORAGE_URI': 'memory://',
    }


def _set_security_headers(response):
    response.headers['X-Frame-Options'] = 'SAMEORIGIN'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
    response.headers['X-XSS-Protection'] = '1; mode=block'
    return response


def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Crea y configura la aplicación API.

    Args:
        config_overrides: Valores que reemplazan la configuración por defecto
                          (DATABASE_URL, AUTO_INIT_DB, RATELIMIT_ENABLED, ...)

    Returns:
        App Flask lista para servir
    """
    app = Flask(__name__)
    app.config.update(_default_config())
    app.json.ensure_ascii = False
    if config_overrides:
        app.config.update(config_overrides)

    setup_logging(to_files=app.config['LOG_TO_FILES'])

    # Un contenedor (y un pool) por aplicación
    AppContainer.reset_instance()
    container = get_container(app.config['DATABASE_URL'])
    app.extensions[EXTENSION_KEY] = container
    if app.config['AUTO_INIT_DB']:
        init_db(container.db)

    limiter = Limiter(
        get_remote_address,
        app=app,
        default_limits=[f'{config.RATE_LIMIT_MAX} per {config.RATE_LIMIT_WINDOW} minutes'],
        storage_uri=app.config['RATELIMIT_STORAGE_URI'],
    )
    app.extensions['galugas.limiter'] = limiter

    # El orden importa: profiling primero deja g.start_time para la auditoría
    init_profiling(app)
    app.before_request(inject_user_data)
    init_activity_logging(app)
    app.after_request(_set_security_headers)

    register_error_handlers(app)

    @app.errorhandler(429)
    def _rate_limited(err):
        return error_response(AppError(RATE_LIMIT_MESSAGE, 429))

    register_blueprints(app)

    @app.route('/uploads/<path:filename>')
    @limiter.exempt
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_PATH'], filename)

    logger.info('API Galugas lista (entorno=%s)', app.config['GALUGAS_ENV'])
    return app
