# ==============================================================================
# GALUGAS - CLIENTE WEB (tienda + panel de administración)
# ==============================================================================
# Renderiza HTML con Jinja y consume la API vía APIClient.
#
# ESTRUCTURA:
# ├── api_client.py     → Cliente HTTP (requests) con reenvío de cookie
# ├── auth.py           → Compuertas con redirección
# ├── routes/index.py   → Tienda pública
# ├── routes/auth.py    → Login, registro, perfil
# ├── routes/admin.py   → Panel (Vendedor / Administrador)
# └── routes/api.py     → Proxies JSON para el JavaScript del navegador
# ==============================================================================

import datetime
import logging
from typing import Any, Dict, Optional

from flask import Flask, current_app, flash, redirect, render_template, request, session, url_for

from galugas import config
from galugas.client.api_client import APIClient, APIError
from galugas.logging_setup import setup_logging

logger = logging.getLogger('galugas.client')

API_CLIENT_KEY = 'galugas.api_client'


def get_api() -> APIClient:
    return current_app.extensions[API_CLIENT_KEY]


def _set_security_headers(response):
    response.headers['X-Frame-Options'] = 'SAMEORIGIN'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
    response.headers['X-XSS-Protection'] = '1; mode=block'
    return response


def create_client_app(
    config_overrides: Optional[Dict[str, Any]] = None,
    api_client: Optional[APIClient] = None
) -> Flask:
    """
    Crea la aplicación cliente.

    Args:
        config_overrides: Reemplazos de configuración (tests)
        api_client: Cliente de API a usar (por defecto uno contra API_URL)
    """
    app = Flask(__name__)
    app.config.update({
        'SECRET_KEY': config.CLIENT_SESSION_SECRET,
        'SESSION_COOKIE_NAME': config.SESSION_COOKIE_NAME,
        'SESSION_COOKIE_HTTPONLY': True,
        'SESSION_COOKIE_SAMESITE': 'Lax',
        'SESSION_COOKIE_SECURE': config.SESSION_COOKIE_SECURE,
        'PERMANENT_SESSION_LIFETIME': datetime.timedelta(seconds=config.SESSION_MAX_AGE),
        'MAX_CONTENT_LENGTH': config.MAX_FILE_SIZE,
        'SERVER_URL': config.SERVER_URL,
        'LOG_TO_FILES': True,
    })
    if config_overrides:
        app.config.update(config_overrides)

    setup_logging(to_files=app.config['LOG_TO_FILES'])
    app.extensions[API_CLIENT_KEY] = api_client or APIClient()

    @app.context_processor
    def _inject_globals():
        return {
            'current_user': session.get('user'),
            'server_url': app.config['SERVER_URL'],
            'current_year': datetime.date.today().year,
        }

    app.after_request(_set_security_headers)

    @app.errorhandler(APIError)
    def _handle_api_error(err: APIError):
        if err.status == 401:
            session.pop('user', None)
            session.pop('api_cookie', None)
            flash('Tu sesión expiró. Por favor inicia sesión nuevamente', 'error')
            return redirect(url_for('client_auth.login'))
        if err.status == 403:
            flash(err.message, 'error')
            return redirect(url_for('client_index.index'))
        status = 503 if err.is_network_error else err.status
        return render_template('pages/error.html', status=status, message=err.message), status

    @app.errorhandler(404)
    def _not_found(err):
        return render_template(
            'pages/error.html', status=404, message=f'Página no encontrada - {request.path}'
        ), 404

    @app.errorhandler(413)
    def _too_large(err):
        flash('El archivo es demasiado grande', 'error')
        return redirect(request.referrer or url_for('client_index.index'))

    from galugas.client.routes.admin import admin_bp
    from galugas.client.routes.api import api_proxy_bp
    from galugas.client.routes.auth import auth_bp
    from galugas.client.routes.index import index_bp

    app.register_blueprint(index_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(api_proxy_bp, url_prefix='/api')

    logger.info('Cliente Galugas listo (API=%s)', app.extensions[API_CLIENT_KEY].base_url)
    return app
