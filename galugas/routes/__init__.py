# ==============================================================================
# RUTAS DE LA API (Blueprints)
# ==============================================================================
# ESTRUCTURA:
# ├── __init__.py             → /api (índice) y /api/health
# ├── auth.py                 → /api/auth
# ├── dispositivos.py         → /api/dispositivos
# ├── categorias.py           → /api/categorias
# ├── marcas.py               → /api/marcas
# ├── informacion_tecnica.py  → /api/informacion-tecnica
# ├── usuarios.py             → /api/usuarios
# └── logs.py                 → /api/logs
#
# Las rutas NO contienen lógica de negocio: validan la entrada mínima,
# llaman al servicio y registran la actividad explícita.
# ==============================================================================

from flask import Blueprint, Flask, current_app, jsonify

from galugas.app_container import current_container
from galugas.helpers import timestamp

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health():
    db_ok = current_container().db.health_check()
    return jsonify({
        'status': 'OK' if db_ok else 'DEGRADED',
        'database': 'connected' if db_ok else 'disconnected',
        'timestamp': timestamp(),
        'environment': current_app.config['GALUGAS_ENV'],
        'version': current_app.config['APP_VERSION'],
    }), 200 if db_ok else 503


@api_bp.route('/')
def index():
    return jsonify({
        'message': 'Bienvenido a la API de Galugas',
        'version': current_app.config['APP_VERSION'],
        'timestamp': timestamp(),
        'endpoints': {
            'auth': '/api/auth',
            'dispositivos': '/api/dispositivos',
            'categorias': '/api/categorias',
            'marcas': '/api/marcas',
            'informacion_tecnica': '/api/informacion-tecnica',
            'logs': '/api/logs',
            'usuarios': '/api/usuarios',
        },
    })


def register_blueprints(app: Flask) -> None:
    """Monta todos los blueprints bajo /api."""
    from galugas.routes.auth import auth_bp
    from galugas.routes.categorias import categorias_bp
    from galugas.routes.dispositivos import dispositivos_bp
    from galugas.routes.informacion_tecnica import informacion_tecnica_bp
    from galugas.routes.logs import logs_bp
    from galugas.routes.marcas import marcas_bp
    from galugas.routes.usuarios import usuarios_bp

    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(dispositivos_bp, url_prefix='/api/dispositivos')
    app.register_blueprint(categorias_bp, url_prefix='/api/categorias')
    app.register_blueprint(marcas_bp, url_prefix='/api/marcas')
    app.register_blueprint(informacion_tecnica_bp, url_prefix='/api/informacion-tecnica')
    app.register_blueprint(usuarios_bp, url_prefix='/api/usuarios')
    app.register_blueprint(logs_bp, url_prefix='/api/logs')
