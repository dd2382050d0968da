# ==============================================================================
# COMPUERTAS DE ACCESO (API)
# ==============================================================================
# Decoradores que protegen las rutas según el rol guardado en la sesión:
#
#   anónimo → autenticado → elevado (Vendedor/Administrador) → administrador
#
# Cada rechazo registra primero un log ACCESO_DENEGADO (módulo SEGURIDAD) y
# luego responde JSON 401/403. El handler protegido NUNCA se ejecuta.
# ==============================================================================

from functools import wraps

from flask import g, jsonify, request, session

from galugas import constants
from galugas.app_container import current_container
from galugas.helpers import timestamp, to_int

MSG_UNAUTHORIZED = 'Acceso no autorizado. Por favor inicie sesión.'
MSG_ADMIN_REQUIRED = 'Se requieren privilegios de administrador'
MSG_VENDEDOR_REQUIRED = 'Se requieren privilegios de vendedor'
MSG_FORBIDDEN_RESOURCE = 'No tiene permisos para acceder a este recurso'


def current_user():
    """Usuario de la sesión (dict sin contraseña) o None."""
    return session.get('user')


def _deny(status: int, message: str, motivo: str):
    current_container().log_service.record_denied_access(current_user(), request.path, motivo)
    return jsonify({'success': False, 'error': message, 'timestamp': timestamp()}), status


def require_auth(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not current_user():
            return _deny(401, MSG_UNAUTHORIZED, 'Sin sesión')
        return f(*args, **kwargs)
    return wrapper


def require_admin(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        user = current_user()
        if not user:
            return _deny(401, MSG_UNAUTHORIZED, 'Sin sesión')
        if user.get('rol_nombre') != constants.ROLE_ADMIN:
            return _deny(403, MSG_ADMIN_REQUIRED, f"Rol {user.get('rol_nombre')} sin privilegios de administrador")
        return f(*args, **kwargs)
    return wrapper


def require_vendedor(f):
    """Vendedores y administradores."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        user = current_user()
        if not user:
            return _deny(401, MSG_UNAUTHORIZED, 'Sin sesión')
        if user.get('rol_nombre') not in constants.ELEVATED_ROLES:
            return _deny(403, MSG_VENDEDOR_REQUIRED, f"Rol {user.get('rol_nombre')} sin privilegios de vendedor")
        return f(*args, **kwargs)
    return wrapper


def can_access_own_resource(param: str = 'id'):
    """
    Permite el acceso a administradores o al dueño del recurso.

    Args:
        param: Nombre del parámetro de ruta con el usuario_id del recurso

    Uso:
        @bp.route('/<int:id>/actividad')
        @can_access_own_resource('id')
        def actividad(id): ...
    """
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            user = current_user()
            if not user:
                return _deny(401, MSG_UNAUTHORIZED, 'Sin sesión')
            owner_id = to_int(kwargs.get(param))
            if user.get('rol_nombre') != constants.ROLE_ADMIN and owner_id != to_int(user.get('usuario_id')):
                return _deny(403, MSG_FORBIDDEN_RESOURCE, f'Recurso de otro usuario ({param}={owner_id})')
            return f(*args, **kwargs)
        return wrapper
    return deco


def inject_user_data():
    """before_request: deja el usuario de la sesión en g.user."""
    g.user = current_user()
