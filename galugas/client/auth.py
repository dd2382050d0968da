# ==============================================================================
# COMPUERTAS DE ACCESO (TIENDA / PANEL)
# ==============================================================================
# Igual que en la API pero con redirección + mensaje flash:
#   sin sesión        → /auth/login (guarda return_to)
#   rol insuficiente  → /
# ==============================================================================

from functools import wraps

from flask import flash, redirect, request, session, url_for

from galugas import constants

MSG_LOGIN_REQUIRED = 'Por favor inicia sesión para acceder a esta página'
MSG_FORBIDDEN = 'No tienes permisos para acceder a esta página'


def _to_login():
    session['return_to'] = request.full_path if request.query_string else request.path
    flash(MSG_LOGIN_REQUIRED, 'error')
    return redirect(url_for('client_auth.login'))


def require_auth(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if 'user' not in session:
            return _to_login()
        return f(*args, **kwargs)
    return wrapper


def role_required(*roles):
    """Permite el acceso solo a los roles indicados."""
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            user = session.get('user')
            if not user:
                return _to_login()
            if user.get('rol_nombre') not in roles:
                flash(MSG_FORBIDDEN, 'error')
                return redirect(url_for('client_index.index'))
            return f(*args, **kwargs)
        return wrapper
    return deco


require_admin = role_required(constants.ROLE_ADMIN)
require_vendedor = role_required(constants.ROLE_ADMIN, constants.ROLE_VENDEDOR)
