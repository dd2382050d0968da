# ==============================================================================
# RUTAS DE AUTENTICACIÓN - /api/auth
# ==============================================================================

from flask import Blueprint, jsonify, session

from galugas import constants
from galugas.app_container import current_container
from galugas.errors import AppError
from galugas.helpers import request_data, success_response, timestamp
from galugas.middleware.auth import current_user, require_auth

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    container = current_container()
    data = request_data()
    email = data.get('email')

    try:
        user = container.auth_service.authenticate(email, data.get('password'))
    except AppError:
        container.log_service.record_system(
            constants.ACCION_ERROR_AUTENTICACION,
            constants.MODULO_AUTENTICACION,
            f'Intento fallido de inicio de sesión para email: {email}',
        )
        raise

    session.clear()
    session.permanent = True
    session['user'] = user

    container.log_service.record(
        user['usuario_id'],
        user.get('rol_nombre'),
        constants.ACCION_INICIO_SESION,
        constants.MODULO_AUTENTICACION,
        'Inició sesión en el sistema',
    )
    return success_response(user, message='Login exitoso')


@auth_bp.route('/logout', methods=['POST'])
def logout():
    user = current_user()
    session.clear()
    if user:
        current_container().log_service.record(
            user.get('usuario_id'),
            user.get('rol_nombre'),
            constants.ACCION_CIERRE_SESION,
            constants.MODULO_AUTENTICACION,
            'Cerró sesión del sistema',
        )
    return success_response(message='Logout exitoso')


@auth_bp.route('/register', methods=['POST'])
def register():
    container = current_container()
    created = container.auth_service.register(request_data())

    container.log_service.record_system(
        constants.ACCION_REGISTRO_USUARIO,
        constants.MODULO_AUTENTICACION,
        f"Nuevo usuario registrado: {created['email']}",
        metadata={'usuario_id': created['id']},
    )
    return success_response(created, status=201, message='Usuario registrado exitosamente')


@auth_bp.route('/me')
@require_auth
def me():
    user = current_container().auth_service.get_user_by_id(current_user()['usuario_id'])
    return success_response(user)


@auth_bp.route('/check-admin')
@require_auth
def check_admin():
    is_admin = current_container().auth_service.is_admin(current_user()['usuario_id'])
    return jsonify({'success': True, 'isAdmin': is_admin, 'timestamp': timestamp()})


@auth_bp.route('/profile', methods=['PUT'])
@require_auth
def update_profile():
    container = current_container()
    user = current_user()
    updated = container.auth_service.update_profile(user['usuario_id'], request_data())

    # La sesión refleja el perfil nuevo
    session['user'] = updated

    container.log_service.record(
        user['usuario_id'],
        user.get('rol_nombre'),
        constants.ACCION_ACTUALIZACION_PERFIL,
        constants.MODULO_AUTENTICACION,
        'Actualizó su perfil',
    )
    return success_response(updated, message='Perfil actualizado exitosamente')


@auth_bp.route('/change-password', methods=['PUT'])
@require_auth
def change_password():
    container = current_container()
    user = current_user()
    data = request_data()
    container.auth_service.change_password(
        user['usuario_id'],
        data.get('currentPassword') or data.get('current_password'),
        data.get('newPassword') or data.get('new_password'),
    )

    container.log_service.record(
        user['usuario_id'],
        user.get('rol_nombre'),
        constants.ACCION_CAMBIO_CONTRASENA,
        constants.MODULO_AUTENTICACION,
        'Cambió su contraseña',
    )
    return success_response(message='Contraseña cambiada exitosamente')
