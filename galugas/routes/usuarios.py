# ==============================================================================
# RUTAS DE USUARIOS - /api/usuarios
# ==============================================================================
# Todo solo Administrador, salvo /<id>/actividad (el propio usuario también)
# ==============================================================================

from flask import Blueprint, request

from galugas import constants
from galugas.app_container import current_container
from galugas.errors import AppError
from galugas.helpers import request_data, success_response, to_int
from galugas.middleware.auth import can_access_own_resource, current_user, require_admin

usuarios_bp = Blueprint('usuarios', __name__)


def _log(accion, descripcion, usuario_id, metadata=None):
    current_container().log_service.record_admin(
        current_user(),
        accion,
        constants.MODULO_USUARIOS,
        descripcion,
        metadata=metadata,
        recurso_afectado='Usuario',
        id_recurso_afectado=usuario_id,
    )


@usuarios_bp.route('/')
@require_admin
def list_usuarios():
    usuarios = current_container().user_service.get_usuarios(request.args.to_dict())
    return success_response(usuarios, count=len(usuarios))


@usuarios_bp.route('/<int:usuario_id>')
@require_admin
def get_usuario(usuario_id):
    return success_response(current_container().user_service.get_usuario_by_id(usuario_id))


@usuarios_bp.route('/<int:usuario_id>/actividad')
@can_access_own_resource('usuario_id')
def actividad_usuario(usuario_id):
    container = current_container()
    container.user_service.get_usuario_by_id(usuario_id)
    actividades = container.log_service.get_user_activity(usuario_id, request.args.get('limite', 20))
    return success_response(actividades, count=len(actividades))


@usuarios_bp.route('/<int:usuario_id>', methods=['PUT'])
@require_admin
def update_usuario(usuario_id):
    data = request_data()
    result = current_container().user_service.update_usuario(usuario_id, data)
    _log(
        constants.ACCION_ACTUALIZACION,
        f'Actualizó usuario ID: {usuario_id}',
        usuario_id,
        metadata={'campos_actualizados': list(data.keys())},
    )
    return success_response(message=result['message'])


@usuarios_bp.route('/<int:usuario_id>', methods=['DELETE'])
@require_admin
def delete_usuario(usuario_id):
    result = current_container().user_service.delete_usuario(usuario_id, current_user()['usuario_id'])
    _log(constants.ACCION_ELIMINACION, f'Eliminó usuario ID: {usuario_id}', usuario_id)
    return success_response(message=result['message'])


@usuarios_bp.route('/<int:usuario_id>/role', methods=['PUT'])
@require_admin
def update_role(usuario_id):
    rol_id = to_int(request_data().get('rol_id'))
    if not rol_id:
        raise AppError('El ID del rol es requerido', 400)

    result = current_container().user_service.update_user_role(usuario_id, rol_id)
    _log(
        constants.ACCION_ACTUALIZACION,
        f'Cambió el rol del usuario ID: {usuario_id}',
        usuario_id,
        metadata={'rol_id': rol_id},
    )
    return success_response(message=result['message'])


@usuarios_bp.route('/<int:usuario_id>/status', methods=['PUT'])
@require_admin
def update_status(usuario_id):
    estado_id = to_int(request_data().get('estado_id'))
    if not estado_id:
        raise AppError('El ID del estado es requerido', 400)

    result = current_container().user_service.update_user_status(
        usuario_id, estado_id, current_user()['usuario_id']
    )
    _log(
        constants.ACCION_ACTUALIZACION,
        f'Cambió el estado del usuario ID: {usuario_id}',
        usuario_id,
        metadata={'estado_id': estado_id},
    )
    return success_response(message=result['message'])
