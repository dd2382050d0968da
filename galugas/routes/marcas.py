# ==============================================================================
# RUTAS DE MARCAS - /api/marcas
# ==============================================================================

from flask import Blueprint

from galugas import constants
from galugas.app_container import current_container
from galugas.helpers import request_data, success_response
from galugas.middleware.auth import current_user, require_admin

marcas_bp = Blueprint('marcas', __name__)


@marcas_bp.route('/')
def list_marcas():
    marcas = current_container().marca_service.get_marcas()
    return success_response(marcas, count=len(marcas))


@marcas_bp.route('/<int:marca_id>')
def get_marca(marca_id):
    return success_response(current_container().marca_service.get_marca_by_id(marca_id))


@marcas_bp.route('/', methods=['POST'])
@require_admin
def create_marca():
    container = current_container()
    created = container.marca_service.create_marca(request_data())
    container.log_service.record_admin(
        current_user(),
        constants.ACCION_CREACION,
        constants.MODULO_MARCAS,
        f"Creó marca: {created['nombre']}",
        recurso_afectado='Marca',
        id_recurso_afectado=created['id'],
    )
    return success_response(created, status=201, message='Marca creada exitosamente')


@marcas_bp.route('/<int:marca_id>', methods=['PUT'])
@require_admin
def update_marca(marca_id):
    container = current_container()
    result = container.marca_service.update_marca(marca_id, request_data())
    container.log_service.record_admin(
        current_user(),
        constants.ACCION_ACTUALIZACION,
        constants.MODULO_MARCAS,
        f'Actualizó marca ID: {marca_id}',
        recurso_afectado='Marca',
        id_recurso_afectado=marca_id,
    )
    return success_response(message=result['message'])


@marcas_bp.route('/<int:marca_id>', methods=['DELETE'])
@require_admin
def delete_marca(marca_id):
    container = current_container()
    result = container.marca_service.delete_marca(marca_id)
    container.log_service.record_admin(
        current_user(),
        constants.ACCION_ELIMINACION,
        constants.MODULO_MARCAS,
        f'Eliminó marca ID: {marca_id}',
        recurso_afectado='Marca',
        id_recurso_afectado=marca_id,
    )
    return success_response(message=result['message'])
