# ==============================================================================
# RUTAS DE CATEGORÍAS - /api/categorias
# ==============================================================================

from flask import Blueprint

from galugas import constants
from galugas.app_container import current_container
from galugas.helpers import request_data, success_response
from galugas.middleware.auth import current_user, require_admin

categorias_bp = Blueprint('categorias', __name__)


@categorias_bp.route('/')
def list_categorias():
    categorias = current_container().categoria_service.get_categorias()
    return success_response(categorias, count=len(categorias))


@categorias_bp.route('/<int:categoria_id>')
def get_categoria(categoria_id):
    return success_response(current_container().categoria_service.get_categoria_by_id(categoria_id))


@categorias_bp.route('/', methods=['POST'])
@require_admin
def create_categoria():
    container = current_container()
    created = container.categoria_service.create_categoria(request_data())
    container.log_service.record_admin(
        current_user(),
        constants.ACCION_CREACION,
        constants.MODULO_CATEGORIAS,
        f"Creó categoría: {created['nombre']}",
        recurso_afectado='Categoria',
        id_recurso_afectado=created['id'],
    )
    return success_response(created, status=201, message='Categoría creada exitosamente')


@categorias_bp.route('/<int:categoria_id>', methods=['PUT'])
@require_admin
def update_categoria(categoria_id):
    container = current_container()
    data = request_data()
    result = container.categoria_service.update_categoria(categoria_id, data)
    container.log_service.record_admin(
        current_user(),
        constants.ACCION_ACTUALIZACION,
        constants.MODULO_CATEGORIAS,
        f'Actualizó categoría ID: {categoria_id}',
        metadata={'campos_actualizados': list(data.keys())},
        recurso_afectado='Categoria',
        id_recurso_afectado=categoria_id,
    )
    return success_response(message=result['message'])


@categorias_bp.route('/<int:categoria_id>', methods=['DELETE'])
@require_admin
def delete_categoria(categoria_id):
    container = current_container()
    result = container.categoria_service.delete_categoria(categoria_id)
    container.log_service.record_admin(
        current_user(),
        constants.ACCION_ELIMINACION,
        constants.MODULO_CATEGORIAS,
        f'Eliminó categoría ID: {categoria_id}',
        recurso_afectado='Categoria',
        id_recurso_afectado=categoria_id,
    )
    return success_response(message=result['message'])
