# ==============================================================================
# RUTAS DE DISPOSITIVOS - /api/dispositivos
# ==============================================================================
# Lectura pública · alta/edición: Vendedor · baja: Administrador
# ==============================================================================

from flask import Blueprint, request

from galugas import constants
from galugas.app_container import current_container
from galugas.errors import AppError
from galugas.helpers import base_url, request_data, success_response
from galugas.middleware.auth import current_user, require_admin, require_vendedor
from galugas.middleware.upload import delete_file, save_request_image

dispositivos_bp = Blueprint('dispositivos', __name__)


@dispositivos_bp.route('/')
def list_dispositivos():
    dispositivos = current_container().dispositivo_service.get_dispositivos(request.args.to_dict(), base_url())
    return success_response(dispositivos, count=len(dispositivos))


@dispositivos_bp.route('/search')
def search():
    term = request.args.get('q', '')
    container = current_container()
    dispositivos = container.dispositivo_service.search_dispositivos(term, base_url())

    user = current_user()
    if user:
        container.log_service.record_admin(
            user,
            constants.ACCION_BUSQUEDA,
            constants.MODULO_DISPOSITIVOS,
            f'Buscó dispositivos: "{term}"',
            metadata={'termino': term, 'resultados': len(dispositivos)},
        )
    return success_response(dispositivos, count=len(dispositivos), termino=term)


@dispositivos_bp.route('/estadisticas')
def estadisticas():
    return success_response(current_container().dispositivo_service.get_estadisticas())


@dispositivos_bp.route('/categoria/<int:categoria_id>')
def by_categoria(categoria_id):
    dispositivos = current_container().dispositivo_service.get_by_categoria(categoria_id, base_url())
    return success_response(dispositivos, count=len(dispositivos))


@dispositivos_bp.route('/marca/<int:marca_id>')
def by_marca(marca_id):
    dispositivos = current_container().dispositivo_service.get_by_marca(marca_id, base_url())
    return success_response(dispositivos, count=len(dispositivos))


@dispositivos_bp.route('/<int:dispositivo_id>')
def get_dispositivo(dispositivo_id):
    dispositivo = current_container().dispositivo_service.get_dispositivo_by_id(dispositivo_id, base_url())
    return success_response(dispositivo)


@dispositivos_bp.route('/', methods=['POST'])
@require_vendedor
def create_dispositivo():
    container = current_container()
    data = request_data()
    image = save_request_image()
    try:
        created = container.dispositivo_service.create_dispositivo(data, image)
    except AppError:
        if image:
            delete_file(image)
        raise

    container.log_service.record_admin(
        current_user(),
        constants.ACCION_CREACION,
        constants.MODULO_DISPOSITIVOS,
        f"Creó nuevo dispositivo: {data.get('nombre')}",
        metadata={
            'dispositivo_id': created['id'],
            'nombre': data.get('nombre'),
            'precio': data.get('precio'),
            'imagen_subida': bool(image),
        },
        recurso_afectado='Dispositivo',
        id_recurso_afectado=created['id'],
    )
    return success_response(created, status=201, message='Dispositivo creado exitosamente')


@dispositivos_bp.route('/<int:dispositivo_id>', methods=['PUT'])
@require_vendedor
def update_dispositivo(dispositivo_id):
    container = current_container()
    data = request_data()
    image = save_request_image()
    try:
        result = container.dispositivo_service.update_dispositivo(dispositivo_id, data, image)
    except AppError:
        if image:
            delete_file(image)
        raise

    previous = result.pop('previous_image', None)
    if previous:
        delete_file(previous)

    container.log_service.record_admin(
        current_user(),
        constants.ACCION_ACTUALIZACION,
        constants.MODULO_DISPOSITIVOS,
        f'Actualizó dispositivo ID: {dispositivo_id}',
        metadata={
            'dispositivo_id': dispositivo_id,
            'campos_actualizados': list(data.keys()),
            'imagen_actualizada': bool(image),
        },
        recurso_afectado='Dispositivo',
        id_recurso_afectado=dispositivo_id,
    )
    return success_response(message=result['message'])


@dispositivos_bp.route('/<int:dispositivo_id>', methods=['DELETE'])
@require_admin
def delete_dispositivo(dispositivo_id):
    container = current_container()
    result = container.dispositivo_service.delete_dispositivo(dispositivo_id)

    container.log_service.record_admin(
        current_user(),
        constants.ACCION_ELIMINACION,
        constants.MODULO_DISPOSITIVOS,
        f'Eliminó dispositivo ID: {dispositivo_id}',
        metadata={'dispositivo_id': dispositivo_id},
        recurso_afectado='Dispositivo',
        id_recurso_afectado=dispositivo_id,
    )
    return success_response(message=result['message'])
