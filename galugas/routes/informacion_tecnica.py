# ==============================================================================
# RUTAS DE FICHAS TÉCNICAS - /api/informacion-tecnica
# ==============================================================================

from flask import Blueprint

from galugas import constants
from galugas.app_container import current_container
from galugas.helpers import request_data, success_response
from galugas.middleware.auth import current_user, require_vendedor

informacion_tecnica_bp = Blueprint('informacion_tecnica', __name__)


@informacion_tecnica_bp.route('/')
def list_fichas():
    fichas = current_container().informacion_tecnica_service.get_all()
    return success_response(fichas, count=len(fichas))


@informacion_tecnica_bp.route('/<int:info_id>')
def get_ficha(info_id):
    return success_response(current_container().informacion_tecnica_service.get_by_id(info_id))


@informacion_tecnica_bp.route('/', methods=['POST'])
@require_vendedor
def create_ficha():
    container = current_container()
    created = container.informacion_tecnica_service.create(request_data())
    container.log_service.record_admin(
        current_user(),
        constants.ACCION_CREACION,
        constants.MODULO_DISPOSITIVOS,
        f"Creó ficha técnica ID: {created['id']}",
        recurso_afectado='InformacionTecnica',
        id_recurso_afectado=created['id'],
    )
    return success_response(created, status=201, message='Información técnica creada exitosamente')
