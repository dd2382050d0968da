# ==============================================================================
# RUTAS DE LOGS DE ACTIVIDAD - /api/logs
# ==============================================================================
# mis-actividades: cualquier sesión · resto: solo Administrador
#
# Este prefijo lo omite el middleware de auditoría; las acciones
# relevantes (exportar, purgar) se registran aquí explícitamente.
# ==============================================================================

from flask import Blueprint, Response, current_app, request

from galugas import constants
from galugas.app_container import current_container
from galugas.helpers import request_data, success_response, utc_now
from galugas.middleware.auth import current_user, require_admin, require_auth

logs_bp = Blueprint('logs', __name__)

FILTER_KEYS = ('tipo_usuario', 'modulo', 'accion', 'usuario_id', 'fecha_desde', 'fecha_hasta', 'busqueda')


def _filters_from_query():
    return {k: request.args.get(k) for k in FILTER_KEYS if request.args.get(k)}


@logs_bp.route('/')
@require_admin
def list_logs():
    resultado = current_container().log_service.get_logs(
        _filters_from_query(),
        request.args.get('pagina', 1),
        request.args.get('limite', constants.DEFAULT_LOG_LIMIT),
    )
    return success_response(resultado['logs'], paginacion=resultado['paginacion'])


@logs_bp.route('/estadisticas')
@require_admin
def estadisticas():
    periodo = request.args.get('periodo', 'dia')
    return success_response(current_container().log_service.get_stats(periodo), periodo=periodo)


@logs_bp.route('/mis-actividades')
@require_auth
def mis_actividades():
    actividades = current_container().log_service.get_user_activity(
        current_user()['usuario_id'],
        request.args.get('limite', 20),
    )
    return success_response(actividades, count=len(actividades))


@logs_bp.route('/exportar')
@require_admin
def exportar():
    container = current_container()
    filtros = _filters_from_query()
    csv_content = container.log_service.export_csv(filtros)

    container.log_service.record_admin(
        current_user(),
        constants.ACCION_EXPORTACION,
        constants.MODULO_LOGS,
        'Exportó logs de actividad a CSV',
        metadata={'filtros': filtros},
    )

    filename = f"logs_galugas_{utc_now().strftime('%Y-%m-%d')}.csv"
    return Response(
        csv_content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )


@logs_bp.route('/limpiar', methods=['POST'])
@require_admin
def limpiar():
    container = current_container()
    dias = request_data().get('dias', current_app.config['LOG_RETENTION_DAYS'])
    resultado = container.log_service.purge_old_logs(dias)

    container.log_service.record_admin(
        current_user(),
        constants.ACCION_MANTENIMIENTO,
        constants.MODULO_LOGS,
        f"Limpió logs antiguos: {resultado['eliminados']} registros eliminados",
        metadata={'dias': dias, 'eliminados': resultado['eliminados']},
    )
    return success_response(resultado, message=resultado['mensaje'])
