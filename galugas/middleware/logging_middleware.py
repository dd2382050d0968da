# ==============================================================================
# MIDDLEWARE DE AUDITORÍA AUTOMÁTICA
# ==============================================================================
# Registra en LogActividad cada petición atendida.
#
# - Con sesión: a nombre del usuario y su rol, con los parámetros redactados
# - Sin sesión: rol "Sistema", solo método, ruta, status y duración
# - /api/logs se omite para no auditar la propia consulta de auditoría
# - El cuerpo de la petición se redacta antes de guardarse
# ==============================================================================

import time

from flask import Flask, g, request, session

from galugas import constants
from galugas.app_container import current_container

SKIPPED_PREFIXES = (
    '/api/health',
    '/favicon.ico',
    '/uploads/',
    '/css/',
    '/js/',
    '/images/',
    '/static/',
    '/api/logs',
)

# Orden importante: el primer prefijo que coincide gana
MODULE_PREFIXES = (
    ('/admin', constants.MODULO_PANEL_ADMIN),
    ('/api/dispositivos', constants.MODULO_DISPOSITIVOS),
    ('/api/categorias', constants.MODULO_CATEGORIAS),
    ('/api/marcas', constants.MODULO_MARCAS),
    ('/api/auth', constants.MODULO_AUTENTICACION),
    ('/api/usuarios', constants.MODULO_USUARIOS),
    ('/api/logs', constants.MODULO_LOGS),
    ('/api', constants.MODULO_API),
)


def should_skip(path: str) -> bool:
    return path.startswith(SKIPPED_PREFIXES)


def determine_action(method: str, status_code: int) -> str:
    """
    Acción según método HTTP y código de respuesta.

    Example:
        >>> determine_action('GET', 404)
        'ERROR_CONSULTA'
    """
    method = method.upper()
    if method == 'GET':
        return 'CONSULTA' if status_code == 200 else 'ERROR_CONSULTA'
    if method == 'POST':
        return 'CREACION' if status_code < 400 else 'ERROR_CREACION'
    if method in ('PUT', 'PATCH'):
        return 'ACTUALIZACION' if status_code < 400 else 'ERROR_ACTUALIZACION'
    if method == 'DELETE':
        return 'ELIMINACION' if status_code < 400 else 'ERROR_ELIMINACION'
    return constants.ACCION_ACCESO


def determine_module(path: str) -> str:
    for prefix, modulo in MODULE_PREFIXES:
        if path.startswith(prefix):
            return modulo
    return constants.MODULO_SISTEMA


def _request_params():
    body = request.get_json(silent=True) if request.is_json else request.form.to_dict()
    return {
        'query': request.args.to_dict(),
        'body': body or {},
    }


def init_activity_logging(app: Flask) -> None:
    """
    Registra los hooks de auditoría en la app.

    El usuario se toma al INICIO de la petición, así un logout
    queda registrado a nombre de quien cerró la sesión.
    """

    @app.before_request
    def _capture_user():
        g.audit_user = session.get('user')
        g.audit_start = time.perf_counter()

    @app.after_request
    def _record_activity(response):
        if should_skip(request.path):
            return response

        user = g.get('audit_user')
        start = g.get('start_time') or g.get('audit_start') or time.perf_counter()
        duration_ms = int((time.perf_counter() - start) * 1000)
        accion = determine_action(request.method, response.status_code)
        modulo = determine_module(request.path)
        log_service = current_container().log_service

        if not user:
            log_service.record(
                None,
                constants.ROLE_SISTEMA,
                accion,
                modulo,
                f'Acción {accion} en {modulo} - Status: {response.status_code} - Duración: {duration_ms}ms',
                metadata={
                    'metodo': request.method,
                    'ruta': request.path,
                    'statusCode': response.status_code,
                    'duracion_ms': duration_ms,
                },
            )
            return response

        nombre = f"{user.get('primer_nombre', '')} {user.get('primer_apellido', '')}".strip()

        log_service.record(
            user.get('usuario_id'),
            user.get('rol_nombre'),
            accion,
            modulo,
            f'{nombre} realizó {request.method} en {request.path} '
            f'- Status: {response.status_code} - Duración: {duration_ms}ms',
            metadata={
                'metodo': request.method,
                'ruta': request.path,
                'statusCode': response.status_code,
                'duracion_ms': duration_ms,
                'user_agent': request.headers.get('User-Agent'),
                'parametros': _request_params(),
            },
        )
        return response
