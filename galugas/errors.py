# ==============================================================================
# MANEJO CENTRALIZADO DE ERRORES
# ==============================================================================
# - AppError: error operacional con código HTTP y detalles opcionales
# - handle_database_error: traduce errores del driver (MySQL / SQLite)
# - register_error_handlers: registra los manejadores en la app Flask
#
# Formato de respuesta:
#   {success: false, error, details?, stack? (solo desarrollo), timestamp}
# ==============================================================================

import logging
import traceback
from typing import Any, List, Optional

from flask import current_app, jsonify, request
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from galugas.helpers import timestamp

logger = logging.getLogger('galugas.errors')

# Códigos de error de MySQL
MYSQL_DUP_ENTRY = 1062
MYSQL_FK_CODES = (1216, 1217, 1451, 1452)
MYSQL_ACCESS_DENIED = 1045
MYSQL_CONNECTION_CODES = (2002, 2003, 2006, 2013)

GENERIC_ERROR = 'Error interno del servidor'


class AppError(Exception):
    """
    Error operacional de la aplicación.

    Attributes:
        message: Mensaje para el cliente
        status_code: Código HTTP
        details: Lista opcional de detalles (validaciones, etc.)
        is_operational: True si es un error esperado (se muestra al cliente)
        timestamp: Momento en que se generó
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[List[Any]] = None,
        is_operational: bool = True
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details
        self.is_operational = is_operational
        self.timestamp = timestamp()

    def to_dict(self) -> dict:
        body = {'success': False, 'error': self.message}
        if self.details:
            body['details'] = self.details
        body['timestamp'] = self.timestamp
        return body


def _driver_code(exc: Exception) -> Optional[int]:
    """Extrae el código numérico del error del driver (PyMySQL) si existe."""
    orig = getattr(exc, 'orig', None)
    args = getattr(orig, 'args', None) or ()
    if args and isinstance(args[0], int):
        return args[0]
    return None


def handle_database_error(exc: Exception) -> AppError:
    """
    Traduce un error de base de datos a un AppError con código HTTP.

    Args:
        exc: Excepción de SQLAlchemy (envuelve la del driver en .orig)

    Returns:
        AppError listo para responder
    """
    code = _driver_code(exc)
    text = str(getattr(exc, 'orig', exc) or '').lower()

    if isinstance(exc, IntegrityError):
        if code == MYSQL_DUP_ENTRY or 'unique' in text or 'duplicate' in text:
            return AppError('El registro ya existe en la base de datos', 400)
        if code in MYSQL_FK_CODES or 'foreign key' in text:
            return AppError('Referencia a registro inexistente', 400)
        return AppError('Error de integridad de datos', 400)

    if code == MYSQL_ACCESS_DENIED:
        return AppError('Error de acceso a la base de datos', 500)

    if code in MYSQL_CONNECTION_CODES or (
        isinstance(exc, OperationalError) and ('connect' in text or 'refused' in text)
    ):
        return AppError('No se puede conectar a la base de datos', 503)

    if isinstance(exc, DBAPIError) and getattr(exc, 'connection_invalidated', False):
        return AppError('No se puede conectar a la base de datos', 503)

    return AppError('Error de base de datos', 500, is_operational=False)


def _is_development() -> bool:
    return current_app.config.get('GALUGAS_ENV', 'development') == 'development'


def error_response(err: AppError, exc: Exception = None):
    """Serializa un AppError en el sobre JSON estándar."""
    body = err.to_dict()
    if _is_development() and exc is not None:
        body['stack'] = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return jsonify(body), err.status_code


def register_error_handlers(app) -> None:
    """
    Registra los manejadores de error en la app.

    Todos los errores terminan en el mismo formato JSON.
    """

    @app.errorhandler(AppError)
    def _handle_app_error(err: AppError):
        if err.status_code >= 500:
            logger.error('%s %s → %s %s', request.method, request.path, err.status_code, err.message)
        return error_response(err, err if not err.is_operational else None)

    @app.errorhandler(SQLAlchemyError)
    def _handle_db_error(err: SQLAlchemyError):
        logger.exception('Error de base de datos en %s %s', request.method, request.path)
        return error_response(handle_database_error(err), err)

    @app.errorhandler(RequestEntityTooLarge)
    def _handle_too_large(err):
        return error_response(AppError('El archivo es demasiado grande', 400))

    @app.errorhandler(HTTPException)
    def _handle_http(err: HTTPException):
        if err.code == 404:
            return error_response(AppError(f'Ruta no encontrada - {request.method} {request.path}', 404))
        return error_response(AppError(err.description or err.name, err.code or 500))

    @app.errorhandler(Exception)
    def _handle_unexpected(err: Exception):
        logger.exception('Error no controlado en %s %s', request.method, request.path)
        app_error = AppError(GENERIC_ERROR, 500, is_operational=False)
        if _is_development():
            app_error.details = [str(err)]
        return error_response(app_error, err)
