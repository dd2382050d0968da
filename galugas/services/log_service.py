# ==============================================================================
# SERVICIO DE LOGS DE ACTIVIDAD (AUDITORÍA)
# ==============================================================================
# Centraliza el registro y la consulta del rastro de auditoría.
#
# REGLA DE ORO: registrar un log JAMÁS debe romper la operación que lo
# disparó. Cualquier fallo al escribir se reporta solo al log del proceso
# (logger "galugas.logs") y el método devuelve None.
#
# - Registro con IP / User-Agent de la petición actual
# - Redacción de campos sensibles antes de guardar metadata
# - Consulta filtrada y paginada, estadísticas, actividad por usuario
# - Purga por antigüedad y exportación CSV
# ==============================================================================

import csv
import datetime
import io
import json
import logging
from typing import Any, Dict, List, Optional

from flask import has_request_context, request

from galugas import constants
from galugas.errors import AppError
from galugas.helpers import format_db_datetime, serialize_row, to_int, utc_now
from galugas.performance_logger import profile_function
from galugas.repositories.interfaces import ILogRepository

logger = logging.getLogger('galugas.logs')

CSV_HEADERS = [
    'ID', 'Fecha', 'Usuario', 'Tipo Usuario', 'Módulo', 'Acción',
    'Descripción', 'Recurso Afectado', 'IP Address', 'User Agent',
]


def _is_sensitive(key: Any) -> bool:
    lowered = str(key).lower()
    return any(field in lowered for field in constants.SENSITIVE_FIELDS)


def redact_sensitive(data: Any) -> Any:
    """
    Reemplaza por '***SENSITIVE***' el valor de toda clave sensible.

    Recorre dicts y listas anidados. No modifica el objeto original.

    Example:
        >>> redact_sensitive({'password': 'x', 'other': 'y'})
        {'password': '***SENSITIVE***', 'other': 'y'}
    """
    if isinstance(data, dict):
        return {
            k: (constants.SENSITIVE_MASK if _is_sensitive(k) else redact_sensitive(v))
            for k, v in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact_sensitive(v) for v in data]
    return data


def _decode_metadata(row: Dict[str, Any]) -> Dict[str, Any]:
    raw = row.get('metadata')
    if isinstance(raw, (str, bytes)) and raw:
        try:
            row['metadata'] = json.loads(raw)
        except ValueError:
            pass
    return row


class LogService:
    """
    Servicio para registro y consulta de la actividad del sistema.

    Uso:
        log_service.record(user['usuario_id'], user['rol_nombre'],
                           'CREACION', 'DISPOSITIVOS', 'Creó dispositivo X')
    """

    def __init__(self, log_repo: ILogRepository):
        """
        Args:
            log_repo: Repositorio de LogActividad
        """
        self.log_repo = log_repo

    # =========================================================================
    # REGISTRO
    # =========================================================================

    def record(
        self,
        usuario_id: Optional[int],
        tipo_usuario: Optional[str],
        accion: str,
        modulo: str,
        descripcion: str,
        recurso_afectado: str = None,
        id_recurso_afectado: int = None,
        metadata: Dict[str, Any] = None,
        ip_address: str = None,
        user_agent: str = None
    ) -> Optional[Dict[str, Any]]:
        """
        Registra un evento de auditoría.

        Args:
            usuario_id: Actor (None para acciones del sistema / anónimas)
            tipo_usuario: Rol del actor; 'Sistema' si no se indica
            accion: CREACION, CONSULTA, INICIO_SESION, ...
            modulo: DISPOSITIVOS, USUARIOS, AUTENTICACION, ...
            descripcion: Texto legible del evento
            recurso_afectado: Tipo de recurso (ej: 'Dispositivo')
            id_recurso_afectado: ID del recurso
            metadata: Datos extra (se redactan antes de guardar)
            ip_address / user_agent: Por defecto, los de la petición actual

        Returns:
            El log creado, o None si no se pudo registrar
        """
        try:
            if has_request_context():
                ip_address = ip_address or request.remote_addr
                user_agent = user_agent or request.headers.get('User-Agent')

            entry = {
                'usuario_id': usuario_id,
                'tipo_usuario': tipo_usuario or constants.ROLE_SISTEMA,
                'accion': accion,
                'modulo': modulo,
                'descripcion': descripcion,
                'ip_address': ip_address,
                'user_agent': (user_agent or '')[:500] or None,
                'recurso_afectado': recurso_afectado,
                'id_recurso_afectado': id_recurso_afectado,
                'metadata': (
                    json.dumps(redact_sensitive(metadata), ensure_ascii=False, default=str)
                    if metadata is not None else None
                ),
                'fecha_creacion': format_db_datetime(utc_now()),
            }
            created = self.log_repo.create(entry)
            return {'log_id': created['id'], **entry}
        except Exception as e:
            logger.error('No se pudo registrar la actividad %s/%s: %s', modulo, accion, e)
            return None

    def record_admin(
        self,
        user: Optional[Dict[str, Any]],
        accion: str,
        modulo: str,
        descripcion: str,
        metadata: Dict[str, Any] = None,
        recurso_afectado: str = None,
        id_recurso_afectado: int = None
    ) -> Optional[Dict[str, Any]]:
        """
        Registra una acción hecha por el usuario de la sesión
        (administrador, vendedor o cliente).
        """
        user = user or {}
        return self.record(
            user.get('usuario_id'),
            user.get('rol_nombre') or constants.ROLE_SISTEMA,
            accion,
            modulo,
            descripcion,
            recurso_afectado=recurso_afectado,
            id_recurso_afectado=id_recurso_afectado,
            metadata=metadata,
        )

    def record_system(
        self,
        accion: str,
        modulo: str,
        descripcion: str,
        metadata: Dict[str, Any] = None
    ) -> Optional[Dict[str, Any]]:
        """Registra una acción sin actor (tipo_usuario = 'Sistema')."""
        return self.record(None, constants.ROLE_SISTEMA, accion, modulo, descripcion, metadata=metadata)

    def record_denied_access(
        self,
        user: Optional[Dict[str, Any]],
        path: str,
        motivo: str
    ) -> Optional[Dict[str, Any]]:
        """Registra un intento de acceso bloqueado por una compuerta de rol."""
        user = user or {}
        return self.record(
            user.get('usuario_id'),
            user.get('rol_nombre') or constants.ROLE_SISTEMA,
            constants.ACCION_ACCESO_DENEGADO,
            constants.MODULO_SEGURIDAD,
            f'Acceso denegado a {path}: {motivo}',
            metadata={'ruta': path, 'motivo': motivo},
        )

    # =========================================================================
    # CONSULTA
    # =========================================================================

    @profile_function(name='LogService.get_logs')
    def get_logs(
        self,
        filtros: Dict[str, Any] = None,
        pagina: Any = 1,
        limite: Any = constants.DEFAULT_LOG_LIMIT,
        max_limite: int = constants.MAX_LIMIT
    ) -> Dict[str, Any]:
        """
        Logs filtrados y paginados.

        Args:
            filtros: tipo_usuario, modulo, accion, usuario_id,
                     fecha_desde, fecha_hasta, busqueda
            pagina: Página (>= 1)
            limite: Tamaño de página (1..max_limite)

        Returns:
            {logs, paginacion: {pagina, limite, total, paginas}}
        """
        pagina = max(1, to_int(pagina, 1))
        limite = max(1, min(to_int(limite, constants.DEFAULT_LOG_LIMIT), max_limite))
        resultado = self.log_repo.find_with_filters(filtros or {}, pagina, limite)
        resultado['logs'] = [_decode_metadata(serialize_row(r)) for r in resultado['logs']]
        return resultado

    def get_stats(self, periodo: str = 'dia') -> Dict[str, Any]:
        """Estadísticas del último día / semana / mes."""
        dias = constants.PERIODOS_ESTADISTICAS.get(periodo, constants.PERIODOS_ESTADISTICAS['dia'])
        desde = utc_now() - datetime.timedelta(days=dias)
        return self.log_repo.get_stats_since(desde)

    def get_user_activity(self, usuario_id: int, limite: Any = 20) -> List[Dict[str, Any]]:
        limite = max(1, min(to_int(limite, 20), constants.MAX_LIMIT))
        rows = self.log_repo.find_by_user(usuario_id, limite)
        return [_decode_metadata(serialize_row(r)) for r in rows]

    # =========================================================================
    # RETENCIÓN
    # =========================================================================

    def purge_old_logs(self, dias: Any = 90) -> Dict[str, Any]:
        """
        Elimina los logs con más de `dias` días de antigüedad.

        Raises:
            AppError(400): Si dias no es un entero positivo

        Returns:
            {eliminados, mensaje}
        """
        dias_int = to_int(dias)
        if dias_int is None or dias_int < 1:
            raise AppError('El número de días debe ser un entero positivo', 400)

        cutoff = utc_now() - datetime.timedelta(days=dias_int)
        eliminados = self.log_repo.delete_older_than(cutoff)
        logger.info('Purga de logs: %s registros anteriores a %s', eliminados, cutoff)
        return {
            'eliminados': eliminados,
            'mensaje': f'Se eliminaron {eliminados} registros de logs con más de {dias_int} días',
        }

    # =========================================================================
    # EXPORTACIÓN
    # =========================================================================

    @profile_function(name='Exportar logs CSV')
    def export_csv(self, filtros: Dict[str, Any] = None) -> str:
        """
        Exporta a CSV los logs que cumplen los filtros (máximo 10.000).

        Returns:
            Contenido CSV
        """
        resultado = self.get_logs(
            filtros, 1, constants.MAX_EXPORT_ROWS, max_limite=constants.MAX_EXPORT_ROWS
        )
        si = io.StringIO()
        writer = csv.writer(si, quoting=csv.QUOTE_MINIMAL)
        writer.writerow(CSV_HEADERS)
        for log in resultado['logs']:
            usuario = f"{log.get('primer_nombre') or constants.ROLE_SISTEMA} {log.get('primer_apellido') or ''}".strip()
            writer.writerow([
                log.get('log_id'),
                log.get('fecha_creacion') or '',
                usuario,
                log.get('tipo_usuario') or '',
                log.get('modulo') or '',
                log.get('accion') or '',
                log.get('descripcion') or '',
                log.get('recurso_afectado') or '',
                log.get('ip_address') or '',
                log.get('user_agent') or '',
            ])
        return si.getvalue()
