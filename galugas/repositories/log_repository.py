# ==============================================================================
# REPOSITORIO DE LOGS DE ACTIVIDAD
# ==============================================================================
# Encapsula el acceso a LogActividad (append-only).
#
# Formato de fila (consulta con JOIN a Usuario):
# {
#     "log_id": 10,
#     "usuario_id": 3,               # NULL para acciones del sistema
#     "tipo_usuario": "Administrador",
#     "accion": "CREACION",
#     "modulo": "DISPOSITIVOS",
#     "descripcion": "Creó nuevo dispositivo: Galaxy S24",
#     "metadata": "{...}",           # JSON ya redactado
#     "fecha_creacion": "2024-01-01 10:00:00",
#     "primer_nombre": "Ana", "primer_apellido": "Pérez"
# }
# ==============================================================================

import datetime
import math
from typing import Any, Dict, List, Tuple

from galugas.helpers import format_db_datetime, parse_date, to_int
from galugas.repositories.base import BaseRepository

_SELECT_WITH_USER = """
    SELECT l.log_id, l.usuario_id, l.tipo_usuario, l.accion, l.modulo, l.descripcion,
           l.ip_address, l.user_agent, l.recurso_afectado, l.id_recurso_afectado,
           l.metadata, l.fecha_creacion,
           u.primer_nombre, u.primer_apellido, u.email
    FROM LogActividad l
    LEFT JOIN Usuario u ON l.usuario_id = u.usuario_id
"""


class LogRepository(BaseRepository):
    """Acceso a la tabla LogActividad."""

    table_name = 'LogActividad'
    primary_key = 'log_id'
    columns = frozenset([
        'usuario_id',
        'tipo_usuario',
        'accion',
        'modulo',
        'descripcion',
        'ip_address',
        'user_agent',
        'recurso_afectado',
        'id_recurso_afectado',
        'metadata',
        'fecha_creacion',
    ])

    # =========================================================================
    # CONSULTA CON FILTROS
    # =========================================================================

    def _build_filters(self, filtros: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        conditions = ['1=1']
        params: Dict[str, Any] = {}

        for field in ('tipo_usuario', 'modulo', 'accion'):
            value = filtros.get(field)
            if value:
                conditions.append(f'l.{field} = :{field}')
                params[field] = value

        usuario_id = to_int(filtros.get('usuario_id'))
        if usuario_id:
            conditions.append('l.usuario_id = :usuario_id')
            params['usuario_id'] = usuario_id

        # Rango de fechas por día calendario (ambos extremos incluidos)
        fecha_desde = parse_date(filtros.get('fecha_desde'))
        if fecha_desde:
            conditions.append('l.fecha_creacion >= :fecha_desde')
            params['fecha_desde'] = format_db_datetime(
                datetime.datetime.combine(fecha_desde, datetime.time.min)
            )

        fecha_hasta = parse_date(filtros.get('fecha_hasta'))
        if fecha_hasta:
            conditions.append('l.fecha_creacion < :fecha_hasta')
            params['fecha_hasta'] = format_db_datetime(
                datetime.datetime.combine(fecha_hasta + datetime.timedelta(days=1), datetime.time.min)
            )

        busqueda = (filtros.get('busqueda') or '').strip()
        if busqueda:
            conditions.append(
                '(l.descripcion LIKE :busqueda OR u.primer_nombre LIKE :busqueda '
                'OR u.primer_apellido LIKE :busqueda)'
            )
            params['busqueda'] = f'%{busqueda}%'

        return ' WHERE ' + ' AND '.join(conditions), params

    def find_with_filters(
        self,
        filtros: Dict[str, Any],
        pagina: int,
        limite: int
    ) -> Dict[str, Any]:
        """
        Página de logs más recientes primero.

        Returns:
            {logs: [...], paginacion: {pagina, limite, total, paginas}}
        """
        where_sql, params = self._build_filters(filtros or {})

        total = self.db.execute_scalar(
            'SELECT COUNT(*) AS total FROM LogActividad l '
            'LEFT JOIN Usuario u ON l.usuario_id = u.usuario_id' + where_sql,
            params
        )
        total = int(total or 0)

        page_params = dict(params)
        page_params['limite'] = limite
        page_params['offset'] = (pagina - 1) * limite
        logs = self.db.execute(
            _SELECT_WITH_USER + where_sql +
            ' ORDER BY l.fecha_creacion DESC, l.log_id DESC LIMIT :limite OFFSET :offset',
            page_params
        )

        return {
            'logs': logs,
            'paginacion': {
                'pagina': pagina,
                'limite': limite,
                'total': total,
                'paginas': math.ceil(total / limite) if limite else 0,
            },
        }

    def find_by_user(self, usuario_id: int, limite: int) -> List[Dict[str, Any]]:
        return self.db.execute(
            _SELECT_WITH_USER +
            ' WHERE l.usuario_id = :usuario_id'
            ' ORDER BY l.fecha_creacion DESC, l.log_id DESC LIMIT :limite',
            {'usuario_id': usuario_id, 'limite': limite}
        )

    # =========================================================================
    # ESTADÍSTICAS
    # =========================================================================

    def get_stats_since(self, desde: datetime.datetime) -> Dict[str, Any]:
        """
        Agregados de actividad desde una fecha.

        Returns:
            {actividadesPorTipo, actividadesPorModulo (top 10),
             actividadesPorAccion (top 10), usuariosActivos, totalActividades}
        """
        params = {'desde': format_db_datetime(desde)}
        por_tipo = self.db.execute(
            """
            SELECT tipo_usuario, COUNT(*) AS total
            FROM LogActividad
            WHERE fecha_creacion >= :desde
            GROUP BY tipo_usuario
            ORDER BY total DESC
            """,
            params
        )
        por_modulo = self.db.execute(
            """
            SELECT modulo, COUNT(*) AS total
            FROM LogActividad
            WHERE fecha_creacion >= :desde
            GROUP BY modulo
            ORDER BY total DESC
            LIMIT 10
            """,
            params
        )
        por_accion = self.db.execute(
            """
            SELECT accion, COUNT(*) AS total
            FROM LogActividad
            WHERE fecha_creacion >= :desde
            GROUP BY accion
            ORDER BY total DESC
            LIMIT 10
            """,
            params
        )
        usuarios_activos = self.db.execute_scalar(
            """
            SELECT COUNT(DISTINCT usuario_id) AS total
            FROM LogActividad
            WHERE fecha_creacion >= :desde AND usuario_id IS NOT NULL
            """,
            params
        )
        total = self.db.execute_scalar(
            'SELECT COUNT(*) AS total FROM LogActividad WHERE fecha_creacion >= :desde',
            params
        )
        return {
            'actividadesPorTipo': por_tipo,
            'actividadesPorModulo': por_modulo,
            'actividadesPorAccion': por_accion,
            'usuariosActivos': int(usuarios_activos or 0),
            'totalActividades': int(total or 0),
        }

    # =========================================================================
    # RETENCIÓN
    # =========================================================================

    def delete_older_than(self, cutoff: datetime.datetime) -> int:
        """
        Borra físicamente los logs anteriores a `cutoff`.

        Returns:
            Cantidad de filas eliminadas
        """
        result = self.db.execute_write(
            'DELETE FROM LogActividad WHERE fecha_creacion < :cutoff',
            {'cutoff': format_db_datetime(cutoff)}
        )
        return result.rowcount
