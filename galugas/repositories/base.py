# ==============================================================================
# REPOSITORIO BASE - CRUD sobre MySQL con SQL crudo
# ==============================================================================
# Una única interfaz para todas las entidades con CRUD:
#   find_all / find_by_id / create / update / delete / count / transaction
#
# - La clave primaria es el nombre de la tabla (primera letra en minúscula)
#   seguido de "_id":  Dispositivo → dispositivo_id
# - Las tablas con columna estado_id usan BORRADO LÓGICO (estado_id = 2)
# - Solo las columnas declaradas en `columns` se aceptan en escrituras:
#   los nombres de columna se interpolan en el SQL, los valores NO.
# ==============================================================================

from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from galugas import constants
from galugas.database import DatabaseService
from galugas.errors import AppError


class BaseRepository:
    """
    Clase base para los repositorios SQL.

    Las subclases declaran:
        table_name: Nombre de la tabla
        columns: Columnas escribibles
        soft_delete: True si la tabla tiene estado_id
        primary_key: Solo si no sigue la convención
    """

    table_name: str = ''
    primary_key: Optional[str] = None
    columns: FrozenSet[str] = frozenset()
    soft_delete: bool = False

    def __init__(self, db: DatabaseService):
        """
        Args:
            db: Servicio de base de datos (pool compartido)
        """
        self.db = db
        if not self.primary_key:
            self.primary_key = self.table_name[:1].lower() + self.table_name[1:] + '_id'

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def _clean_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Descarta claves que no son columnas escribibles."""
        return {k: v for k, v in (data or {}).items() if k in self.columns}

    def _build_where(self, where: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        allowed = set(self.columns) | {self.primary_key}
        clauses = []
        params: Dict[str, Any] = {}
        for i, (key, value) in enumerate((where or {}).items()):
            if key not in allowed:
                raise AppError(f'Filtro no permitido: {key}', 400)
            name = f'w{i}'
            clauses.append(f'{key} = :{name}')
            params[name] = value
        sql = (' WHERE ' + ' AND '.join(clauses)) if clauses else ''
        return sql, params

    def _default_where(self, where: Optional[Dict[str, Any]], include_inactive: bool) -> Dict[str, Any]:
        where = dict(where or {})
        if self.soft_delete and not include_inactive and 'estado_id' not in where:
            where['estado_id'] = constants.ESTADO_ACTIVO
        return where

    # =========================================================================
    # LECTURA
    # =========================================================================

    def find_all(
        self,
        where: Dict[str, Any] = None,
        order_by: str = None,
        limit: int = None,
        offset: int = None,
        include_inactive: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Lista registros filtrando por igualdad.

        En tablas con borrado lógico solo devuelve activos salvo que se pida
        include_inactive o se filtre explícitamente por estado_id.
        """
        where_sql, params = self._build_where(self._default_where(where, include_inactive))
        query = f'SELECT * FROM {self.table_name}{where_sql}'

        order_column = order_by or self.primary_key
        if order_column.lstrip('-') not in set(self.columns) | {self.primary_key}:
            raise AppError(f'Orden no permitido: {order_by}', 400)
        direction = 'DESC' if order_column.startswith('-') else 'ASC'
        query += f' ORDER BY {order_column.lstrip("-")} {direction}'

        if limit is not None:
            query += ' LIMIT :limit'
            params['limit'] = int(limit)
            if offset:
                query += ' OFFSET :offset'
                params['offset'] = int(offset)
        return self.db.execute(query, params)

    def find_by_id(self, record_id: int, active_only: bool = False) -> Optional[Dict[str, Any]]:
        """
        Busca un registro por clave primaria.

        Args:
            record_id: ID del registro
            active_only: Si True, un registro con borrado lógico no se encuentra
        """
        query = f'SELECT * FROM {self.table_name} WHERE {self.primary_key} = :id'
        params: Dict[str, Any] = {'id': record_id}
        if active_only and self.soft_delete:
            query += ' AND estado_id = :estado'
            params['estado'] = constants.ESTADO_ACTIVO
        return self.db.execute_one(query, params)

    def count(self, where: Dict[str, Any] = None, include_inactive: bool = False) -> int:
        where_sql, params = self._build_where(self._default_where(where, include_inactive))
        total = self.db.execute_scalar(f'SELECT COUNT(*) AS total FROM {self.table_name}{where_sql}', params)
        return int(total or 0)

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    def create(self, data: Dict[str, Any], conn=None) -> Dict[str, Any]:
        """
        Inserta un registro.

        Returns:
            {'id': nuevo_id, ...datos insertados}
        """
        values = self._clean_data(data)
        if not values:
            raise AppError('No hay datos para crear', 400)
        cols = ', '.join(values.keys())
        placeholders = ', '.join(f':{k}' for k in values.keys())
        result = self.db.execute_write(
            f'INSERT INTO {self.table_name} ({cols}) VALUES ({placeholders})',
            values,
            conn=conn
        )
        return {'id': result.lastrowid, **values}

    def update(self, record_id: int, data: Dict[str, Any], conn=None) -> bool:
        """
        Actualiza columnas de un registro.

        Raises:
            AppError(400): Si no queda ninguna columna válida para actualizar

        Returns:
            True si se afectó alguna fila
        """
        values = self._clean_data(data)
        if not values:
            raise AppError('No hay datos para actualizar', 400)
        assignments = ', '.join(f'{k} = :{k}' for k in values.keys())
        params = dict(values)
        params['_pk'] = record_id
        result = self.db.execute_write(
            f'UPDATE {self.table_name} SET {assignments} WHERE {self.primary_key} = :_pk',
            params,
            conn=conn
        )
        return result.rowcount > 0

    def delete(self, record_id: int, conn=None) -> bool:
        """
        Elimina un registro: lógico (estado_id = Inactivo) si la tabla lo
        soporta, físico en caso contrario.
        """
        if self.soft_delete:
            result = self.db.execute_write(
                f'UPDATE {self.table_name} SET estado_id = :estado WHERE {self.primary_key} = :_pk',
                {'estado': constants.ESTADO_INACTIVO, '_pk': record_id},
                conn=conn
            )
        else:
            result = self.db.execute_write(
                f'DELETE FROM {self.table_name} WHERE {self.primary_key} = :_pk',
                {'_pk': record_id},
                conn=conn
            )
        return result.rowcount > 0
