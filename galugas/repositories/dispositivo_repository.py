# ==============================================================================
# REPOSITORIO DE DISPOSITIVOS
# ==============================================================================
# Consultas con JOIN a Marca, Categoria, InformacionTecnica y Estado.
# ==============================================================================

from typing import Any, Dict, List, Optional

from galugas import constants
from galugas.helpers import to_float, to_int
from galugas.repositories.base import BaseRepository

# Columnas por las que se permite ordenar (nunca se interpola input crudo)
ORDERABLE_COLUMNS = {
    'nombre': 'd.nombre',
    'precio': 'd.precio',
    'fechaLanzamiento': 'd.fechaLanzamiento',
    'dispositivo_id': 'd.dispositivo_id',
    'marca': 'm.nombre',
    'categoria': 'c.nombre',
}

_DETAIL_SELECT = """
    SELECT
        d.dispositivo_id, d.nombre, d.descripcion, d.precio, d.fechaLanzamiento,
        d.marca_id, d.categoria_id, d.informacionTecnica_id, d.estado_id, d.pathFoto,
        m.nombre AS marca_nombre,
        m.descripcion AS marca_descripcion,
        m.pais_id AS marca_pais_id,
        c.nombre AS categoria_nombre,
        c.descripcion AS categoria_descripcion,
        it.procesador, it.ram_gb, it.almacenamiento, it.resolucion,
        it.dimensiones, it.potencia, it.puertos, it.conectividad, it.version, it.otros,
        e.nombre AS estado_nombre
    FROM Dispositivo d
    LEFT JOIN Marca m ON d.marca_id = m.marca_id
    LEFT JOIN Categoria c ON d.categoria_id = c.categoria_id
    LEFT JOIN InformacionTecnica it ON d.informacionTecnica_id = it.informacionTecnica_id
    LEFT JOIN Estado e ON d.estado_id = e.estado_id
"""


class DispositivoRepository(BaseRepository):
    """Acceso a la tabla Dispositivo."""

    table_name = 'Dispositivo'
    soft_delete = True
    columns = frozenset([
        'nombre',
        'descripcion',
        'precio',
        'fechaLanzamiento',
        'marca_id',
        'categoria_id',
        'informacionTecnica_id',
        'estado_id',
        'pathFoto',
    ])

    def find_all_with_details(self, filters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        """
        Lista dispositivos con datos de marca, categoría y ficha técnica.

        Args:
            filters: categoria_id, marca_id, minPrice, maxPrice, search,
                     orderBy, orderDirection, limit, offset (solo activos)

        Returns:
            Lista de filas
        """
        filters = filters or {}
        conditions = []
        params: Dict[str, Any] = {}

        categoria_id = to_int(filters.get('categoria_id'))
        if categoria_id:
            conditions.append('d.categoria_id = :categoria_id')
            params['categoria_id'] = categoria_id

        marca_id = to_int(filters.get('marca_id'))
        if marca_id:
            conditions.append('d.marca_id = :marca_id')
            params['marca_id'] = marca_id

        conditions.append('d.estado_id = :estado_id')
        params['estado_id'] = constants.ESTADO_ACTIVO

        min_price = to_float(filters.get('minPrice'))
        if min_price is not None:
            conditions.append('d.precio >= :min_price')
            params['min_price'] = min_price

        max_price = to_float(filters.get('maxPrice'))
        if max_price is not None:
            conditions.append('d.precio <= :max_price')
            params['max_price'] = max_price

        search = (filters.get('search') or '').strip()
        if search:
            conditions.append('(d.nombre LIKE :search OR m.nombre LIKE :search OR c.nombre LIKE :search)')
            params['search'] = f'%{search}%'

        query = _DETAIL_SELECT + ' WHERE ' + ' AND '.join(conditions)

        order_column = ORDERABLE_COLUMNS.get(
            str(filters.get('orderBy') or 'nombre').replace('d.', ''),
            'd.nombre'
        )
        direction = 'DESC' if str(filters.get('orderDirection') or '').upper() == 'DESC' else 'ASC'
        query += f' ORDER BY {order_column} {direction}, d.dispositivo_id ASC'

        limit = to_int(filters.get('limit'))
        if limit:
            query += ' LIMIT :limit'
            params['limit'] = max(1, min(limit, constants.MAX_LIMIT))
            offset = to_int(filters.get('offset'))
            if offset:
                query += ' OFFSET :offset'
                params['offset'] = max(0, offset)

        return self.db.execute(query, params)

    def find_by_id_with_details(self, dispositivo_id: int) -> Optional[Dict[str, Any]]:
        """Detalle de un dispositivo ACTIVO. Los inactivos no se encuentran."""
        query = _DETAIL_SELECT + ' WHERE d.dispositivo_id = :id AND d.estado_id = :estado'
        return self.db.execute_one(query, {'id': dispositivo_id, 'estado': constants.ESTADO_ACTIVO})

    def find_by_categoria(self, categoria_id: int) -> List[Dict[str, Any]]:
        query = _DETAIL_SELECT + """
            WHERE d.categoria_id = :categoria_id AND d.estado_id = :estado
            ORDER BY d.nombre ASC
        """
        return self.db.execute(query, {'categoria_id': categoria_id, 'estado': constants.ESTADO_ACTIVO})

    def find_by_marca(self, marca_id: int) -> List[Dict[str, Any]]:
        query = _DETAIL_SELECT + """
            WHERE d.marca_id = :marca_id AND d.estado_id = :estado
            ORDER BY d.nombre ASC
        """
        return self.db.execute(query, {'marca_id': marca_id, 'estado': constants.ESTADO_ACTIVO})

    def count_by_categoria(self, categoria_id: int) -> int:
        """Dispositivos activos que referencian una categoría."""
        return self.count({'categoria_id': categoria_id})

    def get_estadisticas(self) -> Dict[str, Any]:
        """
        Resumen del catálogo activo.

        Returns:
            {total, porCategoria, porMarca, precioPromedio, recientes}
        """
        params = {'estado': constants.ESTADO_ACTIVO}
        total = self.db.execute_scalar(
            'SELECT COUNT(*) AS total FROM Dispositivo WHERE estado_id = :estado', params
        )
        por_categoria = self.db.execute(
            """
            SELECT c.nombre AS nombre, COUNT(*) AS total
            FROM Dispositivo d
            LEFT JOIN Categoria c ON d.categoria_id = c.categoria_id
            WHERE d.estado_id = :estado
            GROUP BY c.nombre
            ORDER BY total DESC
            """,
            params
        )
        por_marca = self.db.execute(
            """
            SELECT m.nombre AS nombre, COUNT(*) AS total
            FROM Dispositivo d
            LEFT JOIN Marca m ON d.marca_id = m.marca_id
            WHERE d.estado_id = :estado
            GROUP BY m.nombre
            ORDER BY total DESC
            """,
            params
        )
        promedio = self.db.execute_scalar(
            'SELECT AVG(precio) AS promedio FROM Dispositivo WHERE estado_id = :estado', params
        )
        recientes = self.db.execute(
            """
            SELECT dispositivo_id, nombre, precio, fechaLanzamiento, pathFoto
            FROM Dispositivo
            WHERE estado_id = :estado
            ORDER BY fechaLanzamiento DESC
            LIMIT 5
            """,
            params
        )
        return {
            'total': int(total or 0),
            'porCategoria': por_categoria,
            'porMarca': por_marca,
            'precioPromedio': round(float(promedio), 2) if promedio is not None else 0,
            'recientes': recientes,
        }
