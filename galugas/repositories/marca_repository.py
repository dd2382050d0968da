# ==============================================================================
# REPOSITORIO DE MARCAS
# ==============================================================================

from typing import Any, Dict, List, Optional

from galugas import constants
from galugas.repositories.base import BaseRepository

_SELECT_WITH_PAIS = """
    SELECT m.marca_id, m.nombre, m.descripcion, m.pais_id, m.estado_id,
           p.nombre AS pais_nombre
    FROM Marca m
    LEFT JOIN Pais p ON m.pais_id = p.pais_id
"""


class MarcaRepository(BaseRepository):
    """Acceso a la tabla Marca (borrado lógico, JOIN con Pais)."""

    table_name = 'Marca'
    soft_delete = True
    columns = frozenset(['nombre', 'descripcion', 'pais_id', 'estado_id'])

    def find_all_with_pais(self) -> List[Dict[str, Any]]:
        return self.db.execute(
            _SELECT_WITH_PAIS + ' WHERE m.estado_id = :estado ORDER BY m.nombre ASC',
            {'estado': constants.ESTADO_ACTIVO}
        )

    def find_by_id_with_pais(self, marca_id: int) -> Optional[Dict[str, Any]]:
        return self.db.execute_one(
            _SELECT_WITH_PAIS + ' WHERE m.marca_id = :id AND m.estado_id = :estado',
            {'id': marca_id, 'estado': constants.ESTADO_ACTIVO}
        )

    def pais_exists(self, pais_id: int) -> bool:
        row = self.db.execute_one('SELECT pais_id FROM Pais WHERE pais_id = :id', {'id': pais_id})
        return row is not None
