# ==============================================================================
# REPOSITORIO DE CATEGORÍAS
# ==============================================================================

from typing import Any, Dict, Optional

from galugas import constants
from galugas.repositories.base import BaseRepository


class CategoriaRepository(BaseRepository):
    """Acceso a la tabla Categoria (borrado lógico)."""

    table_name = 'Categoria'
    soft_delete = True
    columns = frozenset(['nombre', 'descripcion', 'estado_id'])

    def find_by_nombre(self, nombre: str) -> Optional[Dict[str, Any]]:
        return self.db.execute_one(
            'SELECT * FROM Categoria WHERE nombre = :nombre AND estado_id = :estado',
            {'nombre': nombre, 'estado': constants.ESTADO_ACTIVO}
        )
