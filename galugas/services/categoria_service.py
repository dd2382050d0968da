# ==============================================================================
# SERVICIO DE CATEGORÍAS
# ==============================================================================

from typing import Any, Dict, List

from galugas import constants
from galugas.errors import AppError
from galugas.helpers import serialize_row
from galugas.repositories.categoria_repository import CategoriaRepository
from galugas.repositories.dispositivo_repository import DispositivoRepository


class CategoriaService:
    """
    Categorías del catálogo.

    Una categoría con dispositivos activos no se puede eliminar.
    """

    def __init__(self, categoria_repo: CategoriaRepository, dispositivo_repo: DispositivoRepository):
        self.categoria_repo = categoria_repo
        self.dispositivo_repo = dispositivo_repo

    def get_categorias(self) -> List[Dict[str, Any]]:
        return [serialize_row(r) for r in self.categoria_repo.find_all(order_by='nombre')]

    def get_categoria_by_id(self, categoria_id: int) -> Dict[str, Any]:
        row = self.categoria_repo.find_by_id(categoria_id, active_only=True)
        if not row:
            raise AppError('Categoría no encontrada', 404)
        return serialize_row(row)

    @staticmethod
    def _validate(data: Dict[str, Any]) -> Dict[str, Any]:
        nombre = str(data.get('nombre') or '').strip()
        if not nombre:
            raise AppError('El nombre de la categoría es requerido', 400)
        if len(nombre) < constants.NOMBRE_MIN_LENGTH:
            raise AppError('El nombre debe tener al menos 2 caracteres', 400)
        values = {'nombre': nombre}
        if 'descripcion' in data:
            values['descripcion'] = data.get('descripcion')
        return values

    def create_categoria(self, data: Dict[str, Any]) -> Dict[str, Any]:
        values = self._validate(data or {})
        values['estado_id'] = constants.ESTADO_ACTIVO
        return self.categoria_repo.create(values)

    def update_categoria(self, categoria_id: int, data: Dict[str, Any]) -> Dict[str, str]:
        if not self.categoria_repo.find_by_id(categoria_id, active_only=True):
            raise AppError('Categoría no encontrada', 404)
        values = self._validate(data or {})
        self.categoria_repo.update(categoria_id, values)
        return {'message': 'Categoría actualizada exitosamente'}

    def delete_categoria(self, categoria_id: int) -> Dict[str, str]:
        if not self.categoria_repo.find_by_id(categoria_id, active_only=True):
            raise AppError('Categoría no encontrada', 404)

        if self.dispositivo_repo.count_by_categoria(categoria_id) > 0:
            raise AppError('No se puede eliminar la categoría porque tiene dispositivos asociados', 400)

        self.categoria_repo.delete(categoria_id)
        return {'message': 'Categoría eliminada exitosamente'}
