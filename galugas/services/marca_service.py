# ==============================================================================
# SERVICIO DE MARCAS
# ==============================================================================

from typing import Any, Dict, List

from galugas import constants
from galugas.errors import AppError
from galugas.helpers import serialize_row, to_int
from galugas.repositories.marca_repository import MarcaRepository


class MarcaService:
    """Marcas de dispositivos (con su país de origen)."""

    def __init__(self, marca_repo: MarcaRepository):
        self.marca_repo = marca_repo

    def get_marcas(self) -> List[Dict[str, Any]]:
        return [serialize_row(r) for r in self.marca_repo.find_all_with_pais()]

    def get_marca_by_id(self, marca_id: int) -> Dict[str, Any]:
        row = self.marca_repo.find_by_id_with_pais(marca_id)
        if not row:
            raise AppError('Marca no encontrada', 404)
        return serialize_row(row)

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Valida nombre y país.

        Raises:
            AppError(400): Nombre o país faltante, nombre corto, país inexistente
        """
        nombre = str(data.get('nombre') or '').strip()
        if not nombre:
            raise AppError('El nombre de la marca es requerido', 400)
        if not data.get('pais_id'):
            raise AppError('El país de la marca es requerido', 400)
        if len(nombre) < constants.NOMBRE_MIN_LENGTH:
            raise AppError('El nombre debe tener al menos 2 caracteres', 400)

        pais_id = to_int(data.get('pais_id'))
        if pais_id is None or not self.marca_repo.pais_exists(pais_id):
            raise AppError('País inválido', 400)

        values = {'nombre': nombre, 'pais_id': pais_id}
        if 'descripcion' in data:
            values['descripcion'] = data.get('descripcion')
        return values

    def create_marca(self, data: Dict[str, Any]) -> Dict[str, Any]:
        values = self.validate(data or {})
        values['estado_id'] = constants.ESTADO_ACTIVO
        return self.marca_repo.create(values)

    def update_marca(self, marca_id: int, data: Dict[str, Any]) -> Dict[str, str]:
        if not self.marca_repo.find_by_id(marca_id, active_only=True):
            raise AppError('Marca no encontrada', 404)
        self.marca_repo.update(marca_id, self.validate(data or {}))
        return {'message': 'Marca actualizada exitosamente'}

    def delete_marca(self, marca_id: int) -> Dict[str, str]:
        if not self.marca_repo.find_by_id(marca_id, active_only=True):
            raise AppError('Marca no encontrada', 404)
        self.marca_repo.delete(marca_id)
        return {'message': 'Marca eliminada exitosamente'}
