# ==============================================================================
# SERVICIO DE INFORMACIÓN TÉCNICA
# ==============================================================================
# Fichas técnicas que el formulario de dispositivos referencia por ID.
# ==============================================================================

from typing import Any, Dict, List

from galugas.errors import AppError
from galugas.helpers import serialize_row, to_int
from galugas.repositories.informacion_tecnica_repository import InformacionTecnicaRepository


class InformacionTecnicaService:

    def __init__(self, info_repo: InformacionTecnicaRepository):
        self.info_repo = info_repo

    def get_all(self) -> List[Dict[str, Any]]:
        return [serialize_row(r) for r in self.info_repo.find_all(order_by='-informacionTecnica_id')]

    def get_by_id(self, info_id: int) -> Dict[str, Any]:
        row = self.info_repo.find_by_id(info_id)
        if not row:
            raise AppError('Información técnica no encontrada', 404)
        return serialize_row(row)

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Crea una ficha técnica. Al menos un campo debe tener valor.

        Returns:
            {'id': nuevo_id, ...campos}
        """
        values = {k: v for k, v in (data or {}).items()
                  if k in self.info_repo.columns and v not in (None, '')}
        if not values:
            raise AppError('Debe indicar al menos un dato técnico', 400)
        if 'ram_gb' in values:
            values['ram_gb'] = to_int(values['ram_gb'])
            if values['ram_gb'] is None or values['ram_gb'] < 0:
                raise AppError('La RAM debe ser un número entero positivo', 400)
        return self.info_repo.create(values)
