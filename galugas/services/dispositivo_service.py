# ==============================================================================
# SERVICIO DE DISPOSITIVOS
# ==============================================================================
# Lógica de negocio del catálogo: validación, conversión de tipos y
# enriquecimiento con URLs absolutas (imagen y detalle).
# ==============================================================================

from typing import Any, Dict, List, Optional

from galugas import constants
from galugas.errors import AppError
from galugas.helpers import parse_date, serialize_row, to_float, to_int
from galugas.performance_logger import profile_function
from galugas.repositories.dispositivo_repository import DispositivoRepository

REQUIRED_FIELDS = ['nombre', 'precio', 'fechaLanzamiento', 'marca_id', 'informacionTecnica_id']
_INT_FIELDS = ('marca_id', 'categoria_id', 'informacionTecnica_id')


class DispositivoService:
    """
    Servicio para el catálogo de dispositivos.

    Los métodos de lectura reciben `base_url` (ej: 'http://localhost:3000')
    para construir imagen_url y detalles_url.
    """

    def __init__(self, dispositivo_repo: DispositivoRepository):
        """
        Args:
            dispositivo_repo: Repositorio de dispositivos
        """
        self.dispositivo_repo = dispositivo_repo

    # =========================================================================
    # LECTURA
    # =========================================================================

    @profile_function
    def get_dispositivos(self, filters: Dict[str, Any] = None, base_url: str = '') -> List[Dict[str, Any]]:
        rows = self.dispositivo_repo.find_all_with_details(filters or {})
        return [self._enrich(row, base_url) for row in rows]

    def get_dispositivo_by_id(self, dispositivo_id: int, base_url: str = '') -> Dict[str, Any]:
        """
        Raises:
            AppError(404): Inexistente o eliminado
        """
        row = self.dispositivo_repo.find_by_id_with_details(dispositivo_id)
        if not row:
            raise AppError('Dispositivo no encontrado', 404)
        return self._enrich(row, base_url)

    def search_dispositivos(self, term: str, base_url: str = '') -> List[Dict[str, Any]]:
        term = (term or '').strip()
        if not term:
            raise AppError('Término de búsqueda requerido', 400)
        rows = self.dispositivo_repo.find_all_with_details({'search': term})
        return [self._enrich(row, base_url) for row in rows]

    def get_by_categoria(self, categoria_id: int, base_url: str = '') -> List[Dict[str, Any]]:
        return [self._enrich(r, base_url) for r in self.dispositivo_repo.find_by_categoria(categoria_id)]

    def get_by_marca(self, marca_id: int, base_url: str = '') -> List[Dict[str, Any]]:
        return [self._enrich(r, base_url) for r in self.dispositivo_repo.find_by_marca(marca_id)]

    def get_estadisticas(self) -> Dict[str, Any]:
        stats = self.dispositivo_repo.get_estadisticas()
        stats['recientes'] = [serialize_row(r) for r in stats['recientes']]
        return stats

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    def create_dispositivo(self, data: Dict[str, Any], image_filename: Optional[str] = None) -> Dict[str, Any]:
        """
        Crea un dispositivo activo.

        Args:
            data: Campos del formulario/JSON
            image_filename: Nombre del archivo subido (opcional)

        Returns:
            {'id': nuevo_id, ...datos guardados}
        """
        self.validate(data)

        values = self._convert(data)
        values['pathFoto'] = image_filename
        values['estado_id'] = constants.ESTADO_ACTIVO

        created = self.dispositivo_repo.create(values)
        return serialize_row(created)

    def update_dispositivo(
        self,
        dispositivo_id: int,
        data: Dict[str, Any],
        image_filename: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Actualiza un dispositivo. pathFoto solo cambia si llega una imagen nueva.

        Returns:
            {'message': ..., 'previous_image': pathFoto anterior si se reemplazó}
        """
        existing = self.dispositivo_repo.find_by_id(dispositivo_id)
        if not existing:
            raise AppError('Dispositivo no encontrado', 404)

        values = self._convert(data)
        if 'precio' in values and values['precio'] is not None and values['precio'] <= 0:
            raise AppError('El precio debe ser mayor a 0', 400)
        if data.get('fechaLanzamiento') and values.get('fechaLanzamiento') is None:
            raise AppError('Fecha de lanzamiento inválida', 400)
        values.pop('pathFoto', None)
        if image_filename:
            values['pathFoto'] = image_filename

        if not self.dispositivo_repo.update(dispositivo_id, values):
            raise AppError('Error al actualizar el dispositivo', 500)

        result = {'message': 'Dispositivo actualizado exitosamente'}
        if image_filename and existing.get('pathFoto'):
            result['previous_image'] = existing['pathFoto']
        return result

    def delete_dispositivo(self, dispositivo_id: int) -> Dict[str, str]:
        """Borrado lógico."""
        if not self.dispositivo_repo.find_by_id(dispositivo_id):
            raise AppError('Dispositivo no encontrado', 404)

        if not self.dispositivo_repo.delete(dispositivo_id):
            raise AppError('Error al eliminar el dispositivo', 500)
        return {'message': 'Dispositivo eliminado exitosamente'}

    # =========================================================================
    # INTERNOS
    # =========================================================================

    @staticmethod
    def validate(data: Dict[str, Any]) -> None:
        """
        Raises:
            AppError(400): Campos faltantes, precio <= 0 o fecha inválida
        """
        missing = [f for f in REQUIRED_FIELDS if data.get(f) in (None, '')]
        if missing:
            raise AppError(f"Campos requeridos faltantes: {', '.join(missing)}", 400, details=missing)

        precio = to_float(data.get('precio'))
        if precio is None or precio <= 0:
            raise AppError('El precio debe ser mayor a 0', 400)

        if parse_date(data.get('fechaLanzamiento')) is None:
            raise AppError('Fecha de lanzamiento inválida', 400)

    @staticmethod
    def _convert(data: Dict[str, Any]) -> Dict[str, Any]:
        values = {k: v for k, v in (data or {}).items() if k in DispositivoRepository.columns}
        if 'precio' in values:
            values['precio'] = to_float(values['precio'])
        for field in _INT_FIELDS:
            if field in values:
                values[field] = to_int(values[field])
        if 'fechaLanzamiento' in values:
            fecha = parse_date(values['fechaLanzamiento'])
            values['fechaLanzamiento'] = fecha.isoformat() if fecha else None
        return values

    @staticmethod
    def _enrich(row: Dict[str, Any], base_url: str) -> Dict[str, Any]:
        data = serialize_row(row)
        base_url = (base_url or '').rstrip('/')
        data['imagen_url'] = f"{base_url}/uploads/{data['pathFoto']}" if data.get('pathFoto') else None
        data['detalles_url'] = f"{base_url}/api/dispositivos/{data['dispositivo_id']}"
        return data
