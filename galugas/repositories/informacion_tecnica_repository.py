# ==============================================================================
# REPOSITORIO DE INFORMACIÓN TÉCNICA
# ==============================================================================
# Fichas técnicas referenciadas por Dispositivo.informacionTecnica_id.
# No tiene estado: el borrado es físico.
# ==============================================================================

from typing import Any, Dict

from galugas.repositories.base import BaseRepository


class InformacionTecnicaRepository(BaseRepository):

    table_name = 'InformacionTecnica'
    columns = frozenset([
        'procesador',
        'ram_gb',
        'almacenamiento',
        'resolucion',
        'dimensiones',
        'potencia',
        'puertos',
        'conectividad',
        'version',
        'otros',
    ])

    def create_and_return_id(self, data: Dict[str, Any]) -> int:
        return self.create(data)['id']
