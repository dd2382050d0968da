# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos (protocolos) que cumplen los repositorios SQL. Los servicios
# dependen de estas interfaces y no de la implementación concreta:
#
# 1. TESTING
#    - Se pueden pasar dobles en memoria que cumplan el protocolo
#
# 2. DOCUMENTACIÓN
#    - Qué operaciones ofrece cada repositorio
#
# ==============================================================================

import datetime
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class ICrudRepository(Protocol):
    """
    Interfaz común para toda entidad con CRUD.
    Usado por: Dispositivo, Categoria, Marca, InformacionTecnica, Usuario.
    """

    def find_all(
        self,
        where: Dict[str, Any] = None,
        order_by: str = None,
        limit: int = None,
        offset: int = None,
        include_inactive: bool = False
    ) -> List[Dict[str, Any]]:
        ...

    def find_by_id(self, record_id: int, active_only: bool = False) -> Optional[Dict[str, Any]]:
        ...

    def create(self, data: Dict[str, Any], conn=None) -> Dict[str, Any]:
        ...

    def update(self, record_id: int, data: Dict[str, Any], conn=None) -> bool:
        ...

    def delete(self, record_id: int, conn=None) -> bool:
        ...

    def count(self, where: Dict[str, Any] = None, include_inactive: bool = False) -> int:
        ...


@runtime_checkable
class IUserRepository(ICrudRepository, Protocol):
    """Interfaz para el repositorio de usuarios."""

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        ...

    def find_by_id_with_role(self, usuario_id: int) -> Optional[Dict[str, Any]]:
        ...

    def find_all_with_roles(self, filters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        ...

    def is_email_taken(self, email: str, exclude_id: int = None) -> bool:
        ...

    def update_password(self, usuario_id: int, password_hash: str) -> bool:
        ...


@runtime_checkable
class ILogRepository(Protocol):
    """
    Interfaz para el repositorio de logs de actividad.

    NOTA: Es append-only; no hay update. El borrado es solo por antigüedad.
    """

    def create(self, data: Dict[str, Any], conn=None) -> Dict[str, Any]:
        ...

    def find_with_filters(self, filtros: Dict[str, Any], pagina: int, limite: int) -> Dict[str, Any]:
        ...

    def find_by_user(self, usuario_id: int, limite: int) -> List[Dict[str, Any]]:
        ...

    def get_stats_since(self, desde: datetime.datetime) -> Dict[str, Any]:
        ...

    def delete_older_than(self, cutoff: datetime.datetime) -> int:
        ...
