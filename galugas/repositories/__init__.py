# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a MySQL (SQL crudo vía SQLAlchemy).
# Los servicios nunca escriben SQL.
#
# ESTRUCTURA:
# ├── interfaces.py                      → Protocolos (contratos)
# ├── base.py                            → BaseRepository (CRUD + borrado lógico)
# ├── dispositivo_repository.py          → Dispositivo (+ JOINs de detalle)
# ├── categoria_repository.py            → Categoria
# ├── marca_repository.py                → Marca (+ Pais)
# ├── informacion_tecnica_repository.py  → InformacionTecnica
# ├── user_repository.py                 → Usuario (+ Rol)
# └── log_repository.py                  → LogActividad
# ==============================================================================

# Interfaces
from .interfaces import (
    ICrudRepository,
    IUserRepository,
    ILogRepository,
)

# Implementaciones SQL
from .base import BaseRepository
from .dispositivo_repository import DispositivoRepository
from .categoria_repository import CategoriaRepository
from .marca_repository import MarcaRepository
from .informacion_tecnica_repository import InformacionTecnicaRepository
from .user_repository import UserRepository
from .log_repository import LogRepository

__all__ = [
    # Interfaces
    'ICrudRepository',
    'IUserRepository',
    'ILogRepository',

    # Clase base
    'BaseRepository',

    # Implementaciones
    'DispositivoRepository',
    'CategoriaRepository',
    'MarcaRepository',
    'InformacionTecnicaRepository',
    'UserRepository',
    'LogRepository',
]
