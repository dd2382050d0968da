# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio de la API.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones (lanzan AppError)
# 3. Las rutas (blueprints) solo llaman a servicios
# 4. Las contraseñas NUNCA salen de esta capa
#
# ESTRUCTURA:
# ├── auth_service.py                 → Login, registro, perfil propio
# ├── user_service.py                 → Administración de usuarios
# ├── dispositivo_service.py          → Catálogo de dispositivos
# ├── categoria_service.py            → Categorías
# ├── marca_service.py                → Marcas
# ├── informacion_tecnica_service.py  → Fichas técnicas
# └── log_service.py                  → Auditoría (registro, consulta, purga)
#
# REGLA DE AUDITORÍA:
# LogService.record() nunca lanza excepciones. Un fallo al escribir el log
# no debe romper la operación que lo disparó.
# ==============================================================================

from galugas.services.auth_service import AuthService
from galugas.services.user_service import UserService, SelfModificationError
from galugas.services.dispositivo_service import DispositivoService
from galugas.services.categoria_service import CategoriaService
from galugas.services.marca_service import MarcaService
from galugas.services.informacion_tecnica_service import InformacionTecnicaService
from galugas.services.log_service import LogService, redact_sensitive

__all__ = [
    'AuthService',
    'UserService',
    'SelfModificationError',
    'DispositivoService',
    'CategoriaService',
    'MarcaService',
    'InformacionTecnicaService',
    'LogService',
    'redact_sensitive',
]
