# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Este módulo proporciona una forma centralizada de obtener instancias
# de repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (SQLite en memoria o repositorios falsos)
#   - Un único pool de conexiones para toda la API
#
# ═══════════════════════════════════════════════════════════════════════════════
# CICLO DE VIDA
# ═══════════════════════════════════════════════════════════════════════════════
#
# create_app() reinicia el singleton y guarda el contenedor en
# app.extensions['galugas.container']. Las rutas y middlewares lo obtienen
# con current_container(), nunca importando el singleton directamente.
#
# ==============================================================================

from typing import Optional

from flask import current_app

from galugas.database import DatabaseService

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia (SQL crudo sobre el pool)
# ═══════════════════════════════════════════════════════════════════════════════
from galugas.repositories import (
    CategoriaRepository,
    DispositivoRepository,
    InformacionTecnicaRepository,
    LogRepository,
    MarcaRepository,
    UserRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from galugas.services import (
    AuthService,
    CategoriaService,
    DispositivoService,
    InformacionTecnicaService,
    LogService,
    MarcaService,
    UserService,
)

EXTENSION_KEY = 'galugas.container'


class AppContainer:
    """
    Contenedor de dependencias de la API.

    Implementa el patrón Singleton para asegurar una única instancia
    de cada repositorio y servicio (y por lo tanto un único pool).

    Uso:
        container = AppContainer(db_url='sqlite://')
        log_service = container.log_service
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls, db_url: str = None):
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, db_url: str = None):
        """
        Args:
            db_url: URL SQLAlchemy; por defecto la de galugas.config
        """
        if self._initialized:
            return

        self._db_url = db_url
        self._db: Optional[DatabaseService] = None

        # Repositorios (lazy loading)
        self._user_repo: Optional[UserRepository] = None
        self._dispositivo_repo: Optional[DispositivoRepository] = None
        self._categoria_repo: Optional[CategoriaRepository] = None
        self._marca_repo: Optional[MarcaRepository] = None
        self._info_repo: Optional[InformacionTecnicaRepository] = None
        self._log_repo: Optional[LogRepository] = None

        # Servicios (lazy loading)
        self._auth_service: Optional[AuthService] = None
        self._user_service: Optional[UserService] = None
        self._dispositivo_service: Optional[DispositivoService] = None
        self._categoria_service: Optional[CategoriaService] = None
        self._marca_service: Optional[MarcaService] = None
        self._informacion_tecnica_service: Optional[InformacionTecnicaService] = None
        self._log_service: Optional[LogService] = None

        self._initialized = True

    # =========================================================================
    # BASE DE DATOS
    # =========================================================================

    @property
    def db(self) -> DatabaseService:
        """Servicio de base de datos (pool compartido)."""
        if self._db is None:
            self._db = DatabaseService(self._db_url)
        return self._db

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def user_repo(self) -> UserRepository:
        if self._user_repo is None:
            self._user_repo = UserRepository(self.db)
        return self._user_repo

    @property
    def dispositivo_repo(self) -> DispositivoRepository:
        if self._dispositivo_repo is None:
            self._dispositivo_repo = DispositivoRepository(self.db)
        return self._dispositivo_repo

    @property
    def categoria_repo(self) -> CategoriaRepository:
        if self._categoria_repo is None:
            self._categoria_repo = CategoriaRepository(self.db)
        return self._categoria_repo

    @property
    def marca_repo(self) -> MarcaRepository:
        if self._marca_repo is None:
            self._marca_repo = MarcaRepository(self.db)
        return self._marca_repo

    @property
    def informacion_tecnica_repo(self) -> InformacionTecnicaRepository:
        if self._info_repo is None:
            self._info_repo = InformacionTecnicaRepository(self.db)
        return self._info_repo

    @property
    def log_repo(self) -> LogRepository:
        if self._log_repo is None:
            self._log_repo = LogRepository(self.db)
        return self._log_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def log_service(self) -> LogService:
        """Servicio de auditoría (singleton)."""
        if self._log_service is None:
            self._log_service = LogService(self.log_repo)
        return self._log_service

    @property
    def auth_service(self) -> AuthService:
        if self._auth_service is None:
            self._auth_service = AuthService(self.user_repo)
        return self._auth_service

    @property
    def user_service(self) -> UserService:
        if self._user_service is None:
            self._user_service = UserService(self.user_repo)
        return self._user_service

    @property
    def dispositivo_service(self) -> DispositivoService:
        if self._dispositivo_service is None:
            self._dispositivo_service = DispositivoService(self.dispositivo_repo)
        return self._dispositivo_service

    @property
    def categoria_service(self) -> CategoriaService:
        if self._categoria_service is None:
            self._categoria_service = CategoriaService(self.categoria_repo, self.dispositivo_repo)
        return self._categoria_service

    @property
    def marca_service(self) -> MarcaService:
        if self._marca_service is None:
            self._marca_service = MarcaService(self.marca_repo)
        return self._marca_service

    @property
    def informacion_tecnica_service(self) -> InformacionTecnicaService:
        if self._informacion_tecnica_service is None:
            self._informacion_tecnica_service = InformacionTecnicaService(self.informacion_tecnica_repo)
        return self._informacion_tecnica_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """
        Reinicia todas las instancias y cierra el pool.
        Útil para testing.
        """
        if self._db is not None:
            self._db.close()
        self._db = None
        self._user_repo = None
        self._dispositivo_repo = None
        self._categoria_repo = None
        self._marca_repo = None
        self._info_repo = None
        self._log_repo = None
        self._auth_service = None
        self._user_service = None
        self._dispositivo_service = None
        self._categoria_service = None
        self._marca_service = None
        self._informacion_tecnica_service = None
        self._log_service = None

    @classmethod
    def get_instance(cls, db_url: str = None) -> 'AppContainer':
        """
        Obtiene la instancia singleton del contenedor.

        Args:
            db_url: URL de la base (solo se usa en la primera llamada)
        """
        if cls._instance is None:
            return cls(db_url)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia singleton (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container(db_url: str = None) -> AppContainer:
    """
    Obtiene el contenedor de dependencias global.

    Args:
        db_url: URL SQLAlchemy de la base de datos
    """
    return AppContainer.get_instance(db_url)


def current_container() -> AppContainer:
    """Contenedor asociado a la aplicación Flask activa."""
    return current_app.extensions[EXTENSION_KEY]
