# ==============================================================================
# CONFIGURACIÓN CENTRALIZADA
# ==============================================================================
# Todas las variables de entorno del servidor API y del cliente se leen aquí.
# El archivo .env (si existe) se carga al importar el módulo.
#
# VARIABLES PRINCIPALES:
#   DB_HOST / DB_PORT / DB_USER / DB_PASSWORD / DB_NAME → MySQL
#   DATABASE_URL            → URL SQLAlchemy completa (tiene prioridad)
#   SESSION_SECRET          → Firma de la cookie galugas.sid (API)
#   CLIENT_SESSION_SECRET   → Firma de la cookie del cliente
#   RATE_LIMIT_WINDOW / RATE_LIMIT_MAX → Límite de peticiones por IP
#   MAX_FILE_SIZE / UPLOAD_PATH        → Subida de imágenes
# ==============================================================================

import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    """Lee un entero del entorno; si no es válido usa el valor por defecto."""
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'si', 'sí')


BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_DIR = os.path.dirname(BASE_DIR)

# ═══════════════════════════════════════════════════════════════════════════════
# ENTORNO
# ═══════════════════════════════════════════════════════════════════════════════
NODE_ENV = os.environ.get('NODE_ENV') or os.environ.get('FLASK_ENV') or 'development'
IS_PRODUCTION = NODE_ENV == 'production'
IS_DEVELOPMENT = NODE_ENV == 'development'
DEBUG = _env_bool('DEBUG')
APP_VERSION = '1.0.0'

# ═══════════════════════════════════════════════════════════════════════════════
# SERVIDOR API
# ═══════════════════════════════════════════════════════════════════════════════
PORT = _env_int('PORT', 3000)
HOST = os.environ.get('HOST', '0.0.0.0')

# ═══════════════════════════════════════════════════════════════════════════════
# BASE DE DATOS (MySQL vía PyMySQL)
# ═══════════════════════════════════════════════════════════════════════════════
DB_HOST = os.environ.get('DB_HOST', 'localhost')
DB_PORT = _env_int('DB_PORT', 3306)
DB_USER = os.environ.get('DB_USER', 'root')
DB_PASSWORD = os.environ.get('DB_PASSWORD', '')
DB_NAME = os.environ.get('DB_NAME', 'DB_Galugas_web')
DB_CONNECTION_LIMIT = _env_int('DB_CONNECTION_LIMIT', 10)
DB_MAX_OVERFLOW = _env_int('DB_MAX_OVERFLOW', 5)
DB_POOL_TIMEOUT = _env_int('DB_POOL_TIMEOUT', 60)
DATABASE_URL = os.environ.get('DATABASE_URL', '').strip()
AUTO_INIT_DB = _env_bool('AUTO_INIT_DB')  # Crea tablas y datos semilla al arrancar


def get_database_url() -> str:
    """
    Devuelve la URL de conexión SQLAlchemy.

    Si DATABASE_URL está definida se usa tal cual; si no, se arma la URL
    de MySQL con el driver PyMySQL.
    """
    if DATABASE_URL:
        return DATABASE_URL
    return (
        f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        "?charset=utf8mb4"
    )


# ═══════════════════════════════════════════════════════════════════════════════
# SESIONES
# ═══════════════════════════════════════════════════════════════════════════════
_DEFAULT_SESSION_SECRET = 'galugas-session-secret-change-in-production'
_DEFAULT_CLIENT_SECRET = 'galugas-client-session-secret-change-in-production'

SESSION_SECRET = os.environ.get('SESSION_SECRET') or _DEFAULT_SESSION_SECRET
CLIENT_SESSION_SECRET = os.environ.get('CLIENT_SESSION_SECRET') or _DEFAULT_CLIENT_SECRET
SESSION_COOKIE_NAME = 'galugas.sid'
SESSION_MAX_AGE = _env_int('SESSION_MAX_AGE', 86400)  # 24 horas (segundos)
SESSION_COOKIE_SECURE = _env_bool('SESSION_COOKIE_SECURE')

# ═══════════════════════════════════════════════════════════════════════════════
# RATE LIMIT
# ═══════════════════════════════════════════════════════════════════════════════
RATE_LIMIT_WINDOW = _env_int('RATE_LIMIT_WINDOW', 15)  # minutos
RATE_LIMIT_MAX = _env_int('RATE_LIMIT_MAX', 100)

# ═══════════════════════════════════════════════════════════════════════════════
# ARCHIVOS
# ═══════════════════════════════════════════════════════════════════════════════
MAX_FILE_SIZE = _env_int('MAX_FILE_SIZE', 5 * 1024 * 1024)  # 5 MB
UPLOAD_PATH = os.environ.get('UPLOAD_PATH') or os.path.join(PROJECT_DIR, 'uploads')

# ═══════════════════════════════════════════════════════════════════════════════
# LOGS
# ═══════════════════════════════════════════════════════════════════════════════
LOG_RETENTION_DAYS = _env_int('LOG_RETENTION_DAYS', 90)
LOGS_DIR = os.environ.get('LOGS_DIR') or os.path.join(PROJECT_DIR, 'logs')
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO')

# ═══════════════════════════════════════════════════════════════════════════════
# CLIENTE (tienda / panel de administración)
# ═══════════════════════════════════════════════════════════════════════════════
CLIENT_PORT = _env_int('CLIENT_PORT', 3001)
API_URL = os.environ.get('API_URL', 'http://localhost:3000/api').rstrip('/')
API_TIMEOUT = _env_int('API_TIMEOUT', 30)  # segundos
SERVER_URL = os.environ.get('SERVER_URL', 'http://localhost:3000').rstrip('/')
CLIENT_URL = os.environ.get('CLIENT_URL', 'http://localhost:3001')


class ConfigError(Exception):
    """Configuración inválida para el entorno actual."""
    pass


def validate_config() -> None:
    """
    Verifica la configuración antes de arrancar un proceso.

    En producción los secretos por defecto NO están permitidos.

    Raises:
        ConfigError: Si falta algo crítico
    """
    if IS_PRODUCTION:
        if SESSION_SECRET == _DEFAULT_SESSION_SECRET:
            raise ConfigError('SESSION_SECRET no puede ser el valor por defecto en producción')
        if CLIENT_SESSION_SECRET == _DEFAULT_CLIENT_SECRET:
            raise ConfigError('CLIENT_SESSION_SECRET no puede ser el valor por defecto en producción')
    if not API_URL:
        raise ConfigError('API_URL es requerida')
