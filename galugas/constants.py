# ==============================================================================
# CONSTANTES GLOBALES
# ==============================================================================
# Roles, estados, paginación y catálogos de acciones/módulos de auditoría.
# ==============================================================================

# Roles del sistema (columna Rol.nombre)
ROLE_ADMIN = 'Administrador'
ROLE_VENDEDOR = 'Vendedor'
ROLE_USUARIO = 'Usuario'
ROLE_SISTEMA = 'Sistema'  # Actor centinela para acciones sin usuario

VALID_ROLES = frozenset([ROLE_ADMIN, ROLE_VENDEDOR, ROLE_USUARIO])
ELEVATED_ROLES = frozenset([ROLE_ADMIN, ROLE_VENDEDOR])

# IDs sembrados en la tabla Rol
ROL_ID_ADMIN = 1
ROL_ID_USUARIO = 2
ROL_ID_VENDEDOR = 3

# Estados (tabla Estado)
ESTADO_ACTIVO = 1
ESTADO_INACTIVO = 2
ESTADO_SUSPENDIDO = 3

# Paginación
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
DEFAULT_LOG_LIMIT = 50
MAX_EXPORT_ROWS = 10000

# Validaciones
EMAIL_REGEX = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'
PASSWORD_MIN_LENGTH = 6
NOMBRE_MIN_LENGTH = 2

# ═══════════════════════════════════════════════════════════════════════════
# AUDITORÍA
# ═══════════════════════════════════════════════════════════════════════════

# Acciones
ACCION_CONSULTA = 'CONSULTA'
ACCION_CREACION = 'CREACION'
ACCION_ACTUALIZACION = 'ACTUALIZACION'
ACCION_ELIMINACION = 'ELIMINACION'
ACCION_ACCESO = 'ACCESO'
ACCION_BUSQUEDA = 'BUSQUEDA'
ACCION_INICIO_SESION = 'INICIO_SESION'
ACCION_CIERRE_SESION = 'CIERRE_SESION'
ACCION_ERROR_AUTENTICACION = 'ERROR_AUTENTICACION'
ACCION_REGISTRO_USUARIO = 'REGISTRO_USUARIO'
ACCION_ACTUALIZACION_PERFIL = 'ACTUALIZACION_PERFIL'
ACCION_CAMBIO_CONTRASENA = 'CAMBIO_CONTRASENA'
ACCION_ACCESO_DENEGADO = 'ACCESO_DENEGADO'
ACCION_MANTENIMIENTO = 'MANTENIMIENTO'
ACCION_EXPORTACION = 'EXPORTACION'

# Módulos
MODULO_PANEL_ADMIN = 'PANEL_ADMIN'
MODULO_DISPOSITIVOS = 'DISPOSITIVOS'
MODULO_CATEGORIAS = 'CATEGORIAS'
MODULO_MARCAS = 'MARCAS'
MODULO_AUTENTICACION = 'AUTENTICACION'
MODULO_USUARIOS = 'USUARIOS'
MODULO_LOGS = 'LOGS'
MODULO_API = 'API'
MODULO_SISTEMA = 'SISTEMA'
MODULO_SEGURIDAD = 'SEGURIDAD'

# Campos que nunca se guardan en claro dentro de metadata
SENSITIVE_FIELDS = (
    'password',
    'contrasena',
    'token',
    'authorization',
    'secret',
    'api_key',
    'access_token',
    'refresh_token',
)
SENSITIVE_MASK = '***SENSITIVE***'

# Periodos de estadísticas → días
PERIODOS_ESTADISTICAS = {
    'dia': 1,
    'semana': 7,
    'mes': 30,
}

# Subida de imágenes
ALLOWED_IMAGE_MIMETYPES = frozenset([
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
    'image/svg+xml',
])
MIMETYPE_EXTENSIONS = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/gif': '.gif',
    'image/webp': '.webp',
    'image/svg+xml': '.svg',
}
