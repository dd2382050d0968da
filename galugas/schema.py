# ==============================================================================
# ESQUEMA DE BASE DE DATOS
# ==============================================================================
# Definición de tablas con SQLAlchemy Core. Las consultas de los repositorios
# son SQL crudo; estas definiciones solo sirven para crear el esquema
# (desarrollo / pruebas) y sembrar las tablas de catálogo.
# ==============================================================================

import logging

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    func,
    select,
)

from galugas import constants

logger = logging.getLogger('galugas.database')

metadata = MetaData()

estado = Table(
    'Estado', metadata,
    Column('estado_id', Integer, primary_key=True),
    Column('nombre', String(50), nullable=False),
)

rol = Table(
    'Rol', metadata,
    Column('rol_id', Integer, primary_key=True),
    Column('nombre', String(50), nullable=False, unique=True),
    Column('descripcion', String(255)),
)

pais = Table(
    'Pais', metadata,
    Column('pais_id', Integer, primary_key=True),
    Column('nombre', String(100), nullable=False),
)

usuario = Table(
    'Usuario', metadata,
    Column('usuario_id', Integer, primary_key=True, autoincrement=True),
    Column('primer_nombre', String(100), nullable=False),
    Column('primer_apellido', String(100), nullable=False),
    Column('email', String(255), nullable=False, unique=True),
    Column('contrasena', String(255), nullable=False),
    Column('rol_id', Integer, ForeignKey('Rol.rol_id'), nullable=False),
    Column('estado_id', Integer, ForeignKey('Estado.estado_id'), nullable=False),
    Column('fecha_creacion', DateTime, server_default=func.current_timestamp()),
)

categoria = Table(
    'Categoria', metadata,
    Column('categoria_id', Integer, primary_key=True, autoincrement=True),
    Column('nombre', String(100), nullable=False, unique=True),
    Column('descripcion', Text),
    Column('estado_id', Integer, ForeignKey('Estado.estado_id'), nullable=False),
)

marca = Table(
    'Marca', metadata,
    Column('marca_id', Integer, primary_key=True, autoincrement=True),
    Column('nombre', String(100), nullable=False),
    Column('descripcion', Text),
    Column('pais_id', Integer, ForeignKey('Pais.pais_id'), nullable=False),
    Column('estado_id', Integer, ForeignKey('Estado.estado_id'), nullable=False),
)

informacion_tecnica = Table(
    'InformacionTecnica', metadata,
    Column('informacionTecnica_id', Integer, primary_key=True, autoincrement=True),
    Column('procesador', String(150)),
    Column('ram_gb', Integer),
    Column('almacenamiento', String(100)),
    Column('resolucion', String(100)),
    Column('dimensiones', String(100)),
    Column('potencia', String(100)),
    Column('puertos', String(255)),
    Column('conectividad', String(255)),
    Column('version', String(100)),
    Column('otros', Text),
)

dispositivo = Table(
    'Dispositivo', metadata,
    Column('dispositivo_id', Integer, primary_key=True, autoincrement=True),
    Column('nombre', String(150), nullable=False),
    Column('descripcion', Text),
    Column('precio', Numeric(10, 2), nullable=False),
    Column('fechaLanzamiento', Date),
    Column('marca_id', Integer, ForeignKey('Marca.marca_id'), nullable=False),
    Column('categoria_id', Integer, ForeignKey('Categoria.categoria_id')),
    Column('informacionTecnica_id', Integer, ForeignKey('InformacionTecnica.informacionTecnica_id')),
    Column('estado_id', Integer, ForeignKey('Estado.estado_id'), nullable=False),
    Column('pathFoto', String(255)),
)

log_actividad = Table(
    'LogActividad', metadata,
    Column('log_id', Integer, primary_key=True, autoincrement=True),
    Column('usuario_id', Integer, ForeignKey('Usuario.usuario_id'), nullable=True),
    Column('tipo_usuario', String(50), nullable=False),
    Column('accion', String(50), nullable=False),
    Column('modulo', String(50), nullable=False),
    Column('descripcion', Text),
    Column('ip_address', String(45)),
    Column('user_agent', String(500)),
    Column('recurso_afectado', String(100)),
    Column('id_recurso_afectado', Integer),
    Column('metadata', Text),
    Column('fecha_creacion', DateTime, nullable=False, index=True),
)

# ═══════════════════════════════════════════════════════════════════════════
# DATOS SEMILLA
# ═══════════════════════════════════════════════════════════════════════════

SEED_ESTADOS = [
    {'estado_id': constants.ESTADO_ACTIVO, 'nombre': 'Activo'},
    {'estado_id': constants.ESTADO_INACTIVO, 'nombre': 'Inactivo'},
    {'estado_id': constants.ESTADO_SUSPENDIDO, 'nombre': 'Suspendido'},
]

SEED_ROLES = [
    {'rol_id': constants.ROL_ID_ADMIN, 'nombre': constants.ROLE_ADMIN,
     'descripcion': 'Acceso total al sistema'},
    {'rol_id': constants.ROL_ID_USUARIO, 'nombre': constants.ROLE_USUARIO,
     'descripcion': 'Cliente de la tienda'},
    {'rol_id': constants.ROL_ID_VENDEDOR, 'nombre': constants.ROLE_VENDEDOR,
     'descripcion': 'Gestión del catálogo'},
]

SEED_PAISES = [
    {'pais_id': 1, 'nombre': 'Estados Unidos'},
    {'pais_id': 2, 'nombre': 'Corea del Sur'},
    {'pais_id': 3, 'nombre': 'China'},
    {'pais_id': 4, 'nombre': 'Japón'},
    {'pais_id': 5, 'nombre': 'Colombia'},
]


def _seed(conn, table, rows, key):
    existing = {r[0] for r in conn.execute(select(table.c[key]))}
    missing = [r for r in rows if r[key] not in existing]
    if missing:
        conn.execute(table.insert(), missing)


def init_db(db) -> None:
    """
    Crea las tablas (si no existen) y siembra Estado, Rol y Pais.

    Args:
        db: DatabaseService
    """
    metadata.create_all(db.engine)
    with db.transaction() as conn:
        _seed(conn, estado, SEED_ESTADOS, 'estado_id')
        _seed(conn, rol, SEED_ROLES, 'rol_id')
        _seed(conn, pais, SEED_PAISES, 'pais_id')
    logger.info('database_schema_ready')
