"""
Servicio de base de datos.

Envuelve un engine de SQLAlchemy con pool de conexiones acotado. Cada consulta
toma una conexión del pool y la devuelve al terminar. Las consultas son SQL
crudo (text()) con parámetros nombrados, así el mismo SQL corre en MySQL
(producción) y en SQLite (pruebas).
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, NamedTuple, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool, StaticPool

from galugas import config

logger = logging.getLogger('galugas.database')


class WriteResult(NamedTuple):
    """Resultado de un INSERT/UPDATE/DELETE."""
    rowcount: int
    lastrowid: Optional[int]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


class DatabaseService:
    """
    Servicio para gestionar las conexiones y ejecutar consultas.

    Uso:
        db = DatabaseService()
        rows = db.execute('SELECT * FROM Marca WHERE estado_id = :e', {'e': 1})
        with db.transaction() as conn:
            db.execute_write('UPDATE ...', {...}, conn=conn)
    """

    def __init__(self, url: str = None, echo: bool = False):
        """
        Inicializa el engine con pool de conexiones.

        Args:
            url: URL SQLAlchemy (por defecto la de config)
            echo: Mostrar SQL en el log
        """
        self.url = url or config.get_database_url()
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._initialize_database()

    def _initialize_database(self) -> None:
        try:
            if self.url.startswith('sqlite'):
                engine_kwargs: Dict[str, Any] = {
                    'echo': self.echo,
                    'connect_args': {'check_same_thread': False},
                }
                # En memoria: una sola conexión compartida
                if ':memory:' in self.url or self.url.rstrip('/') == 'sqlite:':
                    engine_kwargs['poolclass'] = StaticPool
                self.engine = create_engine(self.url, **engine_kwargs)
                event.listen(self.engine, 'connect', _enable_sqlite_foreign_keys)
            else:
                self.engine = create_engine(
                    self.url,
                    echo=self.echo,
                    poolclass=QueuePool,
                    pool_size=config.DB_CONNECTION_LIMIT,
                    max_overflow=config.DB_MAX_OVERFLOW,
                    pool_timeout=config.DB_POOL_TIMEOUT,
                    pool_pre_ping=True,
                    pool_recycle=3600,
                )
            logger.info(
                'database_engine_initialized dialect=%s pool_size=%s',
                self.engine.dialect.name,
                config.DB_CONNECTION_LIMIT,
            )
        except SQLAlchemyError as e:
            logger.exception('database_initialization_error: %s', str(e))
            raise

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    # =========================================================================
    # CONEXIONES
    # =========================================================================

    @contextmanager
    def connection(self) -> Generator[Connection, None, None]:
        """Conexión de solo lectura que vuelve al pool al salir."""
        with self.engine.connect() as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Generator[Connection, None, None]:
        """
        Contexto transaccional: commit al salir, rollback si hay excepción.

        Example:
            with db.transaction() as conn:
                db.execute_write(sql1, params1, conn=conn)
                db.execute_write(sql2, params2, conn=conn)
        """
        with self.engine.begin() as conn:
            try:
                yield conn
            except Exception:
                logger.warning('transaction_rollback')
                raise

    # =========================================================================
    # EJECUCIÓN
    # =========================================================================

    def execute(
        self,
        query: str,
        params: Dict[str, Any] = None,
        conn: Connection = None
    ) -> List[Dict[str, Any]]:
        """
        Ejecuta un SELECT y devuelve las filas como dicts.

        Args:
            query: SQL con parámetros nombrados (:nombre)
            params: Valores de los parámetros
            conn: Conexión existente (dentro de una transacción)
        """
        if conn is not None:
            result = conn.execute(text(query), params or {})
            return [dict(row._mapping) for row in result]
        with self.connection() as c:
            result = c.execute(text(query), params or {})
            return [dict(row._mapping) for row in result]

    def execute_one(
        self,
        query: str,
        params: Dict[str, Any] = None,
        conn: Connection = None
    ) -> Optional[Dict[str, Any]]:
        rows = self.execute(query, params, conn=conn)
        return rows[0] if rows else None

    def execute_scalar(self, query: str, params: Dict[str, Any] = None, conn: Connection = None) -> Any:
        row = self.execute_one(query, params, conn=conn)
        if not row:
            return None
        return next(iter(row.values()))

    def execute_write(
        self,
        query: str,
        params: Dict[str, Any] = None,
        conn: Connection = None
    ) -> WriteResult:
        """
        Ejecuta INSERT/UPDATE/DELETE.

        Sin conexión explícita abre su propia transacción (autocommit).

        Returns:
            WriteResult(rowcount, lastrowid)
        """
        if conn is not None:
            result = conn.execute(text(query), params or {})
            return WriteResult(result.rowcount, result.lastrowid)
        with self.transaction() as c:
            result = c.execute(text(query), params or {})
            return WriteResult(result.rowcount, result.lastrowid)

    # =========================================================================
    # MANTENIMIENTO
    # =========================================================================

    def health_check(self) -> bool:
        """Verifica que la base de datos responde (SELECT 1)."""
        try:
            with self.connection() as conn:
                conn.execute(text('SELECT 1'))
            return True
        except SQLAlchemyError as e:
            logger.error('database_health_check_failed: %s', str(e))
            return False

    def close(self) -> None:
        """Cierra todas las conexiones del pool."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info('database_connections_closed')
