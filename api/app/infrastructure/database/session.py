"""
Gestión de sesiones de base de datos.

El esquema de las tablas sincronizables lo gestiona un sistema externo;
aqui solo se crea el engine, el pool de conexiones y la factory de sesiones.
"""
from typing import AsyncGenerator
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)

from app.core.config import settings


def _create_engine_args(database_url: str) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    Servidores (PostgreSQL, MySQL) usan pool acotado; SQLite no lo soporta.

    El pool es el mecanismo de contrapresion: con pool_size + max_overflow
    conexiones ocupadas, los lotes nuevos esperan hasta pool_timeout.
    """
    args = {
        "echo": settings.DEBUG,
    }

    if not database_url.startswith("sqlite"):
        args.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
            "pool_pre_ping": True,  # Verifica conexion antes de usar
        })

    return args


def enable_sqlite_savepoints(async_engine: AsyncEngine) -> None:
    """
    Hace que SQLite (pysqlite/aiosqlite) respete SAVEPOINT.

    El driver emite BEGIN por su cuenta y de forma tardia; se desactiva
    y se emite BEGIN al inicio de cada transaccion de SQLAlchemy.
    """
    @event.listens_for(async_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str) -> AsyncEngine:
    """
    Crea el engine asincrono para la URL indicada.

    Args:
        database_url: URL de SQLAlchemy (postgresql+asyncpg, sqlite+aiosqlite, ...)

    Returns:
        AsyncEngine: Engine configurado
    """
    async_engine = create_async_engine(database_url, **_create_engine_args(database_url))
    if database_url.startswith("sqlite"):
        enable_sqlite_savepoints(async_engine)
    return async_engine


# Engine de base de datos
engine = build_engine(settings.effective_database_url)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Generador de sesiones de base de datos.
    Para usar como dependencia en FastAPI.

    Cada peticion toma una conexion del pool y la libera al cerrar la
    sesion. Los casos de uso controlan su propio commit/rollback.

    Yields:
        AsyncSession: Sesión de base de datos
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def close_db() -> None:
    """Cierra las conexiones de la base de datos."""
    await engine.dispose()
