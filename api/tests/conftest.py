"""
Configuración de fixtures para pytest.
"""
import os

# Configuracion de prueba antes de importar la app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_sync_import.db")
os.environ.setdefault("SYNC_API_KEY", "test-api-key")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.infrastructure.database.schema_catalog import SqlAlchemySchemaCatalog
from app.infrastructure.database.session import build_engine


# Esquema minimo de las tablas sincronizables usadas en los tests
TEST_SCHEMA = [
    """
    CREATE TABLE customer (
        cusid INTEGER PRIMARY KEY AUTOINCREMENT,
        tenant_id INTEGER NOT NULL,
        client_uuid TEXT,
        name TEXT NOT NULL,
        phone TEXT,
        balance NUMERIC,
        server_version INTEGER,
        server_id INTEGER,
        local_version INTEGER,
        local_updated_at TEXT
    )
    """,
    """
    CREATE TABLE bank (
        bankid INTEGER PRIMARY KEY,
        tenant_id INTEGER NOT NULL,
        bankname TEXT
    )
    """,
    """
    CREATE TABLE expgroup (
        tenant_id INTEGER NOT NULL,
        client_uuid TEXT,
        groupname TEXT
    )
    """,
    """
    CREATE TABLE sales (
        saleid INTEGER PRIMARY KEY AUTOINCREMENT,
        tenant_id INTEGER NOT NULL,
        client_uuid TEXT,
        saledate DATE,
        amount NUMERIC(12, 2),
        paid BOOLEAN,
        server_version INTEGER
    )
    """,
    """
    CREATE TABLE shop (
        shopid INTEGER PRIMARY KEY,
        shopname TEXT
    )
    """,
]


@pytest.fixture(autouse=True)
def clear_schema_cache():
    """La cache de esquemas es de proceso: se vacia entre tests."""
    SqlAlchemySchemaCatalog.clear()
    yield
    SqlAlchemySchemaCatalog.clear()


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine sobre un archivo SQLite temporal con el esquema de prueba.
    Usa build_engine para que SAVEPOINT funcione como en produccion.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'sync.db'}")

    async with engine.begin() as conn:
        for ddl in TEST_SCHEMA:
            await conn.exec_driver_sql(ddl)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Sesión de base de datos para un lote."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def fetch_rows(db_engine: AsyncEngine):
    """Lee filas con una conexion independiente (solo ve datos confirmados)."""

    async def _fetch(sql: str, params: dict = None) -> list:
        async with db_engine.connect() as conn:
            result = await conn.exec_driver_sql(sql, params or {})
            return [dict(row) for row in result.mappings().all()]

    return _fetch
