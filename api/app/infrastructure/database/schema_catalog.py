"""
Catalogo de esquemas basado en la introspeccion de SQLAlchemy.
"""
from typing import Any, Dict, List, Tuple

from loguru import logger
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from app.domain.repositories.schema_catalog import ISchemaCatalog


class SqlAlchemySchemaCatalog(ISchemaCatalog):
    """
    Descubre las columnas de una tabla (nombre y tipo) con el Inspector
    de SQLAlchemy.

    La cache es de clase (compartida por todo el proceso), sin expiracion:
    se asume que el esquema no cambia mientras el proceso vive. Dos primeros
    accesos simultaneos a la misma tabla pueden consultar ambos la base de
    datos; el segundo sobrescribe con el mismo valor.
    """

    _columns_cache: Dict[str, Tuple[Tuple[str, Any], ...]] = {}

    def __init__(self, session: AsyncSession):
        """
        Args:
            session: Sesion usada solo en el primer acceso a cada tabla
        """
        self.session = session

    async def describe_columns(self, table: str) -> Tuple[Tuple[str, Any], ...]:
        cached = self._columns_cache.get(table)
        if cached is not None:
            return cached

        def _inspect(sync_session: Session) -> List[Tuple[str, Any]]:
            inspector = inspect(sync_session.connection())
            return [(c["name"], c["type"]) for c in inspector.get_columns(table)]

        columns = tuple(await self.session.run_sync(_inspect))
        type(self)._columns_cache[table] = columns
        logger.debug(f"Esquema de '{table}' cacheado: {len(columns)} columnas")
        return columns

    @classmethod
    def clear(cls) -> int:
        """Vacia la cache (cierre de la aplicacion y tests)."""
        count = len(cls._columns_cache)
        cls._columns_cache.clear()
        return count
