"""
Dependencias para inyección de repositorios.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database.schema_catalog import SqlAlchemySchemaCatalog
from app.infrastructure.database.session import get_db
from app.infrastructure.repositories.sync_repository_impl import SyncRepositoryImpl


async def get_schema_catalog(
    session: AsyncSession = Depends(get_db)
) -> SqlAlchemySchemaCatalog:
    """
    Dependencia para obtener el catalogo de esquemas.
    La cache es compartida por todo el proceso; la sesion solo se usa
    en el primer acceso a cada tabla.

    Args:
        session: Sesión de base de datos

    Returns:
        SqlAlchemySchemaCatalog: Catalogo de esquemas
    """
    return SqlAlchemySchemaCatalog(session)


async def get_sync_repository(
    session: AsyncSession = Depends(get_db)
) -> SyncRepositoryImpl:
    """
    Dependencia para obtener el repositorio de sincronizacion.

    Args:
        session: Sesión de base de datos

    Returns:
        SyncRepositoryImpl: Instancia del repositorio de sincronizacion
    """
    return SyncRepositoryImpl(session)
