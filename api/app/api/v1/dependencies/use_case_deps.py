"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.use_cases.sync_use_cases import SyncUseCases
from app.api.v1.dependencies.repository_deps import get_schema_catalog, get_sync_repository
from app.domain.repositories.schema_catalog import ISchemaCatalog
from app.domain.repositories.sync_repository import ISyncRepository
from app.infrastructure.database.session import get_db


async def get_sync_use_cases(
    db: AsyncSession = Depends(get_db),
    catalog: ISchemaCatalog = Depends(get_schema_catalog),
    repository: ISyncRepository = Depends(get_sync_repository)
) -> SyncUseCases:
    """
    Dependencia para obtener los casos de uso de sincronizacion.

    Args:
        db: Sesion de base de datos (una transaccion por lote)
        catalog: Catalogo de esquemas
        repository: Repositorio de sincronizacion

    Returns:
        SyncUseCases: Instancia de casos de uso de sincronizacion
    """
    return SyncUseCases(db, catalog=catalog, repository=repository)
