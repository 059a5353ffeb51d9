"""
Endpoints para sincronizacion de registros de clientes offline.
"""
from typing import List

from fastapi import APIRouter, Depends, Path, status

from app.application.dto.sync_dto import MappingResultDTO, SyncBatchRequestDTO
from app.application.use_cases.sync_use_cases import SyncUseCases
from app.api.v1.dependencies.use_case_deps import get_sync_use_cases
from app.core.config import settings
from app.core.security import verify_api_key
from app.shared.exceptions.domain import InvalidSyncPayloadException


router = APIRouter(
    prefix="/sync",
    tags=["Sync"],
    dependencies=[Depends(verify_api_key)],
)


@router.post(
    "/{table}",
    response_model=List[MappingResultDTO],
    status_code=status.HTTP_200_OK,
    summary="Reconciliar un lote de registros de un cliente"
)
async def sync_table(
    dto: SyncBatchRequestDTO,
    table: str = Path(..., description="Tabla sincronizable destino"),
    use_cases: SyncUseCases = Depends(get_sync_use_cases)
) -> List[MappingResultDTO]:
    """
    Reconcilia los registros de un tenant contra la tabla indicada.

    La respuesta contiene un resultado por registro, en el mismo orden:
    inserted, updated, deleted, skipped, noop o error. Los errores de un
    registro no afectan al resto; solo un fallo de esquema o de commit
    devuelve un error unico y revierte todo el lote.

    Args:
        dto: Tenant y registros del lote
        table: Tabla destino
        use_cases: Casos de uso de sincronizacion (inyectado)

    Returns:
        List[MappingResultDTO]: Resultado por registro
    """
    if len(dto.data) > settings.SYNC_MAX_BATCH_SIZE:
        raise InvalidSyncPayloadException(
            message=f"data[] excede el maximo de {settings.SYNC_MAX_BATCH_SIZE} registros",
            details={"received": len(dto.data)}
        )

    results = await use_cases.reconcile_batch(dto.tenant_id, table, dto.data)
    return [MappingResultDTO.from_entity(r) for r in results]
