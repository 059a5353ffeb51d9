"""
DTOs relacionados con la sincronizacion offline.
Definen el cuerpo del lote y el resultado por registro.
"""
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field, field_validator

from app.domain.entities.sync_record import MappingResult
from app.shared.constants.sync_constants import MappingStatus


class SyncBatchRequestDTO(BaseModel):
    """
    DTO del lote enviado por un cliente.

    Cada elemento de data es un objeto con los campos de la tabla mas
    los metadatos de sync: client_uuid, client_id, sync_status,
    server_id, local_version, local_updated_at.
    """

    tenant_id: Union[int, str] = Field(..., description="Tenant al que pertenecen los registros")
    data: List[Dict[str, Any]] = Field(..., description="Registros a reconciliar, en orden")

    @field_validator("tenant_id")
    @classmethod
    def tenant_not_empty(cls, value: Union[int, str]) -> Union[int, str]:
        if isinstance(value, str) and not value.strip():
            raise ValueError("tenant_id no puede estar vacio")
        return value


class MappingResultDTO(BaseModel):
    """DTO de respuesta para un registro reconciliado."""

    client_uuid: Optional[Any] = Field(None, description="Identificador estable del cliente")
    client_id: Optional[Any] = Field(None, description="Identificador local del cliente")
    server_id: Optional[Any] = Field(None, description="Identidad asignada por el servidor")
    status: MappingStatus = Field(..., description="Resultado del registro")
    server_version: Optional[int] = Field(None, description="Version del registro en el servidor")
    message: Optional[str] = Field(None, description="Detalle del error")

    @classmethod
    def from_entity(cls, result: MappingResult) -> "MappingResultDTO":
        return cls(
            client_uuid=result.client_uuid,
            client_id=result.client_id,
            server_id=result.server_id,
            status=result.status,
            server_version=result.server_version,
            message=result.message,
        )
