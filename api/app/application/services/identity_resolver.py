"""
Resolucion de identidad de registros sincronizados.

Decide si un registro del cliente corresponde a una fila ya existente
en el servidor usando la doble identidad (client_uuid / client_id).
"""
from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from app.domain.entities.sync_record import ResolvedIdentity, SyncRecord, TableSchema
from app.domain.repositories.sync_repository import ISyncRepository
from app.shared.constants.sync_constants import CLIENT_UUID_COLUMN


class IdentityResolver:
    """
    Busca la fila existente de un registro, siempre dentro del tenant.

    Orden de resolucion (gana la primera coincidencia):
    1. client_uuid, si la tabla tiene esa columna y el registro lo trae.
    2. client_id contra la columna de identidad, si la tabla la tiene y el
       registro lo trae explicitamente. Aqui client_id es la identidad del
       servidor que el cliente recibio en una sincronizacion anterior.
    3. Ninguna: el registro es nuevo.
    """

    def __init__(self, repository: ISyncRepository):
        self.repository = repository

    async def resolve(
        self,
        tenant_id: Any,
        schema: TableSchema,
        record: SyncRecord,
    ) -> Optional[ResolvedIdentity]:
        """
        Resuelve la identidad existente de un registro.

        Args:
            tenant_id: Tenant del lote
            schema: Esquema de la tabla
            record: Registro del cliente

        Returns:
            Optional[ResolvedIdentity]: Fila encontrada o None si es nuevo

        Raises:
            ValidationException: Si client_uuid o client_id no son validos
                para el tipo de su columna
        """
        identity = schema.identity_column

        if record.has_client_uuid and schema.supports_client_uuid:
            client_uuid = schema.coerce(CLIENT_UUID_COLUMN, record.client_uuid)
            row = await self.repository.find_row(
                schema, tenant_id, CLIENT_UUID_COLUMN, client_uuid
            )
            if row is not None:
                if identity:
                    return ResolvedIdentity(
                        server_id=row[identity],
                        match_column=identity,
                        match_value=row[identity],
                        current_values=row,
                    )
                # Sin PK conocida: las escrituras se acotan por client_uuid
                return ResolvedIdentity(
                    server_id=None,
                    match_column=CLIENT_UUID_COLUMN,
                    match_value=client_uuid,
                    current_values=row,
                )

        if identity and record.has_client_id:
            row = await self.repository.find_row(
                schema, tenant_id, identity, schema.coerce(identity, record.client_id)
            )
            if row is not None:
                return ResolvedIdentity(
                    server_id=row[identity],
                    match_column=identity,
                    match_value=row[identity],
                    current_values=row,
                )

        logger.trace(f"Sin identidad existente en '{schema.name}' para uuid={record.client_uuid}")
        return None
