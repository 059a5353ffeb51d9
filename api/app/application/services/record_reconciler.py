"""
Reconciliador de registros.

Para cada registro decide el resultado terminal (inserted, updated,
deleted, skipped, noop) y ejecuta la escritura correspondiente. No
captura errores: el coordinador del lote los convierte en resultados
de tipo error.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from loguru import logger

from app.application.services.identity_resolver import IdentityResolver
from app.domain.entities.sync_record import MappingResult, SyncRecord, TableSchema
from app.domain.repositories.sync_repository import ISyncRepository
from app.shared.constants.sync_constants import (
    CLIENT_UUID_COLUMN,
    MappingStatus,
    SERVER_VERSION_COLUMN,
    TENANT_COLUMN,
)


def values_equal(stored: Any, incoming: Any) -> bool:
    """
    Compara el valor guardado con el enviado por el cliente.

    El cliente envia JSON (numeros, cadenas) y la base de datos devuelve
    tipos nativos (Decimal, date, datetime), asi que la comparacion es
    laxa: mismo valor, mismo numero o misma representacion textual.
    """
    if stored is None or incoming is None:
        return stored is None and incoming is None
    if stored == incoming:
        return True
    if isinstance(stored, (int, float, Decimal)) and not isinstance(stored, bool):
        try:
            return Decimal(str(stored)) == Decimal(str(incoming))
        except InvalidOperation:
            return False
    if hasattr(stored, "isoformat") and isinstance(incoming, str):
        return stored.isoformat() == incoming or str(stored) == incoming
    return str(stored) == str(incoming)


def _client_version(record: SyncRecord) -> Optional[int]:
    value = record.fields.get(SERVER_VERSION_COLUMN)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


class RecordReconciler:
    """
    Funcion de decision por registro.

    | Condicion                                          | Resultado |
    |----------------------------------------------------|-----------|
    | borrado + client_uuid + tabla con client_uuid      | deleted   |
    | borrado + client_id + tabla con identidad          | deleted   |
    | borrado sin identidad utilizable                   | skipped   |
    | upsert + fila existente + campos con cambios       | updated   |
    | upsert + fila existente + sin cambios              | noop      |
    | upsert sin fila existente                          | inserted  |

    En ambos borrados server_id es la identidad de la fila borrada (o
    None si no se borro nada o la tabla no tiene columna de identidad).
    """

    def __init__(self, repository: ISyncRepository, resolver: Optional[IdentityResolver] = None):
        self.repository = repository
        self.resolver = resolver or IdentityResolver(repository)

    async def reconcile(
        self,
        tenant_id: Any,
        schema: TableSchema,
        record: SyncRecord,
    ) -> MappingResult:
        """
        Reconcilia un registro contra el estado del servidor.

        Args:
            tenant_id: Tenant del lote
            schema: Esquema de la tabla
            record: Registro del cliente

        Returns:
            MappingResult: Resultado del registro
        """
        if record.is_delete:
            return await self._delete(tenant_id, schema, record)
        return await self._upsert(tenant_id, schema, record)

    def build_write_set(
        self,
        tenant_id: Any,
        schema: TableSchema,
        record: SyncRecord,
    ) -> Dict[str, Any]:
        """
        Construye los valores a escribir.

        Solo entran columnas conocidas que no sean de control del cliente.
        tenant_id siempre es el del lote y client_uuid se fuerza si la
        tabla lo soporta y el registro lo trae. Cada valor se convierte
        al tipo de su columna.

        Raises:
            ValidationException: Si algun valor no es valido para su columna
        """
        values = {
            name: schema.coerce(name, value)
            for name, value in record.fields.items()
            if schema.is_writable(name) and name not in (TENANT_COLUMN, CLIENT_UUID_COLUMN)
        }
        values[TENANT_COLUMN] = schema.coerce(TENANT_COLUMN, tenant_id)
        if record.has_client_uuid and schema.supports_client_uuid:
            values[CLIENT_UUID_COLUMN] = schema.coerce(CLIENT_UUID_COLUMN, record.client_uuid)
        return values

    async def _delete(
        self,
        tenant_id: Any,
        schema: TableSchema,
        record: SyncRecord,
    ) -> MappingResult:
        identity = schema.identity_column

        if record.has_client_uuid and schema.supports_client_uuid:
            outcome = await self.repository.delete_rows(
                schema,
                tenant_id,
                CLIENT_UUID_COLUMN,
                schema.coerce(CLIENT_UUID_COLUMN, record.client_uuid),
            )
        elif record.has_client_id and identity:
            outcome = await self.repository.delete_rows(
                schema, tenant_id, identity, schema.coerce(identity, record.client_id)
            )
        else:
            return MappingResult.for_record(record, MappingStatus.SKIPPED)

        server_id = outcome.identities[0] if outcome.rowcount and outcome.identities else None
        logger.debug(f"Borrado en '{schema.name}': {outcome.rowcount} fila(s)")
        return MappingResult.for_record(record, MappingStatus.DELETED, server_id=server_id)

    async def _upsert(
        self,
        tenant_id: Any,
        schema: TableSchema,
        record: SyncRecord,
    ) -> MappingResult:
        values = self.build_write_set(tenant_id, schema, record)
        has_version = schema.has_column(SERVER_VERSION_COLUMN)

        existing = await self.resolver.resolve(tenant_id, schema, record)
        if existing is None:
            if has_version:
                values[SERVER_VERSION_COLUMN] = 1
            server_id = await self.repository.insert_row(schema, values)
            return MappingResult.for_record(
                record, MappingStatus.INSERTED, server_id=server_id, server_version=1
            )

        current = existing.current_values
        changes = {
            name: value
            for name, value in values.items()
            if name != TENANT_COLUMN and not values_equal(current.get(name), value)
        }

        if not changes:
            return MappingResult.for_record(
                record,
                MappingStatus.NOOP,
                server_id=existing.server_id,
                server_version=current.get(SERVER_VERSION_COLUMN) if has_version else None,
            )

        await self.repository.update_row(
            schema,
            tenant_id,
            existing.match_column,
            existing.match_value,
            changes,
            version_column=SERVER_VERSION_COLUMN if has_version else None,
        )
        if has_version:
            server_version = (current.get(SERVER_VERSION_COLUMN) or 0) + 1
        else:
            server_version = _client_version(record)

        return MappingResult.for_record(
            record,
            MappingStatus.UPDATED,
            server_id=existing.server_id,
            server_version=server_version,
        )
