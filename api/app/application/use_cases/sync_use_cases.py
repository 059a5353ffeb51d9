"""
Casos de uso para la sincronizacion offline de registros de clientes.
"""
import time
from typing import Any, List, Optional, Sequence

from loguru import logger
from sqlalchemy.exc import DBAPIError, InterfaceError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.record_reconciler import RecordReconciler
from app.domain.entities.sync_record import MappingResult, SyncRecord, TableSchema
from app.domain.repositories.schema_catalog import ISchemaCatalog
from app.domain.repositories.sync_repository import ISyncRepository
from app.infrastructure.database.schema_catalog import SqlAlchemySchemaCatalog
from app.infrastructure.repositories.sync_repository_impl import SyncRepositoryImpl
from app.shared.constants.sync_constants import ALLOWED_SYNC_TABLES, MappingStatus, TENANT_COLUMN
from app.shared.exceptions.domain import (
    InvalidSyncPayloadException,
    SyncInfrastructureException,
    SyncSchemaException,
    TableNotAllowedException,
    ValidationException,
)
from app.shared.utils.audit_logger import SyncAuditLogger


def _error_message(exc: Exception) -> str:
    """Mensaje legible para el cliente (sin la sentencia SQL)."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc) or exc.__class__.__name__


def _is_disconnect(exc: Exception) -> bool:
    """Perdida de conexion con la base de datos (no es un error del registro)."""
    if isinstance(exc, InterfaceError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


class SyncUseCases:
    """
    Coordinador de lotes de sincronizacion.

    Aplica el reconciliador a cada registro del lote dentro de una unica
    transaccion. Cada registro corre en su propio SAVEPOINT: un error de
    un registro solo revierte ese registro y se informa como resultado
    "error"; el resto del lote sigue. Solo los fallos de esquema, la
    perdida de conexion o un fallo de commit revierten el lote completo.
    """

    def __init__(
        self,
        db: AsyncSession,
        catalog: Optional[ISchemaCatalog] = None,
        repository: Optional[ISyncRepository] = None,
        reconciler: Optional[RecordReconciler] = None,
    ):
        self.db = db
        self.catalog = catalog or SqlAlchemySchemaCatalog(db)
        self.repository = repository or SyncRepositoryImpl(db)
        self.reconciler = reconciler or RecordReconciler(self.repository)

    async def reconcile_batch(
        self,
        tenant_id: Any,
        table: str,
        records: Sequence[Any],
    ) -> List[MappingResult]:
        """
        Reconcilia un lote de registros de un tenant contra una tabla.

        Args:
            tenant_id: Tenant del lote
            table: Tabla destino (debe estar en la lista permitida)
            records: Registros del cliente, en orden

        Returns:
            List[MappingResult]: Un resultado por registro, en el mismo orden

        Raises:
            TableNotAllowedException: Si la tabla no es sincronizable
            InvalidSyncPayloadException: Si falta el tenant, no es valido para
                la columna tenant_id o data no es lista
            SyncSchemaException: Si la tabla no tiene columna de tenant
            SyncInfrastructureException: Si falla la introspeccion, se pierde
                la conexion o falla el commit
        """
        if table not in ALLOWED_SYNC_TABLES:
            raise TableNotAllowedException(table)
        if tenant_id is None or tenant_id == "" or isinstance(records, (str, bytes)) \
                or not isinstance(records, Sequence):
            raise InvalidSyncPayloadException()

        started = time.perf_counter()
        SyncAuditLogger.log_batch_received(table, tenant_id, len(records))

        schema = await self._load_schema(table, tenant_id)
        tenant_id = self._coerce_tenant(schema, tenant_id)

        results: List[MappingResult] = []
        try:
            for payload in records:
                results.append(await self._reconcile_one(tenant_id, schema, payload))
            await self.db.commit()
        except Exception as e:
            logger.exception(f"Error confirmando lote de '{table}' (tenant={tenant_id})")
            await self._rollback()
            SyncAuditLogger.log_batch_failed(table, tenant_id, _error_message(e))
            raise SyncInfrastructureException(
                f"Error al sincronizar: {_error_message(e)}",
                details={"table": table}
            ) from e

        duration_ms = (time.perf_counter() - started) * 1000
        SyncAuditLogger.log_batch_completed(table, tenant_id, results, duration_ms)
        return results

    async def _load_schema(self, table: str, tenant_id: Any) -> TableSchema:
        """Lee el esquema (cacheado) y valida la columna de tenant."""
        try:
            schema = await self.catalog.schema_of(table)
        except Exception as e:
            logger.exception(f"Error leyendo el esquema de '{table}'")
            await self._rollback()
            SyncAuditLogger.log_batch_failed(table, tenant_id, _error_message(e))
            raise SyncInfrastructureException(
                f"No se pudo leer el esquema de '{table}': {_error_message(e)}",
                details={"table": table}
            ) from e

        if not schema.has_tenant_column:
            await self._rollback()
            raise SyncSchemaException(table, "Server table missing tenant_id column")
        return schema

    def _coerce_tenant(self, schema: TableSchema, tenant_id: Any) -> Any:
        """Convierte el tenant al tipo de la columna tenant_id de la tabla."""
        try:
            return schema.coerce(TENANT_COLUMN, tenant_id)
        except ValidationException as e:
            raise InvalidSyncPayloadException(
                message=f"tenant_id invalido para '{schema.name}': {tenant_id!r}",
                details=e.details
            ) from e

    async def _reconcile_one(
        self,
        tenant_id: Any,
        schema: TableSchema,
        payload: Any,
    ) -> MappingResult:
        """
        Procesa un registro; sus errores quedan contenidos en su resultado.
        La perdida de conexion se propaga: afecta a todo el lote.
        """
        try:
            record = SyncRecord.from_payload(payload)
        except ValidationException as e:
            logger.warning(f"Registro invalido en '{schema.name}': {e.message}")
            return MappingResult.error_for_payload(payload, e.message)

        try:
            async with self.db.begin_nested():
                return await self.reconciler.reconcile(tenant_id, schema, record)
        except Exception as e:
            if _is_disconnect(e):
                raise
            message = _error_message(e)
            logger.warning(
                f"Error en registro de '{schema.name}' (uuid={record.client_uuid}): {message}"
            )
            return MappingResult.for_record(record, MappingStatus.ERROR, message=message)

    async def _rollback(self) -> None:
        """Revierte la transaccion; un fallo aqui se registra y no oculta el original."""
        try:
            await self.db.rollback()
        except Exception as e:
            logger.error(f"Error durante rollback: {e}")
