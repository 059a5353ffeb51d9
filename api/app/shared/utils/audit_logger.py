"""
SyncAuditLogger - Registro estructurado de los lotes de sincronizacion.

Escribe un archivo diario en logs/sync_logs/ con una linea por lote
recibido y una por lote completado (con el conteo por estado).
"""
import json
from collections import Counter
from datetime import datetime
from typing import Any, Dict, Iterable, Optional
from pathlib import Path

from loguru import logger


class SyncAuditLogger:
    """
    Gestor de logs de auditoria de sincronizacion.

    Uso:
        # Al inicio de la app
        SyncAuditLogger.initialize()

        # En el caso de uso
        SyncAuditLogger.log_batch_received("customer", 7, 120)
        # ... procesar ...
        SyncAuditLogger.log_batch_completed("customer", 7, results, duration_ms)
    """

    # Rutas base para los logs
    BASE_LOG_DIR = Path("logs")
    SYNC_LOG_DIR = BASE_LOG_DIR / "sync_logs"

    # Formatos de timestamp
    FILE_TIMESTAMP_FORMAT = "%Y-%m-%d"
    LOG_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"

    _initialized: bool = False
    _sink_id: Optional[int] = None

    @classmethod
    def initialize(cls) -> None:
        """
        Crea la carpeta de logs y registra el sink de sincronizacion.
        Debe llamarse al inicio de la aplicacion.
        """
        if cls._initialized:
            return

        cls.SYNC_LOG_DIR.mkdir(parents=True, exist_ok=True)

        today = datetime.now().strftime(cls.FILE_TIMESTAMP_FORMAT)
        sync_log_file = cls.SYNC_LOG_DIR / f"sync_{today}.log"

        cls._sink_id = logger.add(
            str(sync_log_file),
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}",
            filter=lambda record: record["extra"].get("context") == "sync",
            rotation="1 day",
            retention="30 days",
            level="DEBUG"
        )

        cls._initialized = True
        logger.info("SyncAuditLogger inicializado")

    @classmethod
    def shutdown(cls) -> None:
        """Retira el sink de sincronizacion."""
        if cls._sink_id is not None:
            logger.remove(cls._sink_id)
        cls._sink_id = None
        cls._initialized = False

    @classmethod
    def log_batch_received(cls, table: str, tenant_id: Any, record_count: int) -> None:
        """
        Registra la llegada de un lote.

        Args:
            table: Tabla destino
            tenant_id: Tenant del lote
            record_count: Numero de registros recibidos
        """
        sync_logger = logger.bind(context="sync")
        sync_logger.info(f"BATCH {table} tenant={tenant_id} records={record_count}")

    @classmethod
    def log_batch_completed(
        cls,
        table: str,
        tenant_id: Any,
        results: Iterable[Any],
        duration_ms: Optional[float] = None
    ) -> Dict[str, int]:
        """
        Registra el final de un lote con el conteo por estado.

        Args:
            table: Tabla destino
            tenant_id: Tenant del lote
            results: MappingResult de cada registro
            duration_ms: Duracion en milisegundos

        Returns:
            Dict[str, int]: Conteo por estado
        """
        counts = Counter(
            getattr(r.status, "value", r.status) for r in results
        )
        log_data = {
            "type": "BATCH_COMPLETED",
            "timestamp": datetime.now().strftime(cls.LOG_TIMESTAMP_FORMAT),
            "table": table,
            "tenant_id": tenant_id,
            "counts": dict(counts),
        }
        if duration_ms is not None:
            log_data["duration_ms"] = round(duration_ms, 2)

        sync_logger = logger.bind(context="sync")
        log_func = sync_logger.warning if counts.get("error") else sync_logger.info
        log_func(json.dumps(log_data, default=str))
        return dict(counts)

    @classmethod
    def log_batch_failed(cls, table: str, tenant_id: Any, message: str) -> None:
        """Registra un lote revertido por completo."""
        sync_logger = logger.bind(context="sync")
        sync_logger.error(f"BATCH FAILED {table} tenant={tenant_id}: {message}")

