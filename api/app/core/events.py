"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI
from loguru import logger

from app.core.config import settings
from app.infrastructure.database.schema_catalog import SqlAlchemySchemaCatalog
from app.infrastructure.database.session import close_db
from app.shared.utils.audit_logger import SyncAuditLogger


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Validar configuracion critica
            _validate_config()

            # Inicializar sistema de auditoria de sync
            SyncAuditLogger.initialize()
            logger.info("Sistema de auditoria inicializado")

            # Configurar logging adicional
            app.state.log_sink_id = logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )

            logger.success(f"Aplicacion iniciada correctamente en el puerto {settings.PORT}")

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []

    if not settings.SYNC_API_KEY:
        warnings.append("SYNC_API_KEY no configurada - todas las peticiones de sync seran rechazadas")

    if settings.DB_MAX_OVERFLOW < 0 or settings.DB_POOL_SIZE < 1:
        warnings.append("Pool de base de datos mal configurado (DB_POOL_SIZE/DB_MAX_OVERFLOW)")

    # Mostrar advertencias
    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        cached_tables = SqlAlchemySchemaCatalog.clear()
        logger.info(f"Esquemas cacheados descartados: {cached_tables}")

        # Cerrar conexiones de base de datos
        await close_db()
        logger.info("Conexiones de base de datos cerradas")

        log_sink_id = getattr(app.state, "log_sink_id", None)
        if log_sink_id is not None:
            logger.remove(log_sink_id)
            app.state.log_sink_id = None

        SyncAuditLogger.shutdown()
        logger.success("Aplicacion cerrada correctamente")

    return shutdown


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Ciclo de vida de la aplicacion: inicio y cierre ordenado.

    Args:
        app: Instancia de FastAPI
    """
    await startup_handler(app)()
    try:
        yield
    finally:
        await shutdown_handler(app)()
