"""
Excepciones relacionadas con la lógica de dominio.
"""
from typing import Any

from app.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class ValidationException(DomainException):
    """Excepción para errores de validación."""

    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details
        )


class TableNotAllowedException(DomainException):
    """Excepción cuando la tabla solicitada no es sincronizable."""

    def __init__(self, table: str):
        super().__init__(
            message="table not allowed",
            error_code="TABLE_NOT_ALLOWED",
            details={"table": table}
        )


class InvalidSyncPayloadException(DomainException):
    """Excepción cuando el lote recibido está mal formado (tenant o data)."""

    def __init__(self, message: str = "tenant_id and data[] required", details=None):
        super().__init__(
            message=message,
            error_code="INVALID_SYNC_PAYLOAD",
            details=details
        )


class SyncSchemaException(AppException):
    """
    Excepcion cuando el esquema de una tabla sincronizable no cumple
    las precondiciones (por ejemplo, no tiene columna de tenant).
    Es un error de configuracion del servidor, no del cliente.
    """

    def __init__(self, table: str, message: str):
        super().__init__(
            message=message,
            status_code=500,
            error_code="SYNC_SCHEMA_ERROR",
            details={"table": table}
        )


class SyncInfrastructureException(AppException):
    """
    Excepcion cuando falla la infraestructura durante un lote
    (introspeccion del esquema, conexion o commit). El lote completo
    se revierte.
    """

    def __init__(self, message: str, details: Any = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="SYNC_INFRASTRUCTURE_ERROR",
            details=details
        )
