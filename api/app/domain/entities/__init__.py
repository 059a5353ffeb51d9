"""
Entidades del dominio.
"""
from app.domain.entities.sync_record import (
    MappingResult,
    ResolvedIdentity,
    SyncRecord,
    TableSchema,
    coerce_sync_status,
)

__all__ = [
    "MappingResult",
    "ResolvedIdentity",
    "SyncRecord",
    "TableSchema",
    "coerce_sync_status",
]
