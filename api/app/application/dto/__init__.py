"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .sync_dto import SyncBatchRequestDTO, MappingResultDTO

__all__ = [
    "SyncBatchRequestDTO",
    "MappingResultDTO",
]
