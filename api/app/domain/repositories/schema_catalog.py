"""
Interfaz del catalogo de esquemas.
Define el contrato para descubrir las columnas de una tabla sincronizable.
"""
from abc import ABC, abstractmethod
from typing import Any, Tuple

from app.domain.entities.sync_record import TableSchema
from app.shared.constants.sync_constants import TABLE_IDENTITY_COLUMNS


class ISchemaCatalog(ABC):
    """
    Interfaz del catalogo de esquemas.
    Las implementaciones memorizan el resultado por tabla durante toda
    la vida del proceso.
    """

    @abstractmethod
    async def describe_columns(self, table: str) -> Tuple[Tuple[str, Any], ...]:
        """
        Obtiene las columnas de una tabla con su tipo, en el orden del esquema.

        Args:
            table: Nombre de la tabla (ya validado contra la lista permitida)

        Returns:
            Tuple[Tuple[str, Any], ...]: Pares (nombre, tipo)

        Raises:
            Exception: Si la introspeccion falla; no se cachea nada
        """
        pass

    async def columns_of(self, table: str) -> Tuple[str, ...]:
        """Nombres de columna de la tabla, en el orden del esquema."""
        return tuple(name for name, _ in await self.describe_columns(table))

    async def schema_of(self, table: str) -> TableSchema:
        """
        Combina las columnas descubiertas con el mapa estatico de identidad.
        La columna de identidad solo se usa si existe realmente en la tabla.
        """
        described = await self.describe_columns(table)
        columns = tuple(name for name, _ in described)
        identity_column = TABLE_IDENTITY_COLUMNS.get(table)
        if identity_column is not None and identity_column not in columns:
            identity_column = None
        return TableSchema(
            name=table,
            columns=columns,
            identity_column=identity_column,
            column_types=dict(described),
        )
