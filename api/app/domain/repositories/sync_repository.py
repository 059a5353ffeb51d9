"""
Interfaz del repositorio de sincronizacion.
Define las lecturas/escrituras por tenant sobre tablas cuyo esquema
se conoce solo en tiempo de ejecucion.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.domain.entities.sync_record import TableSchema


@dataclass(frozen=True)
class DeleteOutcome:
    """Resultado de un borrado: filas afectadas e identidades borradas."""

    rowcount: int
    identities: List[Any] = field(default_factory=list)


class ISyncRepository(ABC):
    """
    Interfaz del repositorio de sincronizacion.
    Todas las operaciones quedan acotadas a un unico tenant.
    Los nombres de tabla y columna vienen del TableSchema descubierto,
    nunca del payload del cliente; los valores ya llegan convertidos
    al tipo de cada columna.
    """

    @abstractmethod
    async def find_row(
        self,
        schema: TableSchema,
        tenant_id: Any,
        match_column: str,
        match_value: Any,
    ) -> Optional[Dict[str, Any]]:
        """
        Busca la primera fila del tenant donde match_column = match_value.

        Returns:
            Optional[Dict[str, Any]]: Valores de todas las columnas o None
        """
        pass

    @abstractmethod
    async def insert_row(
        self,
        schema: TableSchema,
        values: Dict[str, Any],
    ) -> Any:
        """
        Inserta una fila nueva.

        Returns:
            Any: Identidad asignada por la base de datos (o None si la
                tabla no tiene columna de identidad)
        """
        pass

    @abstractmethod
    async def update_row(
        self,
        schema: TableSchema,
        tenant_id: Any,
        match_column: str,
        match_value: Any,
        values: Dict[str, Any],
        version_column: Optional[str] = None,
    ) -> int:
        """
        Actualiza las filas del tenant donde match_column = match_value.
        Si version_column se indica, se incrementa en 1.

        Returns:
            int: Filas afectadas
        """
        pass

    @abstractmethod
    async def delete_rows(
        self,
        schema: TableSchema,
        tenant_id: Any,
        match_column: str,
        match_value: Any,
    ) -> DeleteOutcome:
        """
        Borra las filas del tenant donde match_column = match_value.

        Returns:
            DeleteOutcome: Filas borradas y, si hay columna de identidad,
                las identidades borradas
        """
        pass
