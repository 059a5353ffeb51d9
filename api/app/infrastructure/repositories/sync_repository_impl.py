"""
Implementación del repositorio de sincronizacion usando SQLAlchemy Core.

Las tablas no tienen modelo ORM: se construyen TableClause ligeras con
las columnas necesarias en cada sentencia, cada una con el tipo
reflejado por el catalogo. SQLAlchemy se encarga de citar los nombres y
de procesar los parametros segun su tipo; todos los valores viajan como
parametros.
"""
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import column, delete, func, insert, select, update
from sqlalchemy import table as table_clause
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import TableClause

from app.domain.entities.sync_record import TableSchema
from app.domain.repositories.sync_repository import DeleteOutcome, ISyncRepository
from app.shared.constants.sync_constants import TENANT_COLUMN


def _table(schema: TableSchema, columns: Iterable[str]) -> TableClause:
    """Construye una TableClause tipada con las columnas indicadas (sin duplicados)."""
    unique = list(dict.fromkeys([TENANT_COLUMN, *columns]))
    return table_clause(
        schema.name,
        *[column(c, schema.column_types.get(c)) for c in unique]
    )


class SyncRepositoryImpl(ISyncRepository):
    """Implementación del repositorio de sincronizacion con SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        """
        Inicializa el repositorio con una sesión de base de datos.

        Args:
            session: Sesión de SQLAlchemy (la del lote en curso)
        """
        self.session = session

    async def find_row(
        self,
        schema: TableSchema,
        tenant_id: Any,
        match_column: str,
        match_value: Any,
    ) -> Optional[Dict[str, Any]]:
        t = _table(schema, [match_column, *schema.columns])
        query = (
            select(*[t.c[c] for c in dict.fromkeys(schema.columns)])
            .where(t.c[TENANT_COLUMN] == tenant_id)
            .where(t.c[match_column] == match_value)
            .limit(1)
        )
        result = await self.session.execute(query)
        row = result.mappings().first()
        return dict(row) if row is not None else None

    async def insert_row(
        self,
        schema: TableSchema,
        values: Dict[str, Any],
    ) -> Any:
        identity_column = schema.identity_column
        columns = list(values)
        if identity_column:
            columns.append(identity_column)
        t = _table(schema, columns)
        stmt = insert(t).values({t.c[c]: v for c, v in values.items()})

        dialect = self.session.get_bind().dialect
        if identity_column and dialect.insert_returning:
            result = await self.session.execute(stmt.returning(t.c[identity_column]))
            return result.scalar_one()

        result = await self.session.execute(stmt)
        if not identity_column:
            return None
        if identity_column in values:
            return values[identity_column]
        return result.lastrowid

    async def update_row(
        self,
        schema: TableSchema,
        tenant_id: Any,
        match_column: str,
        match_value: Any,
        values: Dict[str, Any],
        version_column: Optional[str] = None,
    ) -> int:
        columns = [match_column, *values]
        if version_column:
            columns.append(version_column)
        t = _table(schema, columns)

        assignments = {t.c[c]: v for c, v in values.items()}
        if version_column:
            assignments[t.c[version_column]] = func.coalesce(t.c[version_column], 0) + 1

        stmt = (
            update(t)
            .where(t.c[TENANT_COLUMN] == tenant_id)
            .where(t.c[match_column] == match_value)
            .values(assignments)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def delete_rows(
        self,
        schema: TableSchema,
        tenant_id: Any,
        match_column: str,
        match_value: Any,
    ) -> DeleteOutcome:
        identity_column = schema.identity_column
        t = _table(schema, [match_column] + ([identity_column] if identity_column else []))

        identities = []
        if identity_column:
            found = await self.session.execute(
                select(t.c[identity_column])
                .where(t.c[TENANT_COLUMN] == tenant_id)
                .where(t.c[match_column] == match_value)
            )
            identities = list(found.scalars().all())

        result = await self.session.execute(
            delete(t)
            .where(t.c[TENANT_COLUMN] == tenant_id)
            .where(t.c[match_column] == match_value)
        )
        return DeleteOutcome(rowcount=result.rowcount or 0, identities=identities)
