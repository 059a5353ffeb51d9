from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import NoSuchTableError

from app.infrastructure.database.schema_catalog import SqlAlchemySchemaCatalog


@pytest.mark.asyncio
async def test_columns_are_discovered_in_schema_order(db_session) -> None:
    columns = await SqlAlchemySchemaCatalog(db_session).columns_of("bank")

    assert columns == ("bankid", "tenant_id", "bankname")


@pytest.mark.asyncio
async def test_second_lookup_is_served_from_cache(db_session) -> None:
    await SqlAlchemySchemaCatalog(db_session).columns_of("customer")

    offline = AsyncMock()
    offline.run_sync.side_effect = RuntimeError("no deberia consultar la base de datos")
    columns = await SqlAlchemySchemaCatalog(offline).columns_of("customer")

    assert "client_uuid" in columns
    offline.run_sync.assert_not_awaited()


@pytest.mark.asyncio
async def test_failed_lookup_is_not_cached(db_session) -> None:
    catalog = SqlAlchemySchemaCatalog(db_session)

    with pytest.raises(NoSuchTableError):
        await catalog.columns_of("supplier")

    assert "supplier" not in SqlAlchemySchemaCatalog._columns_cache


@pytest.mark.asyncio
async def test_schema_uses_identity_column_only_when_present(db_session) -> None:
    catalog = SqlAlchemySchemaCatalog(db_session)

    customer = await catalog.schema_of("customer")
    expgroup = await catalog.schema_of("expgroup")

    assert customer.identity_column == "cusid"
    assert customer.has_tenant_column
    assert expgroup.identity_column is None
    assert expgroup.supports_client_uuid


@pytest.mark.asyncio
async def test_clear_reports_evicted_entries(db_session) -> None:
    catalog = SqlAlchemySchemaCatalog(db_session)
    await catalog.columns_of("bank")
    await catalog.columns_of("shop")

    assert SqlAlchemySchemaCatalog.clear() == 2
    assert SqlAlchemySchemaCatalog.clear() == 0


@pytest.mark.asyncio
async def test_schema_keeps_reflected_column_types(db_session) -> None:
    schema = await SqlAlchemySchemaCatalog(db_session).schema_of("sales")

    assert schema.column_types["tenant_id"].python_type is int
    assert schema.column_types["saledate"].python_type is date
    assert schema.column_types["amount"].python_type is Decimal
    assert schema.coerce("amount", "3.25") == Decimal("3.25")
