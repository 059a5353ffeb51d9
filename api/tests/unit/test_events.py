"""
Tests unitarios del ciclo de vida de la aplicacion.
"""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI

from app.core import events
from app.core.config import settings
from app.infrastructure.database.schema_catalog import SqlAlchemySchemaCatalog
from app.shared.utils.audit_logger import SyncAuditLogger


@pytest.fixture
def isolated_lifespan(monkeypatch, tmp_path) -> AsyncMock:
    monkeypatch.setattr(settings, "LOG_FILE", str(tmp_path / "app.log"))
    monkeypatch.setattr(SyncAuditLogger, "SYNC_LOG_DIR", tmp_path / "sync_logs")
    close_db = AsyncMock()
    monkeypatch.setattr(events, "close_db", close_db)
    return close_db


@pytest.mark.asyncio
async def test_lifespan_initializes_and_releases_resources(isolated_lifespan: AsyncMock) -> None:
    app = FastAPI()
    SqlAlchemySchemaCatalog._columns_cache["customer"] = (("cusid", None),)

    async with events.lifespan(app):
        assert SyncAuditLogger._initialized is True
        assert app.state.log_sink_id is not None

    assert SyncAuditLogger._initialized is False
    assert app.state.log_sink_id is None
    assert SqlAlchemySchemaCatalog._columns_cache == {}
    isolated_lifespan.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_shuts_down_after_failure(isolated_lifespan: AsyncMock) -> None:
    app = FastAPI()

    with pytest.raises(RuntimeError):
        async with events.lifespan(app):
            raise RuntimeError("fallo durante el servicio")

    assert SyncAuditLogger._initialized is False
    isolated_lifespan.assert_awaited_once()
