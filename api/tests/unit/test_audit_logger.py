from __future__ import annotations

from loguru import logger

from app.domain.entities.sync_record import MappingResult
from app.shared.constants.sync_constants import MappingStatus
from app.shared.utils.audit_logger import SyncAuditLogger


def _result(status: MappingStatus) -> MappingResult:
    return MappingResult(client_uuid=None, client_id=None, server_id=None, status=status)


def test_batch_completed_counts_statuses() -> None:
    results = [
        _result(MappingStatus.INSERTED),
        _result(MappingStatus.INSERTED),
        _result(MappingStatus.NOOP),
        _result(MappingStatus.ERROR),
    ]

    counts = SyncAuditLogger.log_batch_completed("customer", 7, results, duration_ms=12.345)

    assert counts == {"inserted": 2, "noop": 1, "error": 1}


def test_sync_messages_are_bound_to_sync_context() -> None:
    captured = []
    sink_id = logger.add(captured.append, filter=lambda r: r["extra"].get("context") == "sync")
    try:
        SyncAuditLogger.log_batch_received("bank", 3, 10)
        logger.info("fuera de contexto")
    finally:
        logger.remove(sink_id)

    assert len(captured) == 1
    assert "BATCH bank tenant=3 records=10" in captured[0]
