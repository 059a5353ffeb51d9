from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import Date, Integer, Numeric, String

from app.application.services.record_reconciler import RecordReconciler, values_equal
from app.domain.entities.sync_record import SyncRecord, TableSchema, coerce_sync_status
from app.shared.exceptions.domain import ValidationException


CUSTOMER = TableSchema(
    name="customer",
    columns=("cusid", "tenant_id", "client_uuid", "name", "server_id", "local_version", "local_updated_at", "server_version"),
    identity_column="cusid",
)


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 0), ("", 0), (3, 3), ("3", 3), (3.0, 3), (" 3 ", 3), (1, 1), (2.5, 0)],
)
def test_coerce_sync_status(raw, expected) -> None:
    assert coerce_sync_status(raw) == expected


def test_coerce_sync_status_rejects_non_numeric() -> None:
    with pytest.raises(ValidationException):
        coerce_sync_status("delete")


def test_absent_sync_status_is_upsert_never_delete() -> None:
    record = SyncRecord.from_payload({"client_uuid": "u1"})
    assert record.sync_status == 0
    assert record.is_delete is False


def test_client_id_presence_is_explicit() -> None:
    assert SyncRecord.from_payload({"name": "x"}).has_client_id is False
    assert SyncRecord.from_payload({"client_id": None}).has_client_id is False

    zero = SyncRecord.from_payload({"client_id": 0})
    assert zero.has_client_id is True
    assert zero.client_id == 0

    empty = SyncRecord.from_payload({"client_id": ""})
    assert empty.has_client_id is True
    assert empty.client_id == ""


def test_empty_client_uuid_is_absent() -> None:
    assert SyncRecord.from_payload({"client_uuid": ""}).client_uuid is None
    assert SyncRecord.from_payload({"client_uuid": None}).has_client_uuid is False


def test_falsy_non_empty_client_uuid_is_present() -> None:
    record = SyncRecord.from_payload({"client_uuid": 0})

    assert record.has_client_uuid is True
    assert record.client_uuid == 0


def test_non_object_payload_is_rejected() -> None:
    with pytest.raises(ValidationException):
        SyncRecord.from_payload(["not", "a", "record"])


def test_table_schema_capabilities() -> None:
    assert CUSTOMER.has_tenant_column
    assert CUSTOMER.supports_client_uuid
    assert CUSTOMER.is_writable("name")
    assert not CUSTOMER.is_writable("server_id")
    assert not CUSTOMER.is_writable("local_version")
    assert not CUSTOMER.is_writable("local_updated_at")
    assert not CUSTOMER.is_writable("server_version")
    assert not CUSTOMER.is_writable("sync_status")


def test_write_set_forces_tenant_and_client_uuid() -> None:
    reconciler = RecordReconciler(repository=None)
    record = SyncRecord.from_payload(
        {
            "client_uuid": "u1",
            "client_id": 4,
            "tenant_id": 99,
            "name": "Acme",
            "server_id": 1,
            "local_version": 2,
            "local_updated_at": "2025-01-01",
            "sync_status": 0,
            "nope": True,
        }
    )

    values = reconciler.build_write_set(7, CUSTOMER, record)

    assert values == {"tenant_id": 7, "name": "Acme", "client_uuid": "u1"}


def test_write_set_without_uuid_support_drops_client_uuid() -> None:
    bank = TableSchema(name="bank", columns=("bankid", "tenant_id", "bankname"), identity_column="bankid")
    record = SyncRecord.from_payload({"client_uuid": "u1", "bankname": "Central"})

    values = RecordReconciler(repository=None).build_write_set(7, bank, record)

    assert values == {"tenant_id": 7, "bankname": "Central"}


@pytest.mark.parametrize(
    "stored, incoming, expected",
    [
        (None, None, True),
        (None, "", False),
        ("Acme", "Acme", True),
        ("Acme", "acme", False),
        (Decimal("10.50"), 10.5, True),
        (10, "10", True),
        (date(2025, 1, 31), "2025-01-31", True),
        (date(2025, 1, 31), "2025-02-01", False),
    ],
)
def test_values_equal(stored, incoming, expected) -> None:
    assert values_equal(stored, incoming) is expected


def test_write_set_converts_values_to_column_types() -> None:
    sales = TableSchema(
        name="sales",
        columns=("saleid", "tenant_id", "client_uuid", "saledate", "amount"),
        identity_column="saleid",
        column_types={
            "saleid": Integer(),
            "tenant_id": Integer(),
            "client_uuid": String(),
            "saledate": Date(),
            "amount": Numeric(12, 2),
        },
    )
    record = SyncRecord.from_payload(
        {"client_uuid": 42, "saledate": "2025-01-31", "amount": "10.50", "saleid": "9"}
    )

    values = RecordReconciler(repository=None).build_write_set("7", sales, record)

    assert values == {
        "tenant_id": 7,
        "client_uuid": "42",
        "saledate": date(2025, 1, 31),
        "amount": Decimal("10.50"),
        "saleid": 9,
    }


def test_write_set_rejects_unconvertible_value() -> None:
    sales = TableSchema(
        name="sales",
        columns=("tenant_id", "saledate"),
        column_types={"tenant_id": Integer(), "saledate": Date()},
    )
    record = SyncRecord.from_payload({"saledate": "ayer"})

    with pytest.raises(ValidationException) as exc_info:
        RecordReconciler(repository=None).build_write_set(7, sales, record)
    assert exc_info.value.details == {"field": "saledate"}
