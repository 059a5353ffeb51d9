"""
Entidades de dominio de la sincronizacion offline:
registro del cliente, esquema de tabla y resultado de mapeo.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple

from app.shared.constants.sync_constants import (
    CLIENT_UUID_COLUMN,
    MappingStatus,
    PROTECTED_CLIENT_FIELDS,
    SERVER_MANAGED_FIELDS,
    SYNC_STATUS_DEFAULT,
    SYNC_STATUS_DELETE,
    TENANT_COLUMN,
)
from app.shared.exceptions.domain import ValidationException
from app.shared.utils.value_coercion import COERCION_ERRORS, coerce_value


def coerce_sync_status(value: Any) -> int:
    """
    Convierte sync_status a numero.
    Ausente o null equivale a upsert (0), nunca a borrado.
    """
    if value is None:
        return SYNC_STATUS_DEFAULT
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return SYNC_STATUS_DEFAULT
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationException(
            f"sync_status invalido: {value!r}", field="sync_status"
        )
    if not number.is_finite():
        raise ValidationException(
            f"sync_status invalido: {value!r}", field="sync_status"
        )
    if number != number.to_integral_value():
        # 3.5 no es borrado ni upsert conocido; se trata como upsert
        return SYNC_STATUS_DEFAULT
    return int(number)


def _client_uuid_of(payload: Mapping[str, Any]) -> Any:
    value = payload.get(CLIENT_UUID_COLUMN)
    if value is None or value == "":
        return None
    return value


@dataclass(frozen=True)
class TableSchema:
    """
    Forma de una tabla sincronizable descubierta en tiempo de ejecucion.

    identity_column es None cuando la tabla no tiene PK conocida en el
    mapa estatico; en ese caso solo se puede reconciliar por client_uuid.
    column_types guarda el tipo reflejado de cada columna.
    """

    name: str
    columns: Tuple[str, ...]
    identity_column: Optional[str] = None
    column_types: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def has_tenant_column(self) -> bool:
        return TENANT_COLUMN in self.columns

    @property
    def supports_client_uuid(self) -> bool:
        return CLIENT_UUID_COLUMN in self.columns

    def has_column(self, name: str) -> bool:
        return name in self.columns

    def is_writable(self, name: str) -> bool:
        """Un campo es escribible si es columna conocida y no es de control."""
        return (
            name in self.columns
            and name not in PROTECTED_CLIENT_FIELDS
            and name not in SERVER_MANAGED_FIELDS
        )

    def coerce(self, name: str, value: Any) -> Any:
        """
        Convierte un valor del cliente al tipo de la columna.

        Raises:
            ValidationException: Si el valor no es valido para la columna
        """
        try:
            return coerce_value(self.column_types.get(name), value)
        except COERCION_ERRORS:
            raise ValidationException(
                f"Valor invalido para '{name}': {value!r}", field=name
            )


@dataclass(frozen=True)
class SyncRecord:
    """
    Registro enviado por un cliente, con sus metadatos de sincronizacion
    ya normalizados.

    has_client_id distingue "no enviado" de "enviado como 0 o cadena vacia".
    client_uuid es None solo si no se envio, es null o es cadena vacia.
    """

    fields: Mapping[str, Any]
    client_uuid: Any = None
    client_id: Any = None
    has_client_id: bool = False
    sync_status: int = SYNC_STATUS_DEFAULT

    @classmethod
    def from_payload(cls, payload: Any) -> "SyncRecord":
        """
        Construye el registro a partir del objeto JSON del cliente.

        Raises:
            ValidationException: Si el payload no es un objeto o
                sync_status no es numerico
        """
        if not isinstance(payload, Mapping):
            raise ValidationException("Cada registro debe ser un objeto JSON")

        client_id = payload.get("client_id")
        return cls(
            fields=dict(payload),
            client_uuid=_client_uuid_of(payload),
            client_id=client_id,
            has_client_id="client_id" in payload and client_id is not None,
            sync_status=coerce_sync_status(payload.get("sync_status")),
        )

    @property
    def has_client_uuid(self) -> bool:
        return self.client_uuid is not None

    @property
    def is_delete(self) -> bool:
        return self.sync_status == SYNC_STATUS_DELETE


@dataclass
class MappingResult:
    """Resultado por registro: enlaza la identidad del cliente con la del servidor."""

    client_uuid: Any
    client_id: Any
    server_id: Any
    status: MappingStatus
    server_version: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def for_record(
        cls,
        record: SyncRecord,
        status: MappingStatus,
        server_id: Any = None,
        **kwargs: Any
    ) -> "MappingResult":
        return cls(
            client_uuid=record.client_uuid,
            client_id=record.client_id if record.has_client_id else None,
            server_id=server_id,
            status=status,
            **kwargs
        )

    @classmethod
    def error_for_payload(cls, payload: Any, message: str) -> "MappingResult":
        """
        Resultado de error para un payload que quiza ni siquiera se pudo
        interpretar como SyncRecord.
        """
        client_uuid = None
        client_id = None
        if isinstance(payload, Mapping):
            client_uuid = _client_uuid_of(payload)
            client_id = payload.get("client_id")
        return cls(
            client_uuid=client_uuid,
            client_id=client_id,
            server_id=None,
            status=MappingStatus.ERROR,
            message=message,
        )


@dataclass(frozen=True)
class ResolvedIdentity:
    """
    Fila existente del servidor que corresponde a un registro del cliente.

    match_column/match_value acotan las escrituras posteriores (junto con
    el tenant). current_values guarda los valores actuales de la fila
    para detectar cambios.
    """

    server_id: Any
    match_column: str
    match_value: Any
    current_values: Mapping[str, Any]
