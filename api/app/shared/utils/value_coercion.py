"""
Conversion de valores JSON del cliente al tipo Python de cada columna.

El cliente envia numeros, cadenas y booleanos; drivers como asyncpg
exigen el tipo nativo de la columna (date, Decimal, int...). El tipo se
obtiene de la columna reflejada (TypeEngine.python_type).
"""
import json
import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Optional


# Errores que indican un valor no convertible
COERCION_ERRORS = (ValueError, TypeError, ArithmeticError)

_TRUE_STRINGS = frozenset({"true", "t", "1", "yes", "y", "si"})
_FALSE_STRINGS = frozenset({"false", "f", "0", "no", "n"})


def python_type_of(column_type: Any) -> Optional[type]:
    """
    Tipo Python de una columna reflejada.

    Returns:
        Optional[type]: None si la columna no tiene tipo o no lo declara
    """
    if column_type is None:
        return None
    try:
        return column_type.python_type
    except (NotImplementedError, AttributeError):
        return None


def _parse_iso_datetime(text: str) -> datetime:
    text = text.strip()
    # fromisoformat no acepta el sufijo Z antes de Python 3.11
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _to_bool(value: Any, column_type: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"no es booleano: {value!r}")


def _to_int(value: Any, column_type: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    if not number.is_finite() or number != number.to_integral_value():
        raise ValueError(f"no es entero: {value!r}")
    return int(number)


def _to_decimal(value: Any, column_type: Any) -> Decimal:
    if isinstance(value, bool):
        raise TypeError("booleano en columna numerica")
    number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    if not number.is_finite():
        raise ValueError(f"no es un numero finito: {value!r}")
    return number


def _to_float(value: Any, column_type: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("booleano en columna numerica")
    return float(value.strip() if isinstance(value, str) else value)


def _to_str(value: Any, column_type: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_date(value: Any, column_type: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            return _parse_iso_datetime(text).date()
    raise TypeError(f"no es una fecha: {value!r}")


def _to_datetime(value: Any, column_type: Any) -> datetime:
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        result = _parse_iso_datetime(value)
    else:
        raise TypeError(f"no es fecha/hora: {value!r}")

    # Columna sin zona horaria: se guarda en UTC sin tzinfo
    if result.tzinfo is not None and not getattr(column_type, "timezone", False):
        result = result.astimezone(timezone.utc).replace(tzinfo=None)
    return result


def _to_time(value: Any, column_type: Any) -> time:
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        return time.fromisoformat(value.strip())
    raise TypeError(f"no es una hora: {value!r}")


def _to_uuid(value: Any, column_type: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value).strip())


_CONVERTERS: Dict[type, Callable[[Any, Any], Any]] = {
    bool: _to_bool,
    int: _to_int,
    float: _to_float,
    Decimal: _to_decimal,
    str: _to_str,
    date: _to_date,
    datetime: _to_datetime,
    time: _to_time,
    uuid.UUID: _to_uuid,
}


def coerce_value(column_type: Any, value: Any) -> Any:
    """
    Convierte un valor al tipo Python de la columna.

    Los tipos sin conversor (JSON, arrays, intervalos...) y las columnas
    sin tipo conocido reciben el valor tal cual; el tipo de SQLAlchemy
    se encarga de ellos al enlazar el parametro.

    Args:
        column_type: TypeEngine de la columna (o None)
        value: Valor enviado por el cliente

    Returns:
        Any: Valor convertido

    Raises:
        ValueError, TypeError, ArithmeticError: Si el valor no es convertible
    """
    if value is None:
        return None
    converter = _CONVERTERS.get(python_type_of(column_type))
    if converter is None:
        return value
    return converter(value, column_type)
