"""Helpers shared by the model ``from_dict`` constructors."""

from enum import Enum
from typing import Any, Optional, TypeVar

from coopledger.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

_MISSING = object()


def pick(data: dict, *keys: str, default: Any = _MISSING) -> Any:
    """
    Return the first present key out of ``keys``.

    Payloads coming from the web front end use camelCase while the models use
    snake_case, so callers pass both spellings.

    Raises:
        ValidationError: If none of the keys is present and no default is given
    """
    for key in keys:
        if key in data:
            return data[key]
    if default is _MISSING:
        raise ValidationError(f"Missing required field: {keys[0]}")
    return default


def parse_enum(enum_cls: type[E], value: Any) -> E:
    """Coerce ``value`` into ``enum_cls``, accepting members and names in any case."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {enum_cls.__name__}: {value!r} (expected one of {allowed})"
        ) from None


def parse_amount(value: Any, field_name: str) -> float:
    """Coerce a numeric field to float."""
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid number for {field_name}: {value!r}") from None


def optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)
