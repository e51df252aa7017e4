"""
Serializer fields.

A field converts one value in each direction:

- ``to_internal_value(data)`` turns request JSON into a Python value and
  raises ``ValueError`` (or a nested ``ValidationFault``) when it cannot.
- ``to_representation(value)`` turns a stored value back into JSON.

Common options: ``required`` (defaults to True unless ``default`` is given),
``default`` (a value or a callable), ``allow_null``, ``allow_blank``,
``source`` (dotted path for output) and ``error_messages``. Setting
``error_messages={"invalid": ...}`` makes every coercion failure of the
field report that single message, which is how domain serializers give
clients readable errors such as "Invalid payment method".
"""

from __future__ import annotations

import copy
import datetime
import decimal
import re
from typing import Any, Dict, Mapping, Sequence, Tuple

from ..faults import ValidationFault


class _Empty:
    """Marker for a value that was not supplied."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "<empty>"

    def __bool__(self):
        return False

empty = _Empty()


# ============================================================================
# Base Field
# ============================================================================

class SerializerField:
    """Base class; ``Serializer`` binds a copy of each field per instance."""

    _creation_counter: int = 0

    default_error_messages: Dict[str, str] = {
        "required": "This field is required.",
        "null": "This field may not be null.",
        "invalid": "Invalid value.",
    }

    def __init__(
        self,
        *,
        required: bool | None = None,
        default: Any = empty,
        allow_null: bool = False,
        allow_blank: bool = False,
        source: str | None = None,
        error_messages: dict[str, str] | None = None,
    ):
        self.required = (default is empty) if required is None else required
        self.default = default
        self.allow_null = allow_null
        self.allow_blank = allow_blank
        self.source = source

        self.error_messages = dict(self.default_error_messages)
        self.custom_invalid = bool(error_messages and "invalid" in error_messages)
        self.error_messages.update(error_messages or {})

        self.field_name = ""
        self.parent: Any = None

        # declaration order, used by SerializerMeta
        self._order = SerializerField._creation_counter
        SerializerField._creation_counter += 1

    def bind(self, field_name: str, parent: Any) -> None:
        self.field_name = field_name
        self.parent = parent
        if self.source is None:
            self.source = field_name
        self._path = tuple(self.source.split("."))

    def to_representation(self, value: Any) -> Any:
        return value

    def to_internal_value(self, data: Any) -> Any:
        return data

    def validate(self, value: Any) -> Any:
        return value

    def run_validation(self, data: Any) -> Any:
        return self.validate(self.to_internal_value(data))

    def get_default(self) -> Any:
        if self.default is empty:
            if self.required:
                raise ValueError(self.error_messages["required"])
            return empty
        if callable(self.default):
            return self.default()
        return copy.deepcopy(self.default)

    def get_attribute(self, instance: Any) -> Any:
        """Follow ``source`` through mappings and attributes; None when a hop is missing."""
        current = instance
        for part in self._path:
            if current is None:
                return None
            if isinstance(current, Mapping):
                current = current.get(part)
            else:
                current = getattr(current, part, None)
        return current

    def __repr__(self) -> str:
        name = f" {self.field_name!r}" if self.field_name else ""
        return f"<{type(self).__name__}{name}>"


# ============================================================================
# Scalars
# ============================================================================

class BooleanField(SerializerField):

    TRUE_VALUES = {True, 1, "true", "True", "TRUE", "1", "yes"}
    FALSE_VALUES = {False, 0, "false", "False", "FALSE", "0", "no"}

    def to_internal_value(self, data: Any) -> bool:
        if isinstance(data, (dict, list)):
            raise ValueError("Must be a valid boolean.")
        if data in self.TRUE_VALUES:
            return True
        if data in self.FALSE_VALUES:
            return False
        raise ValueError("Must be a valid boolean.")

    def to_representation(self, value: Any) -> bool:
        return bool(value)


class CharField(SerializerField):
    """Text, stripped of surrounding whitespace before length checks."""

    def __init__(self, *, max_length: int | None = None, min_length: int | None = None, **kwargs):
        self.max_length = max_length
        self.min_length = min_length
        super().__init__(**kwargs)

    def to_internal_value(self, data: Any) -> str:
        if isinstance(data, bool) or not isinstance(data, (str, int, float)):
            raise ValueError("Not a valid string.")
        text = str(data).strip()
        if text == "" and not self.allow_blank:
            raise ValueError("This field may not be blank.")
        if self.max_length is not None and len(text) > self.max_length:
            raise ValueError(f"Ensure this field has no more than {self.max_length} characters.")
        if self.min_length is not None and len(text) < self.min_length:
            raise ValueError(f"Ensure this field has at least {self.min_length} characters.")
        return text

    def to_representation(self, value: Any) -> str:
        return "" if value is None else str(value)


class EmailField(CharField):
    """Lower-cased email address."""

    PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")

    def to_internal_value(self, data: Any) -> str:
        address = super().to_internal_value(data)
        if address and not self.PATTERN.match(address):
            raise ValueError("Enter a valid email address.")
        return address.lower()


def _check_range(value, low, high, *, low_exclusive: bool = False) -> None:
    if low is not None:
        if low_exclusive and value <= low:
            raise ValueError(f"Ensure this value is greater than {low}.")
        if value < low:
            raise ValueError(f"Ensure this value is greater than or equal to {low}.")
    if high is not None and value > high:
        raise ValueError(f"Ensure this value is less than or equal to {high}.")


class IntegerField(SerializerField):
    """Whole numbers; booleans and fractional floats are rejected."""

    def __init__(self, *, min_value: int | None = None, max_value: int | None = None, **kwargs):
        self.min_value = min_value
        self.max_value = max_value
        super().__init__(**kwargs)

    def to_internal_value(self, data: Any) -> int:
        if isinstance(data, bool) or (isinstance(data, float) and not data.is_integer()):
            raise ValueError("A valid integer is required.")
        try:
            number = int(data)
        except (ValueError, TypeError):
            raise ValueError("A valid integer is required.")
        _check_range(number, self.min_value, self.max_value)
        return number

    def to_representation(self, value: Any) -> int:
        return 0 if value is None else int(value)


class FloatField(SerializerField):

    def __init__(self, *, min_value: float | None = None, max_value: float | None = None, **kwargs):
        self.min_value = min_value
        self.max_value = max_value
        super().__init__(**kwargs)

    def to_internal_value(self, data: Any) -> float:
        if isinstance(data, bool):
            raise ValueError("A valid number is required.")
        try:
            number = float(data)
        except (ValueError, TypeError):
            raise ValueError("A valid number is required.")
        if number != number or number in (float("inf"), float("-inf")):
            raise ValueError("A valid number is required.")
        _check_range(number, self.min_value, self.max_value)
        return number

    def to_representation(self, value: Any) -> float:
        return 0.0 if value is None else float(value)


class DecimalField(SerializerField):
    """
    Money amounts.

    Input goes through ``str`` first so a JSON ``0.1`` becomes
    ``Decimal("0.1")`` rather than the binary float. Output is a float.
    ``min_exclusive=True`` turns ``min_value`` into a strict lower bound.
    """

    def __init__(
        self,
        *,
        min_value: decimal.Decimal | float | None = None,
        max_value: decimal.Decimal | float | None = None,
        min_exclusive: bool = False,
        **kwargs,
    ):
        self.min_value = min_value
        self.max_value = max_value
        self.min_exclusive = min_exclusive
        super().__init__(**kwargs)

    def to_internal_value(self, data: Any) -> decimal.Decimal:
        if isinstance(data, bool):
            raise ValueError("A valid decimal number is required.")
        try:
            amount = decimal.Decimal(str(data).strip())
        except (decimal.InvalidOperation, TypeError, ValueError):
            raise ValueError("A valid decimal number is required.")
        if not amount.is_finite():
            raise ValueError("A valid decimal number is required.")
        low = None if self.min_value is None else decimal.Decimal(str(self.min_value))
        high = None if self.max_value is None else decimal.Decimal(str(self.max_value))
        _check_range(amount, low, high, low_exclusive=self.min_exclusive)
        return amount

    def to_representation(self, value: Any) -> float | None:
        if value is None:
            return None
        return float(decimal.Decimal(str(value)))


class DateTimeField(SerializerField):
    """ISO 8601 text in, ``datetime`` out; a trailing ``Z`` means UTC."""

    def to_internal_value(self, data: Any) -> datetime.datetime:
        if isinstance(data, datetime.datetime):
            return data
        if isinstance(data, str):
            try:
                return datetime.datetime.fromisoformat(data.replace("Z", "+00:00"))
            except ValueError:
                pass
        raise ValueError("Datetime has wrong format. Use ISO 8601.")

    def to_representation(self, value: Any) -> str | None:
        if value is None:
            return None
        return value.isoformat() if isinstance(value, datetime.datetime) else str(value)


class ChoiceField(SerializerField):
    """One of a fixed set of values, given bare or as ``(value, label)`` pairs."""

    def __init__(self, choices: Sequence[Any] | Sequence[Tuple[Any, str]], **kwargs):
        self.choices = [
            (c[0], str(c[1])) if isinstance(c, (list, tuple)) else (c, str(c))
            for c in choices
        ]
        self.values = [value for value, _ in self.choices]
        super().__init__(**kwargs)

    def to_internal_value(self, data: Any) -> Any:
        if isinstance(data, (dict, list)) or data not in self.values:
            allowed = ", ".join(str(v) for v in self.values)
            raise ValueError(f"Invalid choice '{data}'. Valid choices: {allowed}")
        return data


# ============================================================================
# Containers
# ============================================================================

class ListField(SerializerField):
    """
    A list whose items go through ``child``.

    ``child`` may be a field or a nested serializer. Item errors are keyed
    by index, so a bad quantity on the second order line surfaces as
    ``items.1.quantity`` once flattened.
    """

    def __init__(
        self,
        *,
        child: SerializerField | None = None,
        min_length: int | None = None,
        max_length: int | None = None,
        **kwargs,
    ):
        self.child = child
        self.min_length = min_length
        self.max_length = max_length
        super().__init__(**kwargs)

    def to_internal_value(self, data: Any) -> list:
        if not isinstance(data, (list, tuple)):
            raise ValueError("Expected a list of items.")
        if self.min_length is not None and len(data) < self.min_length:
            raise ValueError(f"Ensure this list has at least {self.min_length} items.")
        if self.max_length is not None and len(data) > self.max_length:
            raise ValueError(f"Ensure this list has no more than {self.max_length} items.")
        if self.child is None:
            return list(data)

        items = []
        errors: Dict[str, Any] = {}
        for index, item in enumerate(data):
            try:
                if item is None and not self.child.allow_null:
                    raise ValueError(self.child.error_messages["null"])
                items.append(self.child.run_validation(item))
            except ValidationFault as exc:
                errors[str(index)] = exc.errors
            except (ValueError, TypeError) as exc:
                errors[str(index)] = [self.child.error_messages["invalid"] if self.child.custom_invalid else str(exc)]
        if errors:
            raise ValidationFault(errors)
        return items

    def to_representation(self, value: Any) -> list:
        if value is None:
            return []
        if self.child is None:
            return list(value)
        return [self.child.to_representation(item) for item in value]


class JSONField(SerializerField):
    """Free-form JSON (specifications, metadata); passed through untouched."""
