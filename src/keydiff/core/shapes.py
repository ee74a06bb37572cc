from __future__ import annotations

import dataclasses
import datetime as dt
import enum
import math
from collections.abc import Iterable, Mapping
from decimal import Decimal
from fractions import Fraction
from pathlib import PurePath
from typing import Any
from uuid import UUID


class ValueShape(enum.Enum):
    SCALAR = "scalar"
    MAPPING = "mapping"
    COLLECTION = "collection"
    RECORD = "record"
    OPAQUE = "opaque"


SCALAR_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    Decimal,
    Fraction,
    enum.Enum,
    dt.date,
    dt.time,
    dt.timedelta,
    UUID,
    PurePath,
)


def is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and isinstance(getattr(type(value), "_fields", None), tuple)


def is_record(value: Any) -> bool:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return True
    return is_named_tuple(value)


def is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def values_equal(expected: Any, actual: Any) -> bool:
    """Equality under which every value matches itself, NaN included."""
    if expected is actual or expected == actual:
        return True
    return is_nan(expected) and is_nan(actual)


def classify(value: Any) -> ValueShape:
    # Order matters: str/bytes are iterable, named tuples are tuples.
    if value is None or isinstance(value, SCALAR_TYPES):
        return ValueShape.SCALAR
    if is_record(value):
        return ValueShape.RECORD
    if isinstance(value, Mapping):
        return ValueShape.MAPPING
    if isinstance(value, Iterable):
        return ValueShape.COLLECTION
    return ValueShape.OPAQUE


def record_fields(value: Any) -> list[str]:
    """Declared field names of a record, in declaration order.

    Dataclass fields declared with ``compare=False`` are left out so the
    result agrees with the dataclass's own ``__eq__``.
    """
    if is_named_tuple(value):
        return list(type(value)._fields)
    return [field.name for field in dataclasses.fields(value) if field.compare]


__all__ = [
    "SCALAR_TYPES",
    "ValueShape",
    "classify",
    "is_nan",
    "is_named_tuple",
    "is_record",
    "record_fields",
    "values_equal",
]
