"""Per-row value normalization applied while results are materialized.

The engine client calls :func:`hydrate_row` for every row it decodes, so
values reach callers already normalized, for buffered and streamed results
alike. Numeric values are rendered as decimal strings: 64-bit integers and
decimals must survive consumers that only have double precision numbers.
"""

import math
import re
from decimal import Decimal
from typing import Any, Mapping, Protocol, Sequence

from firebolt_driver.types.models import Row

INTEGER_TYPES = frozenset({
    "int", "integer", "int32", "int64", "uint8", "uint16", "uint32", "uint64",
    "long", "bigint",
})
FLOAT_TYPES = frozenset({
    "float", "float32", "float64", "real", "double", "double precision",
})
DECIMAL_TYPES = frozenset({"decimal", "numeric"})

_NULLABLE_TYPE = re.compile(r"^nullable\((.+)\)$")
_TYPE_PARAMETERS = re.compile(r"\(.*\)$")


class ColumnLike(Protocol):
    name: str
    type: str


def _normalize_type(column_type: str) -> str:
    normalized = column_type.strip().lower()
    match = _NULLABLE_TYPE.match(normalized)
    if match:
        normalized = match.group(1).strip()
    if normalized.endswith(" null"):
        normalized = normalized[: -len(" null")].rstrip()
    return normalized


def is_number_type(column_type: str) -> bool:
    """Whether values of a Firebolt column type are numeric.

    ``nullable(...)`` and ``... null`` forms count as their inner type;
    arrays are never numeric.
    """
    normalized = _normalize_type(column_type)
    if normalized.startswith("array"):
        return False
    if normalized in INTEGER_TYPES or normalized in FLOAT_TYPES:
        return True
    return _TYPE_PARAMETERS.sub("", normalized).strip() in DECIMAL_TYPES


def _render_number(value: Any) -> str:
    """Plain decimal notation; never an exponent."""
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float) and math.isfinite(value):
        # repr is the shortest round-tripping form of the double
        return format(Decimal(repr(value)), "f")
    return str(value)


def hydrate_value(value: Any, column: ColumnLike) -> Any:
    if value is not None and is_number_type(column.type):
        return _render_number(value)
    return value


def hydrate_row(row: Mapping[str, Any], meta: Sequence[ColumnLike]) -> Row:
    """Return a new row keyed by the columns in ``meta``, in metadata order."""
    return {column.name: hydrate_value(row.get(column.name), column) for column in meta}
