"""Translation between Firebolt column types and the generic type vocabulary.

The generic vocabulary is shared by every driver of the orchestration layer
(``text``, ``int``, ``bigint``, ``double``, ``timestamp``...). Firebolt only
needs to override a handful of names; everything else goes through the base
mapping.
"""

import re
from typing import Dict

# Base mapping shared with other drivers; keys are lower-case.
DB_TYPE_TO_GENERIC: Dict[str, str] = {
    "timestamp without time zone": "timestamp",
    "character varying": "text",
    "varchar": "text",
    "integer": "int",
    "nvarchar": "text",
    "text": "text",
    "string": "text",
    "boolean": "boolean",
    "bigint": "bigint",
    "time": "string",
    "datetime": "timestamp",
    "date": "date",
    "enum": "text",
    "double precision": "double",
    "int8": "bigint",
    "int4": "int",
    "int2": "int",
    "bool": "boolean",
    "float4": "float",
    "float8": "double",
}

FIREBOLT_TYPE_TO_GENERIC: Dict[str, str] = {
    "long": "bigint",
}

GENERIC_TO_FIREBOLT_TYPE: Dict[str, str] = {
    generic: native for native, generic in FIREBOLT_TYPE_TO_GENERIC.items()
}

COMPLEX_TYPE = re.compile(r"(nullable|array)\((.+)\)")


def base_to_generic_type(column_type: str) -> str:
    """Generic mapping used by drivers without their own overrides."""
    return DB_TYPE_TO_GENERIC.get(column_type.lower(), column_type)


def to_generic_type(column_type: str) -> str:
    """Map a Firebolt column type to a generic type.

    Wrapped types (``nullable(long)``, ``array(long)``) re-check the outer
    type string against the Firebolt table before resolving the inner one.
    That lookup already missed above, so wrapped types always fall through
    to the base mapping.

    TODO: resolve the inner type of nullable()/array() directly once callers
    are ready for ``nullable(long)`` to map to ``bigint``.
    """
    if column_type in FIREBOLT_TYPE_TO_GENERIC:
        return FIREBOLT_TYPE_TO_GENERIC[column_type]

    match = COMPLEX_TYPE.search(column_type)
    if match:
        inner_type = match.group(2)
        if column_type in FIREBOLT_TYPE_TO_GENERIC:
            return FIREBOLT_TYPE_TO_GENERIC[inner_type]

    return base_to_generic_type(column_type)


def from_generic_type(column_type: str) -> str:
    """Map a generic type to the Firebolt type used in column definitions."""
    return GENERIC_TO_FIREBOLT_TYPE.get(column_type, column_type)
