"""JSON encoding for handler results and the metrics document.

Mappings are written in their iteration order, so an evaluated metrics
tree comes out in registration order. Values ``json`` cannot encode
natively go through ``_default``. Non-finite floats become the strings
``"NaN"``, ``"Infinity"`` and ``"-Infinity"`` so the output stays strict
JSON.
"""

import dataclasses
import json as json_module
import math
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any

_NON_FINITE = {math.inf: "Infinity", -math.inf: "-Infinity"}


def _finite(value: Any, _active: frozenset[int] = frozenset()) -> Any:
    """Replace non-finite floats in *value*, recursing into containers."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        return _NON_FINITE.get(value, value)
    if isinstance(value, (dict, list, tuple)):
        if id(value) in _active:
            raise ValueError("Circular reference detected")
        active = _active | {id(value)}
        if isinstance(value, dict):
            return {key: _finite(item, active) for key, item in value.items()}
        return [_finite(item, active) for item in value]
    return value


def _default(value: Any) -> Any:
    """Fallback encoder for non-JSON-native values."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return _finite(value.total_seconds())
    if isinstance(value, Enum):
        return _finite(value.value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _finite(dataclasses.asdict(value))
    if isinstance(value, (set, frozenset)):
        return _finite(list(value))
    return str(value)


def to_json(value: Any, *, indent: int | None = None) -> str:
    """Serialize *value* to JSON text.

    Raises ``ValueError`` for circular structures.
    """
    return json_module.dumps(
        _finite(value),
        default=_default,
        ensure_ascii=False,
        allow_nan=False,
        indent=indent,
    )
