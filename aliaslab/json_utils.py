"""JSON sanitisation for frame dumps.

Turns engine output (numpy arrays and scalars, complex spectrum values,
value objects exposing ``to_dict``) into plain Python that
``json.dumps(allow_nan=False)`` accepts.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

__all__ = [
    "safe_json_dumps",
    "sanitize_for_json",
    "sanitize_value",
]

LOGGER = logging.getLogger(__name__)


def sanitize_for_json(obj: Any) -> tuple[Any, bool]:
    """Recursively replace non-finite floats (NaN, Inf, -Inf) with ``None``.

    Numpy arrays become lists, numpy scalars native Python values, complex
    numbers ``[real, imag]`` pairs, and objects with a ``to_dict`` method
    their dict form.

    Returns the sanitised object and a flag telling whether any non-finite
    value was encountered.
    """
    found_non_finite = False

    def _float(v: float) -> float | None:
        nonlocal found_non_finite
        if math.isfinite(v):
            return v
        found_non_finite = True
        return None

    def _walk(v: Any) -> Any:
        if hasattr(v, "to_dict") and callable(v.to_dict):
            v = v.to_dict()
        # Numpy array → Python list (check ndim to distinguish from scalars).
        if hasattr(v, "tolist") and hasattr(v, "ndim"):
            v = v.tolist()
        # Numpy scalar → native Python type via .item().
        elif hasattr(v, "item"):
            v = v.item()
        if isinstance(v, complex):
            return [_float(v.real), _float(v.imag)]
        if isinstance(v, float):
            return _float(v)
        if isinstance(v, dict):
            return {k: _walk(val) for k, val in v.items()}
        if isinstance(v, (list, tuple)):
            return [_walk(item) for item in v]
        return v

    cleaned = _walk(obj)
    return cleaned, found_non_finite


def sanitize_value(value: Any) -> Any:
    """Sanitise *value*, logging once if non-finite floats were dropped."""
    cleaned, had_non_finite = sanitize_for_json(value)
    if had_non_finite:
        LOGGER.warning("Replaced non-finite floats with null while serialising")
    return cleaned


def safe_json_dumps(value: Any, *, indent: int | None = None) -> str:
    """Sanitise *value* and serialise with ``allow_nan=False``."""
    return json.dumps(sanitize_value(value), ensure_ascii=False, allow_nan=False, indent=indent)
