"""Semantic equality for token values."""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from tokensync.models.variable import AliasRef, LiteralValue, RGBColor

DEFAULT_COLOR_TOLERANCE = 0.001


def _category(value: Any) -> str:
    # bool is a subclass of int, check it first
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def _as_mapping(value: Any) -> Mapping[str, Any] | None:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, Mapping):
        return value
    return None


def _is_rgb(value: Any) -> bool:
    if isinstance(value, RGBColor):
        return True
    return isinstance(value, Mapping) and "r" in value


def _channel(value: Any, name: str, default: float | None = None) -> float | None:
    raw = getattr(value, name) if isinstance(value, RGBColor) else value.get(name, default)
    if raw is None:
        return default
    return float(raw)


def _colors_equal(a: Any, b: Any, tolerance: float, compare_alpha: bool) -> bool:
    channels = ["r", "g", "b"]
    if compare_alpha:
        channels.append("a")
    try:
        for name in channels:
            default = 1.0 if name == "a" else None
            left = _channel(a, name, default)
            right = _channel(b, name, default)
            if left is None or right is None:
                return False
            # NaN channels fail the comparison and count as a change
            if not abs(left - right) < tolerance:
                return False
    except (TypeError, ValueError):
        return False
    return True


def _canonical(value: Any) -> str | None:
    try:
        return json.dumps(value, sort_keys=True, default=str)
    except (TypeError, ValueError):
        return None


def values_equal(
    a: Any,
    b: Any,
    tolerance: float = DEFAULT_COLOR_TOLERANCE,
    compare_alpha: bool = False,
) -> bool:
    """
    Decide whether two raw token values are semantically equal.

    Colors match when every RGB channel differs by less than ``tolerance``;
    alpha is ignored unless ``compare_alpha`` is set. Other objects compare by
    their canonical JSON form. Values of different categories never match.

    Args:
        a: First value (None, bool, number, str, RGBColor or mapping)
        b: Second value
        tolerance: Per-channel color tolerance
        compare_alpha: Whether the alpha channel takes part in color equality

    Returns:
        True if the values are equal, False otherwise
    """
    if _category(a) != _category(b):
        return False

    if _category(a) == "object":
        if _is_rgb(a) and _is_rgb(b):
            return _colors_equal(a, b, tolerance, compare_alpha)
        left = _as_mapping(a)
        right = _as_mapping(b)
        left_form = _canonical(left if left is not None else a)
        right_form = _canonical(right if right is not None else b)
        return left_form is not None and left_form == right_form

    return a == b


def token_values_equal(
    a: LiteralValue | AliasRef | None,
    b: LiteralValue | AliasRef | None,
    tolerance: float = DEFAULT_COLOR_TOLERANCE,
    compare_alpha: bool = False,
) -> bool:
    """
    Compare two resolved tagged values.

    An absent value on either side is never equal. Aliases match only aliases
    with the same target; literals go through ``values_equal``.
    """
    if a is None or b is None:
        return False
    if isinstance(a, AliasRef) or isinstance(b, AliasRef):
        return isinstance(a, AliasRef) and isinstance(b, AliasRef) and a.name == b.name
    return values_equal(a.value, b.value, tolerance=tolerance, compare_alpha=compare_alpha)
