"""Conversion between remote records and local tokens, and display helpers."""

import json
import math
from collections.abc import Mapping
from typing import Any

from tokensync.models.variable import (
    ALIAS_PREFIX,
    ALIAS_SUFFIX,
    AliasRef,
    LiteralValue,
    LocalVariable,
    RemoteVariable,
    RGBColor,
    coerce_token_value,
    parse_alias_sentinel,
)
from tokensync.sync.models import Change

EMPTY_PLACEHOLDER = "—"

__all__ = [
    "ALIAS_PREFIX",
    "ALIAS_SUFFIX",
    "EMPTY_PLACEHOLDER",
    "display_name",
    "format_for_display",
    "from_wire_value",
    "is_alias_sentinel",
    "parse_alias_sentinel",
    "short_name",
    "to_alias_sentinel",
    "to_local_record",
    "to_local_shape",
    "to_wire_value",
]


def to_alias_sentinel(name: str) -> str:
    """Wrap a variable name as an alias marker: ``{name}``."""
    return f"{ALIAS_PREFIX}{name}{ALIAS_SUFFIX}"


def is_alias_sentinel(text: Any) -> bool:
    return parse_alias_sentinel(text) is not None


def to_wire_value(value: LiteralValue | AliasRef | None) -> Any:
    """Raw wire form of a tagged value; aliases become ``{name}`` strings."""
    if value is None:
        return None
    if isinstance(value, AliasRef):
        return to_alias_sentinel(value.name)
    if isinstance(value.value, RGBColor):
        return value.value.model_dump(exclude_none=True)
    return value.value


def from_wire_value(raw: Any) -> LiteralValue | AliasRef:
    """Tagged value for a raw wire value."""
    coerced = coerce_token_value(raw)
    if isinstance(coerced, dict):
        if coerced["kind"] == "alias":
            return AliasRef.model_validate(coerced)
        return LiteralValue.model_validate(coerced)
    return coerced


def to_local_shape(remote_variable: RemoteVariable) -> LocalVariable:
    """
    Convert a remote variable into a local token for import.

    Modes without a recorded value are left out.

    Args:
        remote_variable: Remote variable record

    Returns:
        LocalVariable with one tagged value per recorded mode
    """
    mode_values = {
        mode_name: value
        for mode_name, value in remote_variable.values_by_mode().items()
        if value is not None
    }
    return LocalVariable(
        name=remote_variable.name,
        type=remote_variable.resolved_type,
        description=remote_variable.description,
        mode_values=mode_values,
        scopes=remote_variable.scopes,
    )


def to_local_record(remote_variable: RemoteVariable) -> dict[str, Any]:
    """Wire record of ``to_local_shape`` with aliases written as ``{aliasName}``."""
    local_variable = to_local_shape(remote_variable)
    record: dict[str, Any] = {
        "name": local_variable.name,
        "type": local_variable.type.value,
        "modeValues": {
            mode_name: to_wire_value(value)
            for mode_name, value in local_variable.mode_values.items()
        },
    }
    if local_variable.description is not None:
        record["description"] = local_variable.description
    return record


def _channel_to_byte(channel: float) -> int | str:
    if not math.isfinite(channel):
        return str(channel)
    # Round half up
    return int(math.floor(channel * 255 + 0.5))


def _format_color(r: float, g: float, b: float) -> str:
    return f"rgb({_channel_to_byte(r)}, {_channel_to_byte(g)}, {_channel_to_byte(b)})"


def _json_ready(value: Any) -> Any:
    if isinstance(value, (LiteralValue, AliasRef)):
        return to_wire_value(value)
    if isinstance(value, RGBColor):
        return value.model_dump(exclude_none=True)
    if isinstance(value, Mapping):
        return {key: _json_ready(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_ready(item) for item in value]
    return value


def format_for_display(value: Any) -> str:
    """
    Human readable rendering of a value for review and audit output.

    Args:
        value: Tagged value, raw wire value, mode map, or None

    Returns:
        Placeholder for missing values, ``rgb(r, g, b)`` for colors (alpha
        not shown), ``{name}`` for aliases, JSON for other objects and plain
        text otherwise
    """
    if value is None:
        return EMPTY_PLACEHOLDER
    if isinstance(value, AliasRef):
        return to_alias_sentinel(value.name)
    if isinstance(value, LiteralValue):
        return format_for_display(value.value)
    if isinstance(value, RGBColor):
        return _format_color(value.r, value.g, value.b)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping):
        if "r" in value:
            try:
                return _format_color(float(value["r"]), float(value["g"]), float(value["b"]))
            except (KeyError, TypeError, ValueError):
                pass
        return json.dumps(_json_ready(value), default=str)
    if isinstance(value, (list, tuple)):
        return json.dumps(_json_ready(value), default=str)
    return str(value)


def short_name(variable_name: str) -> str:
    """Drop the top-level path segment: ``typography/page/hero`` -> ``page/hero``."""
    parts = variable_name.split("/")
    return "/".join(parts[1:]) if len(parts) > 1 else variable_name


def display_name(change: Change) -> str:
    return short_name(change.variable_name)
