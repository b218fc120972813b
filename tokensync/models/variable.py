"""Pydantic models for local design tokens and remote variable snapshots."""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)
from pydantic.alias_generators import to_camel

ALIAS_PREFIX = "{"
ALIAS_SUFFIX = "}"


class WireModel(BaseModel):
    """Base model accepting both camelCase wire keys and snake_case names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class VariableType(str, Enum):
    """Resolved type of a variable."""

    COLOR = "COLOR"
    NUMBER = "NUMBER"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"

    @classmethod
    def _missing_(cls, value: object) -> "VariableType | None":
        # The remote store calls numbers FLOAT
        if isinstance(value, str) and value.upper() == "FLOAT":
            return cls.NUMBER
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        return None


class RGBColor(WireModel):
    """RGB(A) color with channels in [0, 1]."""

    r: float = Field(default=..., description="Red channel")
    g: float = Field(default=..., description="Green channel")
    b: float = Field(default=..., description="Blue channel")
    a: float | None = Field(default=None, description="Alpha channel, if any")


LiteralData = Union[StrictBool, StrictInt, StrictFloat, StrictStr, RGBColor]


class LiteralValue(WireModel):
    """A literal token value (number, string, boolean or color)."""

    kind: Literal["literal"] = "literal"
    value: LiteralData = Field(default=..., description="Literal payload")


class AliasRef(WireModel):
    """A reference to another variable by name."""

    kind: Literal["alias"] = "alias"
    name: str = Field(default=..., min_length=1, description="Target variable name")


TokenValue = Annotated[Union[LiteralValue, AliasRef], Field(discriminator="kind")]


def parse_alias_sentinel(text: Any) -> str | None:
    """Return the alias name wrapped in ``{...}``, or None for anything else."""
    if (
        isinstance(text, str)
        and len(text) > 2
        and text.startswith(ALIAS_PREFIX)
        and text.endswith(ALIAS_SUFFIX)
    ):
        return text[1:-1]
    return None


def coerce_token_value(raw: Any) -> Any:
    """Turn a raw wire value into tagged input for validation.

    Already-tagged values (instances or dicts carrying ``kind``) pass through.
    ``{name}`` strings become aliases; everything else is a literal.
    """
    if isinstance(raw, (LiteralValue, AliasRef)):
        return raw
    if isinstance(raw, dict) and raw.get("kind") in ("literal", "alias"):
        return raw
    alias_name = parse_alias_sentinel(raw)
    if alias_name is not None:
        return {"kind": "alias", "name": alias_name}
    return {"kind": "literal", "value": raw}


class LocalVariable(WireModel):
    """A token from the local store that should exist remotely."""

    name: str = Field(
        default=..., min_length=1, description="Full hierarchical path, e.g. brand/primary"
    )
    type: VariableType = Field(default=..., description="Variable type")
    description: str | None = Field(default=None, description="Optional description")
    mode_values: dict[str, TokenValue] = Field(
        default_factory=dict, description="Value per mode name"
    )
    alias_target: str | None = Field(
        default=None, description="Variable name every mode resolves to, if set"
    )
    scopes: list[str] | None = Field(default=None, description="Publishing scopes")

    @field_validator("mode_values", mode="before")
    @classmethod
    def coerce_mode_values(cls, v: Any) -> Any:
        """Accept raw wire values and alias sentinels for each mode."""
        if isinstance(v, dict):
            return {mode: coerce_token_value(raw) for mode, raw in v.items()}
        return v

    def resolve(self, mode_name: str) -> LiteralValue | AliasRef | None:
        """Comparable value for a mode; a variable-wide alias wins over literals."""
        if self.alias_target:
            return AliasRef(name=self.alias_target)
        return self.mode_values.get(mode_name)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "brand/primary",
                "type": "COLOR",
                "modeValues": {
                    "light": {"r": 1, "g": 0, "b": 0},
                    "dark": "{palette/blue/500}",
                },
            }
        },
    )


class RemoteModeValue(WireModel):
    """One mode's value of a remote variable."""

    mode_id: str = Field(default=..., description="Remote-assigned mode id")
    mode_name: str = Field(default=..., description="Human readable mode name")
    value: LiteralData | None = Field(default=None, description="Literal value, if any")
    alias_id: str | None = Field(default=None, description="Id of the aliased variable")
    alias_name: str | None = Field(default=None, description="Name of the aliased variable")

    def token_value(self) -> LiteralValue | AliasRef | None:
        """Tagged form of this entry, or None when nothing is recorded."""
        if self.alias_id:
            if not self.alias_name:
                return None
            return AliasRef(name=self.alias_name)
        if self.value is None:
            return None
        return LiteralValue(value=self.value)


class RemoteVariable(WireModel):
    """Snapshot of a variable as it exists in the remote store."""

    id: str = Field(default=..., description="Remote-assigned identifier")
    name: str = Field(default=..., min_length=1, description="Join key, same namespace as local")
    resolved_type: VariableType = Field(default=..., description="Variable type")
    description: str | None = Field(default=None, description="Optional description")
    collection_id: str = Field(default="", description="Owning collection id")
    collection_name: str = Field(default="", description="Owning collection name")
    mode_values: list[RemoteModeValue] = Field(
        default_factory=list, description="Ordered per-mode values"
    )
    scopes: list[str] | None = Field(default=None, description="Publishing scopes")

    def resolve(self, mode_name: str) -> LiteralValue | AliasRef | None:
        """Comparable value recorded for a mode, or None if the mode is absent."""
        for mode_value in self.mode_values:
            if mode_value.mode_name == mode_name:
                return mode_value.token_value()
        return None

    def has_mode(self, mode_name: str) -> bool:
        return any(mv.mode_name == mode_name for mv in self.mode_values)

    def values_by_mode(self) -> dict[str, LiteralValue | AliasRef | None]:
        """Mode name to tagged value, first entry per mode wins."""
        values: dict[str, LiteralValue | AliasRef | None] = {}
        for mode_value in self.mode_values:
            values.setdefault(mode_value.mode_name, mode_value.token_value())
        return values


class RemoteMode(WireModel):
    """A mode declared by a remote collection."""

    mode_id: str = Field(default=..., description="Remote-assigned mode id")
    name: str = Field(default=..., description="Mode name")


class RemoteCollection(WireModel):
    """A remote grouping of variables sharing one set of modes."""

    id: str = Field(default=..., description="Remote-assigned collection id")
    name: str = Field(default=..., description="Collection name")
    modes: list[RemoteMode] = Field(default_factory=list, description="Declared modes")
    default_mode_id: str = Field(default="", description="Id of the default mode")
    variable_count: int = Field(default=0, ge=0, description="Number of variables")

    @property
    def mode_names(self) -> list[str]:
        return [mode.name for mode in self.modes]


class RemoteSnapshot(WireModel):
    """A remote collection (if any) with its variables, as fetched by the adapter."""

    collection: RemoteCollection | None = Field(
        default=None, description="Collection, or None before the first sync"
    )
    variables: list[RemoteVariable] = Field(
        default_factory=list, description="Variables of the collection"
    )
