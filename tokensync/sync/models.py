"""Data models for reconciliation results."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from tokensync.models.variable import LocalVariable


class ChangeType(str, Enum):
    """Classification of one reconciliation unit."""

    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    UNCHANGED = "unchanged"


class Change(BaseModel):
    """One reconciliation unit.

    UPDATE entries always describe exactly one mode. ADD and DELETE carry the
    whole mode map and no mode name.
    """

    type: ChangeType = Field(default=..., description="Kind of change")
    variable_name: str = Field(default=..., description="Variable the change applies to")
    mode_name: str | None = Field(default=None, description="Mode for UPDATE entries")
    old_value: Any = Field(default=None, description="Remote value before the change")
    new_value: Any = Field(default=None, description="Local value after the change")
    remote_id: str | None = Field(default=None, description="Remote id when the variable exists")
    local_variable: LocalVariable | None = Field(
        default=None, description="Local definition for ADD and UPDATE entries"
    )

    model_config = {"frozen": True}


class DiffSummary(BaseModel):
    """Per-type change counts."""

    add: int = Field(default=0, ge=0)
    update: int = Field(default=0, ge=0)
    delete: int = Field(default=0, ge=0)
    unchanged: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.add + self.update + self.delete + self.unchanged

    @classmethod
    def from_changes(cls, changes: list[Change]) -> "DiffSummary":
        counts = {change_type.value: 0 for change_type in ChangeType}
        for change in changes:
            counts[change.type.value] += 1
        return cls(**counts)


class ModeResolution(BaseModel):
    """Modes that must be created or removed remotely."""

    modes_to_add: list[str] = Field(default_factory=list)
    modes_to_remove: list[str] = Field(default_factory=list)


class SyncDiff(BaseModel):
    """Result of one reconciliation pass."""

    collection_name: str = Field(default=..., description="Collection that was compared")
    collection_id: str | None = Field(
        default=None, description="Remote collection id, None before the first sync"
    )
    modes_to_add: list[str] = Field(default_factory=list, description="Modes missing remotely")
    modes_to_remove: list[str] = Field(
        default_factory=list,
        description="Remote modes unused locally; empty unless include_deletes is set",
    )
    changes: list[Change] = Field(default_factory=list, description="All changes in order")
    summary: DiffSummary = Field(default_factory=DiffSummary, description="Counts per type")

    @property
    def has_changes(self) -> bool:
        """Check if anything would be applied, mode removals included."""
        return bool(
            self.summary.add
            or self.summary.update
            or self.summary.delete
            or self.modes_to_add
            or self.modes_to_remove
        )

    @property
    def pending_changes(self) -> list[Change]:
        """Changes an apply step has to perform."""
        return [change for change in self.changes if change.type != ChangeType.UNCHANGED]

    def changes_of(self, change_type: ChangeType) -> list[Change]:
        return [change for change in self.changes if change.type == change_type]


class ApplyRequest(BaseModel):
    """Payload handed to the collaborator that writes to the remote store."""

    collection_name: str = Field(default=..., description="Target collection name")
    collection_id: str | None = Field(default=None, description="Target collection id")
    changes: list[Change] = Field(default_factory=list, description="Changes to apply")
    modes_to_add: list[str] = Field(default_factory=list)
    modes_to_remove: list[str] = Field(default_factory=list)
    sync_scopes: bool = Field(default=True, description="Publish variable scopes as well")


class SyncResult(BaseModel):
    """Outcome reported back by the apply collaborator."""

    success: bool = Field(default=..., description="Whether the apply step succeeded")
    collection_name: str = Field(default=..., description="Collection that was written")
    created: int = Field(default=0, ge=0, description="Variables created")
    updated: int = Field(default=0, ge=0, description="Variables updated")
    deleted: int = Field(default=0, ge=0, description="Variables deleted")
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
