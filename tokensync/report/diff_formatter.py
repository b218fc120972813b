"""Plain-text and dict rendering of a SyncDiff for operator review."""

from typing import Any

import structlog

from tokensync.sync.models import Change, ChangeType, SyncDiff
from tokensync.sync.naming import display_name, format_for_display

log = structlog.stdlib.get_logger()

_GROUP_TITLES = {
    ChangeType.ADD: "Add",
    ChangeType.UPDATE: "Update",
    ChangeType.DELETE: "Delete",
}


class DiffFormatter:
    """Formats a SyncDiff for review before it is applied."""

    def __init__(self, max_items_per_group: int = 10) -> None:
        """Initialize the formatter.

        Args:
            max_items_per_group: Changes listed per group before truncating
        """
        if max_items_per_group < 1:
            raise ValueError("max_items_per_group must be at least 1")
        self.max_items_per_group = max_items_per_group

    def format_diff(self, diff: SyncDiff) -> str:
        """Format a diff as readable text.

        Args:
            diff: Diff to format

        Returns:
            Multi-line report grouped by change type
        """
        header = f"Collection: {diff.collection_name}"
        summary = diff.summary

        if not diff.has_changes:
            return "\n".join(
                [header, "Everything is in sync.", f"{summary.unchanged} variable(s) unchanged"]
            )

        lines = [header, self._summary_line(diff)]

        if diff.modes_to_add:
            lines.append(f"\nNew modes ({len(diff.modes_to_add)}):")
            lines.extend(f"  + {mode}" for mode in diff.modes_to_add)

        if diff.modes_to_remove:
            lines.append(f"\nModes to remove ({len(diff.modes_to_remove)}):")
            lines.extend(f"  - {mode}" for mode in diff.modes_to_remove)

        for change_type, title in _GROUP_TITLES.items():
            group = diff.changes_of(change_type)
            if not group:
                continue
            lines.append(f"\n{title} ({len(group)}):")
            for change in group[: self.max_items_per_group]:
                lines.append(f"  {self.format_change(change)}")
            if len(group) > self.max_items_per_group:
                lines.append(f"  ... and {len(group) - self.max_items_per_group} more")

        log.debug("diff_formatted", collection_name=diff.collection_name)
        return "\n".join(lines)

    def format_change(self, change: Change) -> str:
        """One line for a single change."""
        name = display_name(change)

        if change.type == ChangeType.ADD:
            return f"+ {name}: {format_for_display(change.new_value)}"
        if change.type == ChangeType.UPDATE:
            return (
                f"~ {name} [{change.mode_name}]: "
                f"{format_for_display(change.old_value)} -> {format_for_display(change.new_value)}"
            )
        if change.type == ChangeType.DELETE:
            return f"- {name}: {format_for_display(change.old_value)}"
        return f"= {name}"

    def to_dict(self, diff: SyncDiff) -> dict[str, Any]:
        """JSON-serialisable form of a diff, with display strings for values."""
        return {
            "collection_name": diff.collection_name,
            "collection_id": diff.collection_id,
            "modes_to_add": list(diff.modes_to_add),
            "modes_to_remove": list(diff.modes_to_remove),
            "summary": diff.summary.model_dump(),
            "has_changes": diff.has_changes,
            "changes": [
                {
                    "type": change.type.value,
                    "variable_name": change.variable_name,
                    "mode_name": change.mode_name,
                    "old_value": format_for_display(change.old_value),
                    "new_value": format_for_display(change.new_value),
                    "remote_id": change.remote_id,
                }
                for change in diff.changes
            ],
        }

    def _summary_line(self, diff: SyncDiff) -> str:
        summary = diff.summary
        parts = []
        if summary.add:
            parts.append(f"+{summary.add} new")
        if summary.update:
            parts.append(f"~{summary.update} changed")
        if summary.delete:
            parts.append(f"-{summary.delete} deleted")
        if diff.modes_to_add:
            parts.append(f"+{len(diff.modes_to_add)} modes")
        if diff.modes_to_remove:
            parts.append(f"-{len(diff.modes_to_remove)} modes")
        parts.append(f"{summary.unchanged} unchanged")
        return ", ".join(parts)
