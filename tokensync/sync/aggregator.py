"""Aggregation of changes into a SyncDiff, and the full reconciliation pass."""

import structlog

from tokensync.models.config import ReconciliationSettings
from tokensync.models.variable import LocalVariable, RemoteCollection, RemoteVariable
from tokensync.sync.mode_resolver import resolve_modes
from tokensync.sync.models import Change, DiffSummary, SyncDiff
from tokensync.sync.variable_differ import VariableDiffer

log = structlog.stdlib.get_logger()


def aggregate(
    collection_name: str,
    remote_collection: RemoteCollection | None,
    changes: list[Change],
    modes_to_add: list[str],
    modes_to_remove: list[str],
) -> SyncDiff:
    """
    Build a SyncDiff with per-type counts.

    Args:
        collection_name: Name of the reconciled collection
        remote_collection: Remote collection, or None before the first sync
        changes: Changes from the differ, in order
        modes_to_add: Modes missing remotely
        modes_to_remove: Remote modes to remove, already gated by the caller

    Returns:
        SyncDiff whose summary counts add up to the number of changes
    """
    summary = DiffSummary.from_changes(changes)

    return SyncDiff(
        collection_name=collection_name,
        collection_id=remote_collection.id if remote_collection is not None else None,
        modes_to_add=list(modes_to_add),
        modes_to_remove=list(modes_to_remove),
        changes=list(changes),
        summary=summary,
    )


def calculate_diff(
    collection_name: str,
    local_variables: list[LocalVariable],
    remote_collection: RemoteCollection | None,
    remote_variables: list[RemoteVariable],
    settings: ReconciliationSettings | None = None,
) -> SyncDiff:
    """
    Run one reconciliation pass.

    Mode removals are reported only when ``include_deletes`` is set; an empty
    ``modes_to_remove`` otherwise says nothing about the remote modes.

    Args:
        collection_name: Name of the reconciled collection
        local_variables: Variables from the local token store
        remote_collection: Remote collection, or None before the first sync
        remote_variables: Variables of the remote collection
        settings: Settings for this pass (defaults when None)

    Returns:
        SyncDiff for this pass
    """
    settings = settings or ReconciliationSettings()

    log.info(
        "calculating_diff",
        collection_name=collection_name,
        collection_exists=remote_collection is not None,
        local_count=len(local_variables),
        remote_count=len(remote_variables),
    )

    if settings.has_delete_conflict:
        log.warning(
            "deletes_suppressed_by_preserve_unmanaged",
            collection_name=collection_name,
        )

    if remote_collection is None and remote_variables:
        log.warning(
            "remote_variables_without_collection",
            collection_name=collection_name,
            remote_count=len(remote_variables),
        )

    modes = resolve_modes(local_variables, remote_collection)
    changes = VariableDiffer(settings).diff(local_variables, remote_variables)

    diff = aggregate(
        collection_name,
        remote_collection,
        changes,
        modes.modes_to_add,
        modes.modes_to_remove if settings.include_deletes else [],
    )

    log.info(
        "diff_calculated",
        collection_name=collection_name,
        add=diff.summary.add,
        update=diff.summary.update,
        delete=diff.summary.delete,
        unchanged=diff.summary.unchanged,
        modes_to_add=diff.modes_to_add,
        modes_to_remove=diff.modes_to_remove,
    )
    return diff
