"""Alignment of local mode names with the modes of a remote collection."""

from collections.abc import Sequence

import structlog

from tokensync.models.variable import LocalVariable, RemoteCollection
from tokensync.sync.models import ModeResolution

log = structlog.stdlib.get_logger()

# Seed mode every brand-new remote collection starts with
DEFAULT_MODE_NAME = "Mode 1"


def unique_modes(local_variables: Sequence[LocalVariable]) -> list[str]:
    """Mode names used by any local variable, in first-seen order."""
    modes: dict[str, None] = {}
    for variable in local_variables:
        for mode_name in variable.mode_values:
            modes.setdefault(mode_name, None)
    return list(modes)


def resolve_modes(
    local_variables: Sequence[LocalVariable],
    remote_collection: RemoteCollection | None,
) -> ModeResolution:
    """
    Compute which modes must be added to or removed from the remote collection.

    The seed mode of a new collection is never proposed for removal so a
    collection is not asked to delete its last mode.

    Args:
        local_variables: Variables of this pass
        remote_collection: Remote collection, or None before the first sync

    Returns:
        ModeResolution with modes to add (local order) and remove (remote order)
    """
    local_modes = unique_modes(local_variables)
    remote_modes = remote_collection.mode_names if remote_collection is not None else []

    local_set = set(local_modes)
    remote_set = set(remote_modes)

    modes_to_add = [mode for mode in local_modes if mode not in remote_set]
    modes_to_remove = [
        mode for mode in remote_modes if mode not in local_set and mode != DEFAULT_MODE_NAME
    ]

    log.debug(
        "modes_resolved",
        local_modes=local_modes,
        remote_modes=remote_modes,
        modes_to_add=modes_to_add,
        modes_to_remove=modes_to_remove,
    )

    return ModeResolution(modes_to_add=modes_to_add, modes_to_remove=modes_to_remove)
