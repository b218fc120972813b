"""Reconciliation of local design tokens against remote variable collections."""

from tokensync.sync.aggregator import aggregate, calculate_diff
from tokensync.sync.comparator import token_values_equal, values_equal
from tokensync.sync.mode_resolver import DEFAULT_MODE_NAME, resolve_modes, unique_modes
from tokensync.sync.models import (
    ApplyRequest,
    Change,
    ChangeType,
    DiffSummary,
    ModeResolution,
    SyncDiff,
    SyncResult,
)
from tokensync.sync.session import NoDiffError, ReconciliationSession, SyncInProgressError
from tokensync.sync.variable_differ import VariableDiffer

__all__ = [
    "ApplyRequest",
    "Change",
    "ChangeType",
    "DEFAULT_MODE_NAME",
    "DiffSummary",
    "ModeResolution",
    "NoDiffError",
    "ReconciliationSession",
    "SyncDiff",
    "SyncInProgressError",
    "SyncResult",
    "VariableDiffer",
    "aggregate",
    "calculate_diff",
    "resolve_modes",
    "token_values_equal",
    "unique_modes",
    "values_equal",
]
