"""Caller-owned reconciliation session: settings, remote snapshot cache and last diff."""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import structlog

from tokensync.models.config import ReconciliationSettings
from tokensync.models.variable import LocalVariable, RemoteCollection, RemoteVariable
from tokensync.sync.aggregator import calculate_diff
from tokensync.sync.models import ApplyRequest, SyncDiff, SyncResult

log = structlog.stdlib.get_logger()

LocalVariableProvider = Callable[[str], list[LocalVariable]]


class NoDiffError(Exception):
    """Raised when an apply request is built before any diff was computed."""

    pass


class SyncInProgressError(Exception):
    """Raised when an apply is started while another one is in flight."""

    pass


class ReconciliationSession:
    """Holds the state one operator works with across reconciliation passes.

    A session is a single-writer resource. Passes against the same session must
    be serialized by the caller; ``begin_apply`` refuses a second concurrent
    apply.
    """

    def __init__(self, settings: ReconciliationSettings | None = None):
        """
        Initialize an empty session.

        Args:
            settings: Initial settings (defaults when None)
        """
        self.settings: ReconciliationSettings = settings or ReconciliationSettings()
        self._collections: list[RemoteCollection] = []
        self._variables: dict[str, list[RemoteVariable]] = {}
        self.last_diff: SyncDiff | None = None
        self.last_diff_at: datetime | None = None
        self.in_progress: bool = False

    # Settings

    def update_settings(self, **changes: Any) -> ReconciliationSettings:
        """Merge changes into the current settings and validate the result."""
        merged = {**self.settings.model_dump(), **changes}
        self.settings = ReconciliationSettings.model_validate(merged)
        log.info("reconciliation_settings_updated", **changes)
        return self.settings

    # Remote snapshot cache

    @property
    def remote_collections(self) -> list[RemoteCollection]:
        return list(self._collections)

    def set_remote_collections(self, collections: list[RemoteCollection]) -> None:
        self._collections = list(collections)
        log.info("remote_collections_cached", count=len(self._collections))

    def find_collection(self, collection_id: str) -> RemoteCollection | None:
        for collection in self._collections:
            if collection.id == collection_id:
                return collection
        return None

    def remote_variables(self, collection_id: str) -> list[RemoteVariable]:
        return list(self._variables.get(collection_id, []))

    def set_remote_variables(self, collection_id: str, variables: list[RemoteVariable]) -> None:
        self._variables[collection_id] = list(variables)
        log.info(
            "remote_variables_cached",
            collection_id=collection_id,
            count=len(variables),
        )

    # Reconciliation

    def reconcile(
        self,
        collection_name: str,
        local_variables: list[LocalVariable],
        remote_collection: RemoteCollection | None,
        remote_variables: list[RemoteVariable],
    ) -> SyncDiff:
        """
        Run a pass with the current settings and keep the result as last diff.

        Inputs are copied before the pass, so later mutation by the caller does
        not affect the result.
        """
        diff = calculate_diff(
            collection_name,
            list(local_variables),
            remote_collection,
            list(remote_variables),
            self.settings.model_copy(),
        )
        self.last_diff = diff
        self.last_diff_at = datetime.now(timezone.utc)
        return diff

    def recalculate(
        self, collection_id: str, local_provider: LocalVariableProvider
    ) -> SyncDiff | None:
        """
        Reconcile a cached remote collection against the local variables for it.

        Args:
            collection_id: Id of a collection in the cache
            local_provider: Returns local variables for a collection name

        Returns:
            The new diff, or None (and a cleared slot) if the collection is unknown
        """
        collection = self.find_collection(collection_id)
        if collection is None:
            log.warning("collection_not_cached", collection_id=collection_id)
            self.clear_last_diff()
            return None

        local_variables = local_provider(collection.name)
        return self.reconcile(
            collection.name,
            local_variables,
            collection,
            self.remote_variables(collection_id),
        )

    def clear_last_diff(self) -> None:
        self.last_diff = None
        self.last_diff_at = None

    # Apply hand-off

    def build_apply_request(self) -> ApplyRequest:
        """
        Payload for the apply collaborator built from the last diff.

        Raises:
            NoDiffError: If no diff has been computed
        """
        if self.last_diff is None:
            raise NoDiffError("No diff has been calculated for this session")

        diff = self.last_diff
        return ApplyRequest(
            collection_name=diff.collection_name,
            collection_id=diff.collection_id,
            changes=diff.pending_changes,
            modes_to_add=list(diff.modes_to_add),
            modes_to_remove=list(diff.modes_to_remove),
            sync_scopes=self.settings.sync_scopes,
        )

    def begin_apply(self) -> ApplyRequest:
        """
        Mark an apply as in flight and return its payload.

        Raises:
            SyncInProgressError: If an apply is already in flight
            NoDiffError: If no diff has been computed
        """
        if self.in_progress:
            raise SyncInProgressError("A sync is already in progress for this session")

        request = self.build_apply_request()
        self.in_progress = True
        log.info(
            "sync_apply_started",
            collection_name=request.collection_name,
            change_count=len(request.changes),
            modes_to_add=request.modes_to_add,
        )
        return request

    def record_result(self, result: SyncResult) -> None:
        """Record the apply outcome; a successful apply makes the last diff stale."""
        self.in_progress = False

        if result.success:
            log.info(
                "sync_applied",
                collection_name=result.collection_name,
                created=result.created,
                updated=result.updated,
                deleted=result.deleted,
                warnings=result.warnings,
            )
            self.clear_last_diff()
        else:
            log.error(
                "sync_apply_failed",
                collection_name=result.collection_name,
                errors=result.errors,
            )

    def reset(self) -> None:
        """Back to default settings with empty caches."""
        self.settings = ReconciliationSettings()
        self._collections = []
        self._variables = {}
        self.clear_last_diff()
        self.in_progress = False
        log.info("reconciliation_session_reset")
