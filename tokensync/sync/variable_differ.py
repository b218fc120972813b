"""Per-variable, per-mode comparison of local tokens against remote variables."""

from collections import Counter

import structlog

from tokensync.models.config import ReconciliationSettings
from tokensync.models.variable import LocalVariable, RemoteVariable
from tokensync.sync.comparator import token_values_equal
from tokensync.sync.models import Change, ChangeType

log = structlog.stdlib.get_logger()


def _require_list(value: object, argument: str) -> None:
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"{argument} must be a list, got {type(value).__name__}")


class VariableDiffer:
    """Classifies every local variable as added, updated or unchanged, and
    remote-only variables as deleted when deletions are enabled."""

    def __init__(self, settings: ReconciliationSettings | None = None):
        """
        Initialize the differ.

        Args:
            settings: Settings for this pass (defaults when None)
        """
        self.settings: ReconciliationSettings = settings or ReconciliationSettings()

    def diff(
        self,
        local_variables: list[LocalVariable],
        remote_variables: list[RemoteVariable],
    ) -> list[Change]:
        """
        Compare local variables with remote ones.

        Args:
            local_variables: Variables from the local token store
            remote_variables: Variables currently in the remote collection

        Returns:
            Per-variable changes in local order, followed by DELETE changes in
            remote order

        Raises:
            TypeError: If either argument is not a list
        """
        _require_list(local_variables, "local_variables")
        _require_list(remote_variables, "remote_variables")

        log.info(
            "diffing_variables",
            local_count=len(local_variables),
            remote_count=len(remote_variables),
            deletes_enabled=self.settings.deletes_enabled,
        )

        remote_index = self._index_remote(remote_variables)
        self._warn_on_duplicate_local_names(local_variables)

        changes: list[Change] = []
        for local_variable in local_variables:
            remote_variable = remote_index.get(local_variable.name)
            if remote_variable is None:
                changes.append(
                    Change(
                        type=ChangeType.ADD,
                        variable_name=local_variable.name,
                        new_value=dict(local_variable.mode_values),
                        local_variable=local_variable,
                    )
                )
                continue

            changes.extend(self.compare_variable(local_variable, remote_variable))

        if self.settings.deletes_enabled:
            changes.extend(self.detect_deleted(local_variables, remote_variables))

        log.info(
            "variables_diffed",
            change_count=len(changes),
            updates=sum(1 for c in changes if c.type == ChangeType.UPDATE),
        )
        return changes

    def compare_variable(
        self, local_variable: LocalVariable, remote_variable: RemoteVariable
    ) -> list[Change]:
        """
        Compare one variable mode by mode.

        Args:
            local_variable: Local definition
            remote_variable: Remote variable with the same name

        Returns:
            One UPDATE per changed mode, or a single UNCHANGED entry
        """
        updates: list[Change] = []

        for mode_name in local_variable.mode_values:
            new_value = local_variable.resolve(mode_name)

            if not remote_variable.has_mode(mode_name):
                old_value = None
            else:
                old_value = remote_variable.resolve(mode_name)
                if token_values_equal(
                    old_value,
                    new_value,
                    tolerance=self.settings.color_tolerance,
                    compare_alpha=self.settings.compare_alpha,
                ):
                    continue

            updates.append(
                Change(
                    type=ChangeType.UPDATE,
                    variable_name=local_variable.name,
                    mode_name=mode_name,
                    old_value=old_value,
                    new_value=new_value,
                    remote_id=remote_variable.id,
                    local_variable=local_variable,
                )
            )

        if updates:
            log.debug(
                "variable_modified_detected",
                variable_name=local_variable.name,
                modes=[change.mode_name for change in updates],
            )
            return updates

        return [
            Change(
                type=ChangeType.UNCHANGED,
                variable_name=local_variable.name,
                remote_id=remote_variable.id,
            )
        ]

    def detect_deleted(
        self,
        local_variables: list[LocalVariable],
        remote_variables: list[RemoteVariable],
    ) -> list[Change]:
        """
        DELETE changes for remote variables with no local counterpart.

        This ignores the settings gate; ``diff`` only calls it when deletions
        are enabled.
        """
        local_names = {variable.name for variable in local_variables}
        deleted = [
            Change(
                type=ChangeType.DELETE,
                variable_name=remote_variable.name,
                old_value=remote_variable.values_by_mode(),
                remote_id=remote_variable.id,
            )
            for remote_variable in remote_variables
            if remote_variable.name not in local_names
        ]

        log.info("deleted_variables_detected", count=len(deleted))
        return deleted

    def _index_remote(self, remote_variables: list[RemoteVariable]) -> dict[str, RemoteVariable]:
        index: dict[str, RemoteVariable] = {}
        for remote_variable in remote_variables:
            if remote_variable.name in index:
                # Last write wins
                log.warning(
                    "duplicate_remote_variable_name",
                    variable_name=remote_variable.name,
                    kept_id=remote_variable.id,
                    dropped_id=index[remote_variable.name].id,
                )
            index[remote_variable.name] = remote_variable
        return index

    def _warn_on_duplicate_local_names(self, local_variables: list[LocalVariable]) -> None:
        counts = Counter(variable.name for variable in local_variables)
        duplicates = sorted(name for name, count in counts.items() if count > 1)
        if duplicates:
            log.warning("duplicate_local_variable_names", names=duplicates)
