"""Loading of local token lists and remote snapshots from JSON or YAML files."""

import json
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import TypeAdapter, ValidationError

from tokensync.models.variable import LocalVariable, RemoteSnapshot

log = structlog.stdlib.get_logger()

_LOCAL_VARIABLES = TypeAdapter(list[LocalVariable])


class SnapshotError(Exception):
    """Raised when a snapshot file is missing, unreadable or malformed."""

    pass


class SnapshotLoader:
    """Reads the two inputs of a reconciliation pass from disk.

    Files ending in .yaml or .yml are parsed with PyYAML, anything else as JSON.
    Keys may use the camelCase wire spelling or snake_case.
    """

    def load_local_variables(self, path: str | Path) -> list[LocalVariable]:
        """
        Load local variables.

        Args:
            path: File holding a list of variables or ``{"variables": [...]}``

        Returns:
            Parsed local variables in file order

        Raises:
            SnapshotError: If the file cannot be read or validated
        """
        data = self._read(path)
        if isinstance(data, dict):
            data = data.get("variables", [])

        try:
            variables = _LOCAL_VARIABLES.validate_python(data)
        except ValidationError as e:
            log.error("local_variables_invalid", path=str(path), error=str(e))
            raise SnapshotError(f"Invalid local variables in {path}: {e}") from e

        log.info("local_variables_loaded", path=str(path), count=len(variables))
        return variables

    def load_remote_snapshot(self, path: str | Path) -> RemoteSnapshot:
        """
        Load a remote snapshot.

        Args:
            path: File holding ``{"collection": {...} | null, "variables": [...]}``

        Returns:
            RemoteSnapshot with the collection (if any) and its variables

        Raises:
            SnapshotError: If the file cannot be read or validated
        """
        data = self._read(path)
        if data is None:
            data = {}

        try:
            snapshot = RemoteSnapshot.model_validate(data)
        except ValidationError as e:
            log.error("remote_snapshot_invalid", path=str(path), error=str(e))
            raise SnapshotError(f"Invalid remote snapshot in {path}: {e}") from e

        log.info(
            "remote_snapshot_loaded",
            path=str(path),
            collection=snapshot.collection.name if snapshot.collection else None,
            variable_count=len(snapshot.variables),
        )
        return snapshot

    def _read(self, path: str | Path) -> Any:
        file_path = Path(path)
        try:
            text = file_path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise SnapshotError(f"Snapshot file not found: {file_path}") from e
        except OSError as e:
            raise SnapshotError(f"Failed to read snapshot file {file_path}: {e}") from e

        try:
            if file_path.suffix.lower() in (".yaml", ".yml"):
                return yaml.safe_load(text)
            return json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            log.error("snapshot_parse_failed", path=str(file_path), error=str(e))
            raise SnapshotError(f"Failed to parse snapshot file {file_path}: {e}") from e
