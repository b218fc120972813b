"""
Command-line reconciliation of a local token file against a remote snapshot.

Computes the diff only; applying it is left to the remote store adapter.

Usage:
    token-sync LOCAL REMOTE [--config CONFIG_PATH] [--collection NAME]
                            [--include-deletes] [--no-preserve-unmanaged]
                            [--json] [--log-level LEVEL]

Exit codes: 0 when in sync, 1 when changes are pending, 2 on error. With
--include-deletes, remote modes unused locally count as pending changes.
"""

import argparse
import json
import sys
from typing import Any

import structlog

from tokensync.ingestion.snapshot_loader import SnapshotError, SnapshotLoader
from tokensync.report.diff_formatter import DiffFormatter
from tokensync.sync.models import SyncDiff
from tokensync.sync.session import ReconciliationSession
from tokensync.utils.config_loader import ConfigLoader, ConfigurationError
from tokensync.utils.logging_config import configure_logging

log = structlog.stdlib.get_logger()

EXIT_IN_SYNC = 0
EXIT_CHANGES_PENDING = 1
EXIT_ERROR = 2


def run_diff(
    local_path: str,
    remote_path: str,
    config_path: str | None = None,
    collection_name: str | None = None,
    settings_overrides: dict[str, Any] | None = None,
) -> SyncDiff:
    """
    Load configuration and both snapshots, then run one reconciliation pass.

    Args:
        local_path: File with the local variables
        remote_path: File with the remote snapshot
        config_path: Optional path to configuration file
        collection_name: Overrides the collection name from the snapshot or config
        settings_overrides: Reconciliation settings to change for this run

    Returns:
        The computed SyncDiff

    Raises:
        ConfigurationError: If configuration is invalid
        SnapshotError: If a snapshot file cannot be loaded
    """
    config_loader = ConfigLoader()
    config = config_loader.load_config(config_path)
    config_loader.validate_config(config)

    loader = SnapshotLoader()
    local_variables = loader.load_local_variables(local_path)
    snapshot = loader.load_remote_snapshot(remote_path)

    session = ReconciliationSession(config.reconciliation)
    if settings_overrides:
        session.update_settings(**settings_overrides)

    name = collection_name or (
        snapshot.collection.name if snapshot.collection else config.collection_name
    )

    return session.reconcile(name, local_variables, snapshot.collection, snapshot.variables)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare local design tokens with a remote variable collection"
    )
    parser.add_argument("local", type=str, help="Local variables file (JSON or YAML)")
    parser.add_argument("remote", type=str, help="Remote snapshot file (JSON or YAML)")
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration file",
        default=None,
    )
    parser.add_argument(
        "--collection",
        type=str,
        help="Collection name (defaults to the snapshot's collection)",
        default=None,
    )
    parser.add_argument(
        "--include-deletes",
        action="store_true",
        help="Consider remote-only variables for deletion",
    )
    parser.add_argument(
        "--no-preserve-unmanaged",
        action="store_true",
        help="Allow deleting remote variables not managed locally",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the diff as JSON instead of a text report",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(log_level=args.log_level, json_logs=args.json)

    overrides: dict[str, Any] = {}
    if args.include_deletes:
        overrides["include_deletes"] = True
    if args.no_preserve_unmanaged:
        overrides["preserve_unmanaged"] = False

    try:
        diff = run_diff(
            args.local,
            args.remote,
            config_path=args.config,
            collection_name=args.collection,
            settings_overrides=overrides,
        )
    except (ConfigurationError, SnapshotError) as e:
        log.error("token_diff_failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    formatter = DiffFormatter()
    if args.json:
        print(json.dumps(formatter.to_dict(diff), indent=2, ensure_ascii=False))
    else:
        print(formatter.format_diff(diff))

    return EXIT_CHANGES_PENDING if diff.has_changes else EXIT_IN_SYNC


if __name__ == "__main__":
    sys.exit(main())
