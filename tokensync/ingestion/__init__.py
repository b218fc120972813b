"""Loading of reconciliation inputs"""

from tokensync.ingestion.snapshot_loader import SnapshotError, SnapshotLoader

__all__ = ["SnapshotError", "SnapshotLoader"]
