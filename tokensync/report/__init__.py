"""Review output for computed diffs"""

from tokensync.report.diff_formatter import DiffFormatter

__all__ = ["DiffFormatter"]
