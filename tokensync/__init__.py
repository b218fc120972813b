"""Reconciliation of local design tokens against remote variable collections."""

__version__ = "0.1.0"
