"""Data models for the token reconciliation engine."""

from tokensync.models.config import AppConfig, LoggingConfig, ReconciliationSettings
from tokensync.models.variable import (
    AliasRef,
    LiteralValue,
    LocalVariable,
    RemoteCollection,
    RemoteMode,
    RemoteModeValue,
    RemoteSnapshot,
    RemoteVariable,
    RGBColor,
    TokenValue,
    VariableType,
)

__all__ = [
    "AliasRef",
    "AppConfig",
    "LiteralValue",
    "LocalVariable",
    "LoggingConfig",
    "ReconciliationSettings",
    "RemoteCollection",
    "RemoteMode",
    "RemoteModeValue",
    "RemoteSnapshot",
    "RemoteVariable",
    "RGBColor",
    "TokenValue",
    "VariableType",
]
