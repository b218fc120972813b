"""Configuration models for the token reconciliation engine."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReconciliationSettings(BaseModel):
    """Operator settings read by one reconciliation pass."""

    model_config = ConfigDict(extra="forbid")

    include_deletes: bool = Field(
        default=False,
        description="Consider remote variables missing locally for deletion",
    )
    preserve_unmanaged: bool = Field(
        default=True,
        description="Keep remote-only variables even when include_deletes is on",
    )
    sync_scopes: bool = Field(
        default=True, description="Ask the apply step to publish variable scopes"
    )
    color_tolerance: float = Field(
        default=0.001,
        gt=0.0,
        le=0.1,
        description="Per-channel tolerance when comparing colors",
    )
    compare_alpha: bool = Field(
        default=False, description="Include the alpha channel in color comparison"
    )

    @property
    def deletes_enabled(self) -> bool:
        """DELETE changes are emitted only when deletes are on and unmanaged are not kept."""
        return self.include_deletes and not self.preserve_unmanaged

    @property
    def has_delete_conflict(self) -> bool:
        """include_deletes is set but preserve_unmanaged suppresses it."""
        return self.include_deletes and self.preserve_unmanaged


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        description="If True, output JSON logs. If False, use console format.",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional path to log file. If None, logs only to stderr.",
    )


class AppConfig(BaseSettings):
    """Main application configuration.

    Loaded from environment variables with the TOKENSYNC_ prefix, e.g.
    ``TOKENSYNC_RECONCILIATION__INCLUDE_DELETES=true``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOKENSYNC_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    collection_name: str = Field(
        default="Tokens", min_length=1, description="Collection reconciled by default"
    )
    reconciliation: ReconciliationSettings = Field(default_factory=ReconciliationSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
