"""Adapter-wide settings.

``AdapterSettings`` holds the options that apply to every connection the
adapter manages: table-name quoting, the native type used for primary-key
columns, the SQLSTATE prefix treated as a benign warning, and logging.

Values come from keyword arguments, ``DB2BRIDGE_*`` environment variables
or a ``.env`` file, in that order of precedence.

Examples:
    >>> from db2bridge.core.settings import AdapterSettings
    >>> AdapterSettings(quote_table_names=True).quote_table_names
    True

    $ export DB2BRIDGE_DEFAULT_PRIMARY_KEY_TYPE=BIGINT

Tags:
    settings, configuration, pydantic, environment

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdapterSettings(BaseSettings):
    """Options shared by every connection of one adapter instance.

    Fields
    ──────
    quote_table_names        : Double-quote table names (case-sensitive)
    default_primary_key_type : Native type for primary-key columns
    warning_state_prefix     : SQLSTATE prefix downgraded to an empty result
    log_level                : Structlog log level
    json_logs                : JSON log output (None = auto-detect tty)
    """

    model_config = SettingsConfigDict(
        env_prefix="DB2BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── SQL generation ───────────────────────────────────────────
    quote_table_names: bool = False
    default_primary_key_type: str = "INTEGER"
    warning_state_prefix: str = Field(default="01", min_length=1, max_length=5)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    @field_validator("default_primary_key_type")
    @classmethod
    def _upper_type(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("default_primary_key_type must not be empty")
        return value
