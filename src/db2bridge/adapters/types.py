"""Connection configuration types."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from db2bridge.core.errors import InvalidConfigError, MissingIdentityError
from db2bridge.core.logging import get_logger

logger = get_logger(__name__)


class MigrateMode(str, Enum):
    """Schema-sync mode requested by the host framework."""

    SAFE = "safe"
    ALTER = "alter"
    DROP = "drop"


@dataclass(frozen=True)
class ConnectionConfig:
    """
    One DB2 data-store configuration.

    ``identity`` is the registry key; every other field has the adapter
    default the host framework expects.
    """

    identity: str = ""

    host: str = "localhost"
    port: int = 50000
    database: str = ""
    user: str | None = None
    password: str | None = None

    ssl: bool = False
    pool: bool = False

    migrate: MigrateMode = MigrateMode.SAFE
    schema: bool = True

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "migrate", MigrateMode(self.migrate))
        except ValueError:
            raise InvalidConfigError("migrate", self.migrate) from None
        port = self.port
        if isinstance(port, str) and port.strip().isdigit():
            # env-style configs carry the port as text
            port = int(port)
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise InvalidConfigError("port", self.port)
        object.__setattr__(self, "port", port)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConnectionConfig:
        """Build from a host-framework connection mapping.

        Keys this adapter does not use (``adapter`` and the like) are
        ignored.

        Raises:
            MissingIdentityError: ``identity`` absent or empty.
            InvalidConfigError: invalid value.
        """
        if not data.get("identity"):
            raise MissingIdentityError()
        known = {f.name for f in fields(cls)}
        ignored = sorted(key for key in data if key not in known)
        if ignored:
            logger.debug("connection_options_ignored", identity=data["identity"], keys=ignored)
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_connection_string(self) -> str:
        """DB2 CLI connection string, keys in fixed order."""
        parts = [
            "DRIVER={DB2}",
            f"DATABASE={self.database}",
            f"HOSTNAME={self.host}",
            f"UID={self.user or ''}",
            f"PWD={self.password or ''}",
            f"PORT={self.port}",
            "PROTOCOL=TCPIP",
        ]
        if self.ssl:
            parts.append("SECURITY=SSL")
        return ";".join(parts)

    def to_safe_dict(self) -> dict[str, Any]:
        """Fields for logging, password redacted."""
        return {
            "identity": self.identity,
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
            "ssl": self.ssl,
            "pool": self.pool,
            "migrate": self.migrate.value,
        }


# Connection defaults advertised to the host framework.
CONNECTION_DEFAULTS: dict[str, Any] = {
    "host": "localhost",
    "port": 50000,
    "schema": True,
    "ssl": False,
    "migrate": MigrateMode.SAFE.value,
}


__all__ = [
    "MigrateMode",
    "ConnectionConfig",
    "CONNECTION_DEFAULTS",
]
