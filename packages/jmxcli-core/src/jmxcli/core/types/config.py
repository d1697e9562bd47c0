from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, field_validator

from jmxcli.bridge.types import Credentials


def parse_host_port(value: str) -> Tuple[str, int]:
    """Split ``host:port`` into its parts.

    Raises ``ValueError`` when either part is missing or the port is not a
    number.
    """
    parts = value.split(":")
    if len(parts) != 2:
        raise ValueError(f"Could not parse hostname and port from {value!r}")
    host, port = parts[0].strip(), parts[1].strip()
    if not host:
        raise ValueError(f"Could not parse host from {value!r}")
    if not port.isdigit():
        raise ValueError(f"Could not parse port from {value!r}")
    return host, int(port)


def parse_auth(value: Optional[str]) -> Optional[Credentials]:
    """Turn ``username:password`` into :class:`Credentials`.

    Blank input or input without a ``:`` yields ``None``.  Only the first
    ``:`` separates, so passwords may contain colons.
    """
    if value is None or not value.strip():
        return None
    username, sep, password = value.partition(":")
    if not sep:
        return None
    return Credentials(username=username, password=password)


class ConnectionConfig(BaseModel):
    """Where and how to reach the management endpoint."""

    host: str = "localhost"
    port: int = 8778
    username: Optional[str] = None
    password: Optional[str] = None
    transport: str = "jolokia"
    scheme: str = "http"
    path: str = "/jolokia"
    timeout: float = 10.0

    @field_validator("port")
    @classmethod
    def _port_in_range(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {value}")
        return value

    @property
    def credentials(self) -> Optional[Credentials]:
        if self.username is None:
            return None
        return Credentials(username=self.username, password=self.password or "")

    @classmethod
    def from_address(cls, address: str, auth: Optional[str] = None, **kwargs) -> ConnectionConfig:
        """Build a config from ``host:port`` and optional ``user:pass`` strings."""
        host, port = parse_host_port(address)
        creds = parse_auth(auth)
        if creds is not None:
            kwargs.setdefault("username", creds.username)
            kwargs.setdefault("password", creds.password)
        return cls(host=host, port=port, **kwargs)


class PollConfig(BaseModel):
    """Polling cadence used by drivers that repeat attribute reads."""

    interval: float = 10.0
    count: int = 1  # 0 repeats until interrupted

    @field_validator("interval")
    @classmethod
    def _interval_not_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("interval must be >= 0")
        return value

    @field_validator("count")
    @classmethod
    def _count_not_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("count must be >= 0")
        return value


class JmxCliConfig(BaseModel):
    """Top-level jmxcli configuration."""

    connection: ConnectionConfig = ConnectionConfig()
    poll: PollConfig = PollConfig()
    verbose: bool = False


def load_config(path: Optional[str] = None) -> JmxCliConfig:
    """Load configuration from a jmxcli.toml file, falling back to defaults.

    Uses ``tomllib`` on Python 3.11+ and ``tomli`` on older versions.
    """

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib  # type: ignore[no-redef]

    config_path = Path(path) if path else Path("jmxcli.toml")

    if not config_path.exists():
        return JmxCliConfig()

    with open(config_path, "rb") as f:
        raw = tomllib.load(f)

    return JmxCliConfig(**raw)
