from __future__ import annotations

from jmxcli.core.types.config import (
    ConnectionConfig,
    JmxCliConfig,
    PollConfig,
    load_config,
    parse_auth,
    parse_host_port,
)
from jmxcli.core.types.results import AttributeReading, ResolveResult, TargetResolution
from jmxcli.core.types.threads import (
    Capabilities,
    CapabilityMode,
    DeadlockReport,
    ThreadDump,
)

__all__ = [
    # config
    "ConnectionConfig",
    "JmxCliConfig",
    "PollConfig",
    "load_config",
    "parse_auth",
    "parse_host_port",
    # results
    "AttributeReading",
    "ResolveResult",
    "TargetResolution",
    # threads
    "Capabilities",
    "CapabilityMode",
    "DeadlockReport",
    "ThreadDump",
]
