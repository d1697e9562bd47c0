"""jmxcli: a remote management client for object discovery, attribute reads and thread dumps."""

from __future__ import annotations

from jmxcli.core.client import JmxClient
from jmxcli.core.errors import IntrospectionError, MalformedPatternError, NotCompositeError
from jmxcli.core.reader import AttributeReader
from jmxcli.core.render import render_value
from jmxcli.core.resolver import AttributeResolver, ObjectResolver
from jmxcli.core.session import Session
from jmxcli.core.threads import ThreadMonitor
from jmxcli.core.types.config import JmxCliConfig, load_config
from jmxcli.core.types.results import AttributeReading, ResolveResult, TargetResolution
from jmxcli.core.types.threads import DeadlockReport, ThreadDump

__all__ = [
    "JmxClient",
    "Session",
    "ObjectResolver",
    "AttributeResolver",
    "AttributeReader",
    "ThreadMonitor",
    "render_value",
    "AttributeReading",
    "ResolveResult",
    "TargetResolution",
    "ThreadDump",
    "DeadlockReport",
    "JmxCliConfig",
    "load_config",
    "NotCompositeError",
    "MalformedPatternError",
    "IntrospectionError",
]
