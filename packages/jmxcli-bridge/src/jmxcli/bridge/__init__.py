"""jmxcli.bridge -- typed access to a remote management endpoint.

This package defines the transport contract the jmxcli core is written
against (:class:`Connector`, :class:`Connection`,
:class:`ThreadIntrospection`), the value types that cross it, and a
Jolokia-backed implementation.

Example::

    from jmxcli.bridge import create_connector

    connector = create_connector("jolokia", timeout=5.0)
    with connector.connect("localhost", 8778) as conn:
        for name in conn.query_names():
            print(name)
"""

from __future__ import annotations

from .errors import (
    AttributeNotFoundError,
    InstanceNotFoundError,
    JmxError,
    MalformedObjectNameError,
    NotFoundError,
    TransportError,
)
from .transport import (
    THREADING_OBJECT_NAME,
    Connection,
    Connector,
    ThreadIntrospection,
    create_connector,
)
from .types import (
    AttributeDescriptor,
    CompositeData,
    Credentials,
    LockInfo,
    MonitorInfo,
    ObjectMetadata,
    ObjectName,
    StackFrame,
    ThreadInfo,
    ThreadState,
)

__all__ = [
    # Transport contract
    "Connector",
    "Connection",
    "ThreadIntrospection",
    "create_connector",
    "THREADING_OBJECT_NAME",
    # Types
    "ObjectName",
    "AttributeDescriptor",
    "ObjectMetadata",
    "CompositeData",
    "Credentials",
    "StackFrame",
    "LockInfo",
    "MonitorInfo",
    "ThreadInfo",
    "ThreadState",
    # Errors
    "JmxError",
    "TransportError",
    "NotFoundError",
    "InstanceNotFoundError",
    "AttributeNotFoundError",
    "MalformedObjectNameError",
]
