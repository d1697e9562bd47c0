"""Transport contract consumed by the jmxcli core.

A transport opens a :class:`Connection` to a remote management endpoint and
exposes the primitive operations the core builds on: enumerate object
names, read metadata, read attributes, invoke operations, and reach the
endpoint's thread introspection facility.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

from .types import Credentials, ObjectMetadata, ObjectName, ThreadInfo

THREADING_OBJECT_NAME = "java.lang:type=Threading"


@runtime_checkable
class ThreadIntrospection(Protocol):
    """Handle onto the remote thread-management object."""

    def all_thread_ids(self) -> List[int]:
        """Return the ids of every live thread."""
        ...

    def get_thread_info(
        self,
        ids: Sequence[int],
        max_depth: Optional[int] = None,
        locked_monitors: bool = False,
        locked_synchronizers: bool = False,
    ) -> List[ThreadInfo]:
        """Return snapshots for *ids*; threads that have exited are skipped.

        ``max_depth=None`` captures the full stack.
        """
        ...

    def dump_all_threads(
        self, locked_monitors: bool, locked_synchronizers: bool
    ) -> List[ThreadInfo]:
        """Return snapshots of every live thread with optional lock detail."""
        ...

    def find_deadlocked_threads(self) -> List[int]:
        """Return ids of threads deadlocked on monitors or synchronizers."""
        ...

    def find_monitor_deadlocked_threads(self) -> List[int]:
        """Return ids of threads deadlocked on object monitors only."""
        ...

    def is_object_monitor_usage_supported(self) -> bool:
        ...

    def is_synchronizer_usage_supported(self) -> bool:
        ...


@runtime_checkable
class Connection(Protocol):
    """An open session against one management endpoint."""

    @property
    def connection_id(self) -> str:
        """Return an identifier for diagnostics."""
        ...

    def close(self) -> None:
        """Release the session. Calling it twice is harmless."""
        ...

    def query_names(self, pattern: Optional[ObjectName] = None) -> List[ObjectName]:
        """Return names matching *pattern*; ``None`` means every object."""
        ...

    def get_metadata(self, name: ObjectName) -> ObjectMetadata:
        """Return the attribute descriptors and operation names of *name*."""
        ...

    def get_attribute(self, name: ObjectName, attribute: str) -> Any:
        """Return the raw value of *attribute* on *name*."""
        ...

    def invoke(
        self,
        name: ObjectName,
        operation: str,
        *args: Any,
        signature: Optional[Sequence[str]] = None,
    ) -> Any:
        """Invoke *operation* on *name* and return its result."""
        ...

    def thread_introspection(self) -> ThreadIntrospection:
        """Return a handle onto the endpoint's thread-management object."""
        ...


@runtime_checkable
class Connector(Protocol):
    """Factory for :class:`Connection` objects."""

    def connect(
        self, host: str, port: int, credentials: Optional[Credentials] = None
    ) -> Connection:
        """Open a session; raise ``TransportError`` when it cannot be opened."""
        ...


def create_connector(transport: str = "jolokia", **options: Any) -> Connector:
    """Factory that returns the connector registered under *transport*.

    Transport implementations are imported lazily so users only need the
    client library of the transport they use.
    """
    if transport == "jolokia":
        from .jolokia import JolokiaConnector

        return JolokiaConnector(**options)

    raise ValueError(f"Unsupported transport: {transport!r}")
