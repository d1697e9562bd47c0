"""JmxClient: top-level orchestrator."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from jmxcli.bridge.errors import JmxError
from jmxcli.bridge.transport import Connection, Connector
from jmxcli.bridge.types import AttributeDescriptor

from jmxcli.core.reader import AttributeReader
from jmxcli.core.resolver import AttributeResolver, ObjectResolver
from jmxcli.core.session import Session
from jmxcli.core.threads import ThreadMonitor
from jmxcli.core.types.config import JmxCliConfig, load_config
from jmxcli.core.types.results import AttributeReading, ResolveResult, TargetResolution
from jmxcli.core.types.threads import DeadlockReport, ThreadDump

logger = logging.getLogger(__name__)


class JmxClient:
    """Top-level entry point for querying a remote management endpoint.

    Usage:
        client = JmxClient()
        client.connect()
        for name in client.list_objects().names:
            print(name)
        client.close()

    Or as a context manager:
        with JmxClient(config) as client:
            print(client.read("java.lang:type=Memory", "HeapMemoryUsage.used"))
    """

    def __init__(
        self,
        config: Optional[JmxCliConfig] = None,
        config_path: Optional[str] = None,
        connector: Optional[Connector] = None,
    ):
        if config is not None:
            self.config = config
        else:
            self.config = load_config(config_path)

        if self.config.verbose:
            logging.basicConfig(level=logging.DEBUG)

        self._session = Session(self.config.connection, connector=connector)
        self._monitor: Optional[ThreadMonitor] = None
        self._monitor_connection: Optional[Connection] = None

    # -- lifecycle ---------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    def connect(self) -> Connection:
        """Open the connection (idempotent)."""
        return self._session.connect()

    def close(self) -> None:
        """Close the connection and forget per-connection state."""
        self._monitor = None
        self._monitor_connection = None
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # -- discovery ---------------------------------------------------------

    def list_objects(self) -> ResolveResult:
        """Return every object name currently registered."""
        try:
            connection = self.connect()
        except JmxError as exc:
            logger.warning("Could not connect: %s", exc)
            return ResolveResult(pattern="*", error=exc)
        return ObjectResolver(connection).list_objects()

    def object_exists(self, pattern: str) -> Optional[str]:
        """Return the first object matching an object-name pattern, if any.

        Returns ``None`` when nothing matches or the endpoint is unreachable.
        """
        try:
            connection = self.connect()
        except JmxError as exc:
            logger.warning("Could not connect: %s", exc)
            return None
        return ObjectResolver(connection).first_match(pattern)

    def find_objects(self, pattern: str) -> ResolveResult:
        """Resolve a possibly wildcarded object pattern."""
        try:
            connection = self.connect()
        except JmxError as exc:
            logger.warning("Could not connect: %s", exc)
            return ResolveResult(pattern=pattern, error=exc)
        return ObjectResolver(connection).resolve(pattern)

    def list_attributes(self, object_name: str) -> List[AttributeDescriptor]:
        """Return (name, type, description) descriptors of *object_name*."""
        try:
            connection = self.connect()
        except JmxError as exc:
            logger.warning("Could not connect: %s", exc)
            return []
        return AttributeResolver(connection).describe(object_name)

    def find_attributes(self, object_name: str, pattern: str) -> ResolveResult:
        """Resolve a possibly wildcarded attribute pattern on one object."""
        try:
            connection = self.connect()
        except JmxError as exc:
            logger.warning("Could not connect: %s", exc)
            return ResolveResult(pattern=pattern, error=exc)
        return AttributeResolver(connection).resolve(object_name, pattern)

    def resolve_targets(
        self, object_pattern: str, attribute_pattern: str
    ) -> TargetResolution:
        """Resolve *object_pattern*, then *attribute_pattern* on every match.

        Failures of either stage are kept on the result; ``.targets`` maps
        each object to its attribute names (empty when they could not be
        resolved).
        """
        objects = self.find_objects(object_pattern)
        attributes: Dict[str, ResolveResult] = {}
        for object_name in objects.names:
            attributes[object_name] = self.find_attributes(object_name, attribute_pattern)
        return TargetResolution(objects=objects, attributes=attributes)

    # -- values ------------------------------------------------------------

    def read(self, object_name: str, path: str) -> str:
        """Return the rendered value of *path* on *object_name*.

        Raises ``AttributeNotFoundError``, ``NotCompositeError`` or
        ``TransportError``.
        """
        return AttributeReader(self.connect()).read(object_name, path)

    def read_targets(self, targets: Mapping[str, Iterable[str]]) -> List[AttributeReading]:
        """Read every (object, attribute) pair; failures are captured per reading."""
        try:
            connection = self.connect()
        except JmxError as exc:
            logger.warning("Could not connect: %s", exc)
            return [
                AttributeReading(object_name=obj, attribute=attr, error=exc)
                for obj, attrs in targets.items()
                for attr in attrs
            ]
        reader = AttributeReader(connection)
        readings: List[AttributeReading] = []
        for object_name, attributes in targets.items():
            readings.extend(reader.read_many(object_name, attributes))
        return readings

    # -- threads -----------------------------------------------------------

    def thread_monitor(self) -> ThreadMonitor:
        """Return the thread monitor of the current connection.

        Capabilities are probed on first use and kept until the connection
        is closed.
        """
        connection = self.connect()
        if self._monitor is None or self._monitor_connection is not connection:
            self._monitor = ThreadMonitor(connection)
            self._monitor_connection = connection
        return self._monitor

    def thread_dump(self) -> ThreadDump:
        return self.thread_monitor().thread_dump()

    def find_deadlock(self) -> DeadlockReport:
        return self.thread_monitor().find_deadlock()
