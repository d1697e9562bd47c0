"""Transport over the Jolokia HTTP/JSON agent.

Every primitive is a single JSON ``POST`` against the agent endpoint
(``search``, ``list``, ``read`` and ``exec`` requests).  Agent-side errors
come back inside a ``200`` response with their own ``status`` and
``error_type``; those are mapped onto the bridge exception hierarchy.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from .errors import (
    AttributeNotFoundError,
    InstanceNotFoundError,
    MalformedObjectNameError,
    TransportError,
)
from .transport import THREADING_OBJECT_NAME
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

logger = logging.getLogger(__name__)

_UNBOUNDED_DEPTH = 2**31 - 1
_THREADING = ObjectName.parse(THREADING_OBJECT_NAME)


def _escape_path(segment: str) -> str:
    """Escape a path segment for a Jolokia ``list`` request."""
    return segment.replace("!", "!!").replace("/", "!/").replace('"', '!"')


def decode_value(raw: Any, type_name: str = "CompositeData") -> Any:
    """Turn a JSON value into a bridge value.

    JSON objects become :class:`CompositeData`; arrays keep their order.
    """
    if isinstance(raw, dict):
        return CompositeData(
            type_name=type_name,
            items={key: decode_value(value) for key, value in raw.items()},
        )
    if isinstance(raw, list):
        return [decode_value(item) for item in raw]
    return raw


# -- thread-info decoding --------------------------------------------------


def _stack_frame(data: Mapping[str, Any]) -> StackFrame:
    line = data.get("lineNumber")
    return StackFrame(
        class_name=data.get("className", ""),
        method_name=data.get("methodName", ""),
        file_name=data.get("fileName"),
        line_number=int(line) if line is not None else -1,
        native_method=bool(data.get("nativeMethod", False)),
    )


def _lock_info(data: Mapping[str, Any]) -> LockInfo:
    return LockInfo(
        class_name=data.get("className", ""),
        identity_hash_code=int(data.get("identityHashCode", 0)),
    )


def _monitor_info(data: Mapping[str, Any]) -> MonitorInfo:
    frame = data.get("lockedStackFrame")
    return MonitorInfo(
        class_name=data.get("className", ""),
        identity_hash_code=int(data.get("identityHashCode", 0)),
        locked_stack_depth=int(data.get("lockedStackDepth", -1)),
        locked_stack_frame=_stack_frame(frame) if frame else None,
    )


def thread_info_from_json(data: Mapping[str, Any]) -> ThreadInfo:
    """Convert a serialized ``ThreadInfo`` composite into :class:`ThreadInfo`.

    Raises
    ------
    TransportError
        If the agent reports a thread state this client does not know.
    """
    state = data.get("threadState", "RUNNABLE")
    try:
        thread_state = ThreadState(state)
    except ValueError as exc:
        raise TransportError(
            f"Unknown state {state!r} for thread {data.get('threadName')!r}"
        ) from exc
    return ThreadInfo(
        thread_name=data.get("threadName", ""),
        thread_id=int(data.get("threadId", -1)),
        thread_state=thread_state,
        lock_name=data.get("lockName"),
        lock_owner_name=data.get("lockOwnerName"),
        lock_owner_id=int(data.get("lockOwnerId", -1)),
        suspended=bool(data.get("suspended", False)),
        in_native=bool(data.get("inNative", False)),
        stack_trace=[_stack_frame(f) for f in data.get("stackTrace") or []],
        locked_monitors=[_monitor_info(m) for m in data.get("lockedMonitors") or []],
        locked_synchronizers=[
            _lock_info(s) for s in data.get("lockedSynchronizers") or []
        ],
    )


def _thread_infos(raw: Any) -> List[ThreadInfo]:
    # Entries are null for threads that exited between listing and fetching.
    return [thread_info_from_json(item) for item in raw or [] if item is not None]


# -- connection ------------------------------------------------------------


class JolokiaConnection:
    """An open session against a Jolokia agent."""

    def __init__(self, client: httpx.Client, url: str) -> None:
        self._client = client
        self._url = url
        self._closed = False

    # -- context manager ---------------------------------------------------

    def __enter__(self) -> JolokiaConnection:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()

    # -- properties --------------------------------------------------------

    @property
    def connection_id(self) -> str:
        return self._url

    @property
    def closed(self) -> bool:
        return self._closed

    # -- public API --------------------------------------------------------

    def close(self) -> None:
        if not self._closed:
            self._client.close()
            self._closed = True
            logger.debug("Closed Jolokia connection to %s", self._url)

    def version(self) -> Dict[str, Any]:
        """Return the agent's version information."""
        return self._request({"type": "version"})

    def query_names(self, pattern: Optional[ObjectName] = None) -> List[ObjectName]:
        mbean = str(pattern) if pattern is not None else "*:*"
        raw = self._request({"type": "search", "mbean": mbean})
        names: List[ObjectName] = []
        for text in raw or []:
            try:
                names.append(ObjectName.parse(text))
            except MalformedObjectNameError as exc:
                raise TransportError(
                    f"Endpoint returned an unparseable object name '{text}'"
                ) from exc
        return names

    def get_metadata(self, name: ObjectName) -> ObjectMetadata:
        path = f"{_escape_path(name.domain)}/{_escape_path(name.key_property_string)}"
        raw = self._request({"type": "list", "path": path}, object_name=str(name))
        raw = raw or {}
        attributes = [
            AttributeDescriptor(
                name=attr_name,
                type_name=info.get("type", ""),
                description=info.get("desc", ""),
                writable=bool(info.get("rw", False)),
            )
            for attr_name, info in (raw.get("attr") or {}).items()
        ]
        operations = list((raw.get("op") or {}).keys())
        return ObjectMetadata(attributes=attributes, operations=operations)

    def get_attribute(self, name: ObjectName, attribute: str) -> Any:
        return decode_value(self._read(name, attribute))

    def invoke(
        self,
        name: ObjectName,
        operation: str,
        *args: Any,
        signature: Optional[Sequence[str]] = None,
    ) -> Any:
        return decode_value(self._exec(name, operation, list(args), signature))

    def thread_introspection(self) -> JolokiaThreadIntrospection:
        return JolokiaThreadIntrospection(self)

    # -- helpers -----------------------------------------------------------

    def _read(self, name: ObjectName, attribute: str) -> Any:
        payload = {"type": "read", "mbean": str(name), "attribute": attribute}
        return self._request(payload, object_name=str(name), attribute=attribute)

    def _exec(
        self,
        name: ObjectName,
        operation: str,
        arguments: List[Any],
        signature: Optional[Sequence[str]] = None,
    ) -> Any:
        if signature is not None:
            operation = f"{operation}({','.join(signature)})"
        payload = {
            "type": "exec",
            "mbean": str(name),
            "operation": operation,
            "arguments": arguments,
        }
        return self._request(payload, object_name=str(name))

    def _request(
        self,
        payload: Dict[str, Any],
        object_name: Optional[str] = None,
        attribute: Optional[str] = None,
    ) -> Any:
        """POST one request and return its ``value``.

        Raises
        ------
        TransportError
            On network failure, HTTP error status, or an agent-side error.
        InstanceNotFoundError / AttributeNotFoundError
            When the agent reports the object or attribute missing.
        """
        if self._closed:
            raise TransportError(f"Connection to {self._url} is closed")

        logger.debug("Jolokia %s request: %s", payload["type"], payload)
        try:
            response = self._client.post("", json=payload)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request to {self._url} timed out") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {self._url} failed: {exc}") from exc

        if response.status_code >= 400:
            raise TransportError(
                f"Jolokia agent at {self._url} returned HTTP {response.status_code}"
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(f"Malformed response from {self._url}") from exc

        status = body.get("status", 200)
        if status == 200:
            return body.get("value")

        error_type = body.get("error_type") or ""
        message = body.get("error") or f"Agent error {status}"
        if "AttributeNotFoundException" in error_type:
            raise AttributeNotFoundError(
                message, path=attribute, object_name=object_name
            )
        if "InstanceNotFoundException" in error_type or status == 404:
            raise InstanceNotFoundError(message, object_name=object_name)
        raise TransportError(f"{error_type or 'Agent error'}: {message}")


class JolokiaThreadIntrospection:
    """Thread-management operations executed through a Jolokia connection."""

    def __init__(self, connection: JolokiaConnection) -> None:
        self._connection = connection

    def all_thread_ids(self) -> List[int]:
        raw = self._connection._read(_THREADING, "AllThreadIds")
        return [int(tid) for tid in raw or []]

    def get_thread_info(
        self,
        ids: Sequence[int],
        max_depth: Optional[int] = None,
        locked_monitors: bool = False,
        locked_synchronizers: bool = False,
    ) -> List[ThreadInfo]:
        if locked_monitors or locked_synchronizers:
            raw = self._connection._exec(
                _THREADING,
                "getThreadInfo",
                [list(ids), locked_monitors, locked_synchronizers],
                signature=("[J", "boolean", "boolean"),
            )
        else:
            depth = _UNBOUNDED_DEPTH if max_depth is None else max_depth
            raw = self._connection._exec(
                _THREADING,
                "getThreadInfo",
                [list(ids), depth],
                signature=("[J", "int"),
            )
        return _thread_infos(raw)

    def dump_all_threads(
        self, locked_monitors: bool, locked_synchronizers: bool
    ) -> List[ThreadInfo]:
        raw = self._connection._exec(
            _THREADING,
            "dumpAllThreads",
            [locked_monitors, locked_synchronizers],
            signature=("boolean", "boolean"),
        )
        return _thread_infos(raw)

    def find_deadlocked_threads(self) -> List[int]:
        raw = self._connection._exec(_THREADING, "findDeadlockedThreads", [], ())
        return [int(tid) for tid in raw or []]

    def find_monitor_deadlocked_threads(self) -> List[int]:
        raw = self._connection._exec(_THREADING, "findMonitorDeadlockedThreads", [], ())
        return [int(tid) for tid in raw or []]

    def is_object_monitor_usage_supported(self) -> bool:
        return bool(self._connection._read(_THREADING, "ObjectMonitorUsageSupported"))

    def is_synchronizer_usage_supported(self) -> bool:
        return bool(self._connection._read(_THREADING, "SynchronizerUsageSupported"))


class JolokiaConnector:
    """Opens :class:`JolokiaConnection` sessions.

    Usage::

        connector = JolokiaConnector(timeout=5.0)
        with connector.connect("localhost", 8778) as conn:
            names = conn.query_names()
    """

    def __init__(
        self,
        scheme: str = "http",
        path: str = "/jolokia",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        self.scheme = scheme
        self.path = "/" + path.strip("/") if path.strip("/") else ""
        self.timeout = timeout
        self._transport = transport

    def connect(
        self, host: str, port: int, credentials: Optional[Credentials] = None
    ) -> JolokiaConnection:
        """Open a session and verify the agent answers.

        Raises
        ------
        TransportError
            If the agent cannot be reached or refuses the credentials.
        """
        url = f"{self.scheme}://{host}:{port}{self.path}/"
        auth = (credentials.username, credentials.password) if credentials else None
        client = httpx.Client(
            base_url=url,
            auth=auth,
            timeout=self.timeout,
            transport=self._transport,
        )
        connection = JolokiaConnection(client, url)
        try:
            info = connection.version()
        except TransportError:
            connection.close()
            raise
        logger.info(
            "Connected to Jolokia agent %s at %s",
            (info or {}).get("agent", "?"),
            url,
        )
        return connection
