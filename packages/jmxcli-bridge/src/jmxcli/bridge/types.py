"""Bridge-level types for the management transport.

Provides enums and dataclasses that map remote management concepts
(object names, attribute metadata, thread snapshots) to clean Python types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .errors import MalformedObjectNameError


class ThreadState(Enum):
    """Lifecycle state of a remote thread."""

    NEW = "NEW"
    RUNNABLE = "RUNNABLE"
    BLOCKED = "BLOCKED"
    WAITING = "WAITING"
    TIMED_WAITING = "TIMED_WAITING"
    TERMINATED = "TERMINATED"


@dataclass(frozen=True)
class Credentials:
    """Username/password pair for a secured endpoint."""

    username: str
    password: str


# -- object names ----------------------------------------------------------


def _split_properties(text: str) -> List[str]:
    """Split a key-property list on commas that are not inside quotes."""
    parts: List[str] = []
    current: List[str] = []
    quoted = False
    escaped = False
    for ch in text:
        if escaped:
            current.append(ch)
            escaped = False
            continue
        if ch == "\\" and quoted:
            current.append(ch)
            escaped = True
            continue
        if ch == '"':
            quoted = not quoted
        if ch == "," and not quoted:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    if quoted:
        raise MalformedObjectNameError(f"Unterminated quoted value in '{text}'")
    parts.append("".join(current))
    return parts


@dataclass(frozen=True)
class ObjectName:
    """Hierarchical identifier of a managed object: ``domain:key=value,...``.

    Equality is structural: two names with the same domain and the same
    key properties are equal regardless of the order the keys were written.
    """

    domain: str
    properties: Tuple[Tuple[str, str], ...] = ()
    property_pattern: bool = False

    @classmethod
    def parse(cls, text: str) -> ObjectName:
        """Parse the textual form of an object name.

        Raises
        ------
        MalformedObjectNameError
            If *text* is not a valid object name or name pattern.
        """
        if text is None:
            raise MalformedObjectNameError("Object name must not be None")
        domain, sep, props = text.partition(":")
        if not sep:
            raise MalformedObjectNameError(f"Missing ':' in object name '{text}'")
        if "\n" in domain:
            raise MalformedObjectNameError(f"Invalid character in domain of '{text}'")
        if not props:
            raise MalformedObjectNameError(f"Missing key properties in '{text}'")

        pairs: List[Tuple[str, str]] = []
        pattern = False
        seen = set()
        for entry in _split_properties(props):
            if entry == "*":
                pattern = True
                continue
            key, eq, value = entry.partition("=")
            if not eq or not key or not value:
                raise MalformedObjectNameError(
                    f"Invalid key property '{entry}' in '{text}'"
                )
            if key in seen:
                raise MalformedObjectNameError(f"Duplicate key '{key}' in '{text}'")
            seen.add(key)
            pairs.append((key, value))
        return cls(domain=domain, properties=tuple(pairs), property_pattern=pattern)

    # -- value semantics ---------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObjectName):
            return NotImplemented
        return (
            self.domain == other.domain
            and dict(self.properties) == dict(other.properties)
            and self.property_pattern == other.property_pattern
        )

    def __hash__(self) -> int:
        return hash((self.domain, frozenset(self.properties), self.property_pattern))

    def __str__(self) -> str:
        entries = [f"{k}={v}" for k, v in self.properties]
        if self.property_pattern:
            entries.append("*")
        return f"{self.domain}:{','.join(entries)}"

    # -- properties --------------------------------------------------------

    @property
    def canonical(self) -> str:
        """Return the name with its keys sorted lexicographically."""
        entries = [f"{k}={v}" for k, v in sorted(self.properties)]
        if self.property_pattern:
            entries.append("*")
        return f"{self.domain}:{','.join(entries)}"

    @property
    def key_property_string(self) -> str:
        """Return the canonical key-property list without the domain."""
        return self.canonical.partition(":")[2]

    @property
    def is_pattern(self) -> bool:
        """Return whether this name matches more than one object."""
        return self.property_pattern or "*" in self.domain or "?" in self.domain

    def get(self, key: str) -> Optional[str]:
        """Return the value of key property *key*, if present."""
        return dict(self.properties).get(key)


# -- metadata --------------------------------------------------------------


@dataclass(frozen=True)
class AttributeDescriptor:
    """Name, declared type, and description of a managed attribute."""

    name: str
    type_name: str
    description: str = ""
    writable: bool = False


@dataclass(frozen=True)
class ObjectMetadata:
    """Attributes and operation names exposed by one managed object."""

    attributes: List[AttributeDescriptor] = field(default_factory=list)
    operations: List[str] = field(default_factory=list)

    def has_operation(self, name: str) -> bool:
        """Return whether an operation called *name* is exposed."""
        return name in self.operations


@dataclass(frozen=True)
class CompositeData:
    """A named-field structure returned as an attribute value.

    Field order is preserved as the endpoint reported it.
    """

    type_name: str
    items: Dict[str, Any] = field(default_factory=dict)

    def fields(self) -> Dict[str, Any]:
        """Return the named fields of this value."""
        return self.items

    def get(self, key: str) -> Any:
        return self.items.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.items

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)


# -- thread introspection --------------------------------------------------


@dataclass(frozen=True)
class StackFrame:
    """One element of a captured call stack."""

    class_name: str
    method_name: str
    file_name: Optional[str] = None
    line_number: int = -1
    native_method: bool = False

    def __str__(self) -> str:
        if self.native_method:
            location = "Native Method"
        elif self.file_name is None:
            location = "Unknown Source"
        elif self.line_number >= 0:
            location = f"{self.file_name}:{self.line_number}"
        else:
            location = self.file_name
        return f"{self.class_name}.{self.method_name}({location})"


@dataclass(frozen=True)
class LockInfo:
    """A lock or ownable synchronizer, identified by class and identity hash."""

    class_name: str
    identity_hash_code: int

    def __str__(self) -> str:
        return f"{self.class_name}@{self.identity_hash_code:x}"


@dataclass(frozen=True)
class MonitorInfo(LockInfo):
    """An object monitor held by a thread.

    ``locked_stack_depth`` is the index of the frame that acquired the
    monitor, or ``-1`` when it was acquired below the captured stack.
    """

    locked_stack_depth: int = -1
    locked_stack_frame: Optional[StackFrame] = None


@dataclass(frozen=True)
class ThreadInfo:
    """Immutable snapshot of one thread at dump time."""

    thread_name: str
    thread_id: int
    thread_state: ThreadState
    lock_name: Optional[str] = None
    lock_owner_name: Optional[str] = None
    lock_owner_id: int = -1
    suspended: bool = False
    in_native: bool = False
    stack_trace: List[StackFrame] = field(default_factory=list)
    locked_monitors: List[MonitorInfo] = field(default_factory=list)
    locked_synchronizers: List[LockInfo] = field(default_factory=list)
