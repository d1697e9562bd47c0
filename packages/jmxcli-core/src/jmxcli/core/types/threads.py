from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from jmxcli.bridge.types import ThreadInfo


class CapabilityMode(Enum):
    """How much lock detail the endpoint can report."""

    FULL = "full"
    """Synchronizer and monitor introspection plus the full deadlock finder."""

    BASIC = "basic"
    """Monitor-only deadlock detection, no synchronizer listing."""


@dataclass(frozen=True)
class Capabilities:
    """Capability facts probed once per connection."""

    mode: CapabilityMode
    object_monitor_usage: bool = False
    synchronizer_usage: bool = False

    @property
    def can_dump_locks(self) -> bool:
        return (
            self.mode is CapabilityMode.FULL
            and self.object_monitor_usage
            and self.synchronizer_usage
        )

    @property
    def can_find_synchronizer_deadlocks(self) -> bool:
        return self.mode is CapabilityMode.FULL and self.synchronizer_usage


@dataclass(frozen=True)
class ThreadDump:
    """Every live thread captured by one dump."""

    threads: List[ThreadInfo] = field(default_factory=list)
    with_locks: bool = False

    def render(self) -> str:
        from jmxcli.core.formatting import format_thread_dump

        return format_thread_dump(self)


@dataclass(frozen=True)
class DeadlockReport:
    """Threads forming a deadlock cycle; empty when none was found.

    Truthy exactly when a deadlock was found.
    """

    threads: List[ThreadInfo] = field(default_factory=list)
    with_synchronizers: bool = False

    @property
    def found(self) -> bool:
        return bool(self.threads)

    def __bool__(self) -> bool:
        return self.found

    def render(self) -> str:
        from jmxcli.core.formatting import format_deadlock_report

        return format_deadlock_report(self)
