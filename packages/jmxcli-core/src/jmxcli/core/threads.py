"""Thread dumps and deadlock detection against a remote endpoint.

The endpoint's capability level is probed once, when a
:class:`ThreadMonitor` is constructed:

* If the threading object exposes ``findDeadlockedThreads`` the endpoint
  supports synchronizer introspection (FULL).  Monitor and synchronizer
  usage support are then queried as well.
* Otherwise only the monitor-based deadlock finder exists and no lock
  detail can be dumped (BASIC).

Every later call branches on that fixed :class:`Capabilities` value.
"""

from __future__ import annotations

import logging
from typing import Optional

from jmxcli.bridge.errors import JmxError
from jmxcli.bridge.transport import THREADING_OBJECT_NAME, Connection, ThreadIntrospection
from jmxcli.bridge.types import ObjectName

from jmxcli.core.errors import IntrospectionError
from jmxcli.core.types.threads import Capabilities, CapabilityMode, DeadlockReport, ThreadDump

logger = logging.getLogger(__name__)

FIND_DEADLOCKS_OPERATION = "findDeadlockedThreads"


def probe_capabilities(connection: Connection, threads: ThreadIntrospection) -> Capabilities:
    """Determine what lock detail the endpoint can report.

    Raises
    ------
    IntrospectionError
        If the threading object's metadata or capability flags cannot be read.
    """
    try:
        metadata = connection.get_metadata(ObjectName.parse(THREADING_OBJECT_NAME))
    except JmxError as exc:
        raise IntrospectionError(
            f"Could not read metadata of {THREADING_OBJECT_NAME}: {exc}"
        ) from exc

    if not metadata.has_operation(FIND_DEADLOCKS_OPERATION):
        logger.info(
            "%s lacks %s; falling back to monitor-only deadlock detection",
            THREADING_OBJECT_NAME, FIND_DEADLOCKS_OPERATION,
        )
        return Capabilities(mode=CapabilityMode.BASIC)

    try:
        return Capabilities(
            mode=CapabilityMode.FULL,
            object_monitor_usage=threads.is_object_monitor_usage_supported(),
            synchronizer_usage=threads.is_synchronizer_usage_supported(),
        )
    except JmxError as exc:
        raise IntrospectionError(f"Could not query lock usage support: {exc}") from exc


class ThreadMonitor:
    """Dumps remote threads and scans them for deadlocks.

    Usage::

        monitor = ThreadMonitor(connection)
        print(monitor.thread_dump().render())
        report = monitor.find_deadlock()
        if report:
            print(report.render())
    """

    def __init__(
        self,
        connection: Connection,
        capabilities: Optional[Capabilities] = None,
    ) -> None:
        self._threads = connection.thread_introspection()
        self._capabilities = capabilities or probe_capabilities(connection, self._threads)
        logger.debug("Thread introspection capabilities: %s", self._capabilities)

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    def thread_dump(self) -> ThreadDump:
        """Capture every live thread.

        Locked monitors and synchronizers are included when the endpoint
        supports both; otherwise a plain dump is taken.  Transport errors
        propagate and abort this dump only.
        """
        if self._capabilities.can_dump_locks:
            infos = self._threads.dump_all_threads(True, True)
            return ThreadDump(threads=infos, with_locks=True)

        ids = self._threads.all_thread_ids()
        infos = self._threads.get_thread_info(ids)
        return ThreadDump(threads=infos, with_locks=False)

    def find_deadlock(self) -> DeadlockReport:
        """Look for a deadlock cycle.

        The report is truthy when threads are deadlocked.  Synchronizer
        detail is included only when the endpoint can report it.
        Transport errors propagate and abort this scan only.
        """
        if self._capabilities.can_find_synchronizer_deadlocks:
            ids = self._threads.find_deadlocked_threads()
            if not ids:
                return DeadlockReport()
            infos = self._threads.get_thread_info(
                ids, locked_monitors=True, locked_synchronizers=True
            )
            logger.warning("Deadlock detected among %d thread(s)", len(infos))
            return DeadlockReport(threads=infos, with_synchronizers=True)

        ids = self._threads.find_monitor_deadlocked_threads()
        if not ids:
            return DeadlockReport()
        infos = self._threads.get_thread_info(ids)
        logger.warning("Monitor deadlock detected among %d thread(s)", len(infos))
        return DeadlockReport(threads=infos, with_synchronizers=False)
