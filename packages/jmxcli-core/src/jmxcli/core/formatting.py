"""Text rendering of thread snapshots, dumps, and deadlock reports.

The layout mirrors the classic JVM thread dump so existing scripts that
scrape it keep working::

    "worker-1" Id=7 in BLOCKED on lock=java.lang.Object@1b6d3586
         owned by worker-2 Id=8
        at com.example.Worker.run(Worker.java:42)
          - locked java.lang.Object@4554617c

"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Dict, List, Sequence

from jmxcli.bridge.types import LockInfo, MonitorInfo, ThreadInfo

if TYPE_CHECKING:
    from jmxcli.core.types.threads import DeadlockReport, ThreadDump

logger = logging.getLogger(__name__)

INDENT = "    "

DUMP_HEADER = "Full Java thread dump"
DUMP_WITH_LOCKS_HEADER = "Full Java thread dump with locks info"
DEADLOCK_HEADER = "Deadlock found :-"


def format_thread_header(ti: ThreadInfo) -> List[str]:
    """Return the header line, plus the lock-owner line when blocked."""
    header = f'"{ti.thread_name}" Id={ti.thread_id} in {ti.thread_state.value}'
    if ti.lock_name is not None:
        header += f" on lock={ti.lock_name}"
    if ti.suspended:
        header += " (suspended)"
    if ti.in_native:
        header += " (running in native)"
    lines = [header]
    if ti.lock_owner_name is not None:
        lines.append(f"{INDENT} owned by {ti.lock_owner_name} Id={ti.lock_owner_id}")
    return lines


def monitors_by_depth(monitors: Sequence[MonitorInfo]) -> Dict[int, List[MonitorInfo]]:
    """Index monitors by the stack depth that acquired them."""
    index: Dict[int, List[MonitorInfo]] = defaultdict(list)
    for mi in monitors:
        index[mi.locked_stack_depth].append(mi)
    return index


def format_thread_info(ti: ThreadInfo) -> List[str]:
    """Return the header, the stack with inline monitors, and a blank line.

    A monitor is printed under the frame whose index equals its recorded
    acquisition depth.  Monitors whose depth matches no captured frame are
    not printed.
    """
    lines = format_thread_header(ti)
    by_depth = monitors_by_depth(ti.locked_monitors)
    for depth, frame in enumerate(ti.stack_trace):
        lines.append(f"{INDENT}at {frame}")
        for mi in by_depth.get(depth, ()):
            lines.append(f"{INDENT}  - locked {mi}")

    orphaned = sum(
        len(mis) for depth, mis in by_depth.items()
        if not 0 <= depth < len(ti.stack_trace)
    )
    if orphaned:
        logger.debug(
            "Thread %s holds %d monitor(s) outside the captured stack",
            ti.thread_id, orphaned,
        )
    lines.append("")
    return lines


def format_lock_info(locks: Sequence[LockInfo]) -> List[str]:
    """Return the locked-synchronizers section followed by a blank line."""
    lines = [f"{INDENT}Locked synchronizers: count = {len(locks)}"]
    lines.extend(f"{INDENT}  - {li}" for li in locks)
    lines.append("")
    return lines


def format_thread_dump(dump: ThreadDump) -> str:
    if dump.with_locks:
        lines = [DUMP_WITH_LOCKS_HEADER]
        for ti in dump.threads:
            lines.extend(format_thread_info(ti))
            lines.extend(format_lock_info(ti.locked_synchronizers))
        lines.append("")
    else:
        lines = [DUMP_HEADER]
        for ti in dump.threads:
            lines.extend(format_thread_info(ti))
    return "\n".join(lines) + "\n"


def format_deadlock_report(report: DeadlockReport) -> str:
    """Render a deadlock report; an empty report renders as an empty string."""
    if not report:
        return ""
    lines = [DEADLOCK_HEADER]
    for ti in report.threads:
        lines.extend(format_thread_info(ti))
        if report.with_synchronizers:
            lines.extend(format_lock_info(ti.locked_synchronizers))
            lines.append("")
    return "\n".join(lines) + "\n"
