"""Tests for thread dump and deadlock report text."""

from __future__ import annotations

import logging

from jmxcli.bridge.types import LockInfo, MonitorInfo, StackFrame, ThreadInfo, ThreadState
from jmxcli.core.formatting import (
    DEADLOCK_HEADER,
    DUMP_HEADER,
    DUMP_WITH_LOCKS_HEADER,
    format_deadlock_report,
    format_lock_info,
    format_thread_dump,
    format_thread_header,
    format_thread_info,
    monitors_by_depth,
)
from jmxcli.core.types.threads import DeadlockReport, ThreadDump


def _thread(**kwargs):
    defaults = dict(thread_name="worker-1", thread_id=7, thread_state=ThreadState.BLOCKED)
    defaults.update(kwargs)
    return ThreadInfo(**defaults)


class TestThreadHeader:
    def test_plain(self):
        assert format_thread_header(_thread()) == ['"worker-1" Id=7 in BLOCKED']

    def test_thread_info_without_frames(self):
        assert format_thread_info(_thread()) == ['"worker-1" Id=7 in BLOCKED', ""]

    def test_lock_and_owner(self):
        ti = _thread(lock_name="java.lang.Object@ff", lock_owner_name="worker-2", lock_owner_id=8)
        assert format_thread_header(ti) == [
            '"worker-1" Id=7 in BLOCKED on lock=java.lang.Object@ff',
            "     owned by worker-2 Id=8",
        ]

    def test_flags(self):
        ti = _thread(thread_state=ThreadState.RUNNABLE, suspended=True, in_native=True)
        assert format_thread_header(ti) == [
            '"worker-1" Id=7 in RUNNABLE (suspended) (running in native)'
        ]


class TestThreadInfo:
    def test_monitor_inline_under_acquiring_frame(self, deadlocked_threads):
        assert format_thread_info(deadlocked_threads[0]) == [
            '"worker-1" Id=7 in BLOCKED on lock=java.lang.Object@4554617c',
            "     owned by worker-2 Id=8",
            "    at com.example.Transfer.debit(Transfer.java:31)",
            "      - locked java.lang.Object@1b6d3586",
            "    at com.example.Worker.run(Worker.java:12)",
            "",
        ]

    def test_several_monitors_at_one_depth(self):
        frames = [StackFrame("A", "a", "A.java", 1), StackFrame("B", "b", "B.java", 2)]
        monitors = [MonitorInfo("X", 1, locked_stack_depth=1), MonitorInfo("Y", 2, locked_stack_depth=1)]
        lines = format_thread_info(_thread(stack_trace=frames, locked_monitors=monitors))
        assert lines[1:] == [
            "    at A.a(A.java:1)",
            "    at B.b(B.java:2)",
            "      - locked X@1",
            "      - locked Y@2",
            "",
        ]

    def test_orphaned_monitor_not_shown(self, caplog):
        frames = [StackFrame("A", "a", "A.java", 1)]
        monitors = [MonitorInfo("X", 1, locked_stack_depth=5), MonitorInfo("Y", 2)]
        with caplog.at_level(logging.DEBUG, logger="jmxcli.core.formatting"):
            lines = format_thread_info(_thread(stack_trace=frames, locked_monitors=monitors))
        assert not any("locked" in line for line in lines)
        assert "2 monitor(s) outside the captured stack" in caplog.text

    def test_monitors_by_depth(self):
        index = monitors_by_depth([MonitorInfo("X", 1, locked_stack_depth=0)])
        assert [str(m) for m in index[0]] == ["X@1"]
        assert index.get(3) is None


def test_lock_info_section():
    locks = [LockInfo("java.util.concurrent.locks.ReentrantLock$NonfairSync", 0x10)]
    assert format_lock_info(locks) == [
        "    Locked synchronizers: count = 1",
        "      - java.util.concurrent.locks.ReentrantLock$NonfairSync@10",
        "",
    ]


def test_lock_info_empty():
    assert format_lock_info([]) == ["    Locked synchronizers: count = 0", ""]


class TestThreadDump:
    def test_plain_dump(self, idle_thread):
        text = format_thread_dump(ThreadDump(threads=[idle_thread]))
        assert text == "\n".join([
            DUMP_HEADER,
            '"main" Id=1 in RUNNABLE (running in native)',
            "    at java.net.SocketInputStream.socketRead0(Native Method)",
            "    at com.example.Server.main(Server.java:20)",
            "",
        ]) + "\n"

    def test_dump_with_locks(self, deadlocked_threads):
        text = format_thread_dump(ThreadDump(threads=deadlocked_threads, with_locks=True))
        lines = text.split("\n")
        assert lines[0] == DUMP_WITH_LOCKS_HEADER
        assert "    Locked synchronizers: count = 1" in lines
        assert "    Locked synchronizers: count = 0" in lines
        assert text.endswith("\n\n")

    def test_render_delegates(self, idle_thread):
        dump = ThreadDump(threads=[idle_thread])
        assert dump.render() == format_thread_dump(dump)


class TestDeadlockReport:
    def test_empty_report(self):
        report = DeadlockReport()
        assert not report
        assert format_deadlock_report(report) == ""
        assert report.render() == ""

    def test_each_thread_names_the_other_as_owner(self, deadlocked_threads):
        text = format_deadlock_report(DeadlockReport(threads=deadlocked_threads))
        assert text.startswith(DEADLOCK_HEADER + "\n")
        assert "     owned by worker-2 Id=8" in text
        assert "     owned by worker-1 Id=7" in text
        assert "Locked synchronizers" not in text

    def test_with_synchronizers(self, deadlocked_threads):
        report = DeadlockReport(threads=deadlocked_threads, with_synchronizers=True)
        lines = report.render().split("\n")
        assert "    Locked synchronizers: count = 1" in lines
        assert "      - java.util.concurrent.locks.ReentrantLock$NonfairSync@74a14482" in lines
