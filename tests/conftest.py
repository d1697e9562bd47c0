"""Root conftest: shared fixtures for the entire test suite."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from jmxcli.bridge.errors import AttributeNotFoundError, InstanceNotFoundError
from jmxcli.bridge.transport import THREADING_OBJECT_NAME
from jmxcli.bridge.types import (
    AttributeDescriptor,
    CompositeData,
    LockInfo,
    MonitorInfo,
    ObjectMetadata,
    ObjectName,
    StackFrame,
    ThreadInfo,
    ThreadState,
)

MEMORY = "java.lang:type=Memory"
RUNTIME = "java.lang:type=Runtime"
POOL_A = "com.mchange.v2.c3p0:type=PooledDataSource,identityToken=a1"
POOL_B = "com.mchange.v2.c3p0:type=PooledDataSource,identityToken=b2"


# ---------------------------------------------------------------------------
# Sample attribute values
# ---------------------------------------------------------------------------

@pytest.fixture()
def heap_usage():
    return CompositeData(
        type_name="java.lang.management.MemoryUsage",
        items={"init": 16777216, "used": 42, "committed": 33554432, "max": 268435456},
    )


@pytest.fixture()
def attribute_values(heap_usage):
    """Attribute values keyed by (object name, attribute)."""
    status = CompositeData(type_name="com.example.Status", items={"x": "ready", "code": 0})
    return {
        (MEMORY, "HeapMemoryUsage"): heap_usage,
        (MEMORY, "Verbose"): False,
        (MEMORY, "ObjectPendingFinalizationCount"): 42,
        (RUNTIME, "Status"): status,
        (RUNTIME, "VmName"): "OpenJDK 64-Bit Server VM",
        (RUNTIME, "Uptime"): 123456,
        (POOL_A, "numBusyConnections"): 3,
        (POOL_A, "numIdleConnections"): 7,
        (POOL_B, "numBusyConnections"): 0,
        (POOL_B, "numIdleConnections"): 10,
    }


@pytest.fixture()
def attribute_metadata():
    """Attribute descriptors keyed by object name."""
    pool_attrs = [
        AttributeDescriptor("numBusyConnections", "int", "Busy connections"),
        AttributeDescriptor("numIdleConnections", "int", "Idle connections"),
        AttributeDescriptor("maxPoolSize", "int", "Maximum pool size", writable=True),
    ]
    return {
        MEMORY: ObjectMetadata(
            attributes=[
                AttributeDescriptor("HeapMemoryUsage", "javax.management.openmbean.CompositeData", "Heap usage"),
                AttributeDescriptor("NonHeapMemoryUsage", "javax.management.openmbean.CompositeData", "Non-heap usage"),
                AttributeDescriptor("Verbose", "boolean", "Verbose GC output", writable=True),
                AttributeDescriptor("ObjectPendingFinalizationCount", "int", "Pending finalization"),
            ],
            operations=["gc"],
        ),
        RUNTIME: ObjectMetadata(
            attributes=[
                AttributeDescriptor("Status", "javax.management.openmbean.CompositeData", ""),
                AttributeDescriptor("VmName", "java.lang.String", "VM name"),
                AttributeDescriptor("Uptime", "long", "Uptime in ms"),
            ],
        ),
        POOL_A: ObjectMetadata(attributes=pool_attrs),
        POOL_B: ObjectMetadata(attributes=pool_attrs),
        THREADING_OBJECT_NAME: ObjectMetadata(
            operations=[
                "findDeadlockedThreads",
                "findMonitorDeadlockedThreads",
                "dumpAllThreads",
                "getThreadInfo",
            ],
        ),
    }


# ---------------------------------------------------------------------------
# Thread snapshots
# ---------------------------------------------------------------------------

def _frame(cls, method, line):
    return StackFrame(class_name=cls, method_name=method, file_name=cls.rsplit(".", 1)[-1] + ".java", line_number=line)


@pytest.fixture()
def deadlocked_threads():
    """Two threads each blocked on a monitor held by the other."""
    lock_a = MonitorInfo(class_name="java.lang.Object", identity_hash_code=0x1B6D3586, locked_stack_depth=0)
    lock_b = MonitorInfo(class_name="java.lang.Object", identity_hash_code=0x4554617C, locked_stack_depth=0)
    sync = LockInfo(class_name="java.util.concurrent.locks.ReentrantLock$NonfairSync", identity_hash_code=0x74A14482)
    worker_1 = ThreadInfo(
        thread_name="worker-1",
        thread_id=7,
        thread_state=ThreadState.BLOCKED,
        lock_name=str(lock_b),
        lock_owner_name="worker-2",
        lock_owner_id=8,
        stack_trace=[
            _frame("com.example.Transfer", "debit", 31),
            _frame("com.example.Worker", "run", 12),
        ],
        locked_monitors=[lock_a],
        locked_synchronizers=[sync],
    )
    worker_2 = ThreadInfo(
        thread_name="worker-2",
        thread_id=8,
        thread_state=ThreadState.BLOCKED,
        lock_name=str(lock_a),
        lock_owner_name="worker-1",
        lock_owner_id=7,
        stack_trace=[
            _frame("com.example.Transfer", "credit", 44),
            _frame("com.example.Worker", "run", 12),
        ],
        locked_monitors=[lock_b],
    )
    return [worker_1, worker_2]


@pytest.fixture()
def idle_thread():
    return ThreadInfo(
        thread_name="main",
        thread_id=1,
        thread_state=ThreadState.RUNNABLE,
        in_native=True,
        stack_trace=[
            StackFrame("java.net.SocketInputStream", "socketRead0", native_method=True),
            _frame("com.example.Server", "main", 20),
        ],
    )


# ---------------------------------------------------------------------------
# Mock transport objects
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_thread_introspection(deadlocked_threads, idle_thread):
    """ThreadIntrospection handle reporting a full-capability endpoint, no deadlock."""
    threads = MagicMock(name="ThreadIntrospection")
    everyone = [idle_thread] + deadlocked_threads
    threads.all_thread_ids.return_value = [t.thread_id for t in everyone]
    threads.get_thread_info.return_value = everyone
    threads.dump_all_threads.return_value = everyone
    threads.find_deadlocked_threads.return_value = []
    threads.find_monitor_deadlocked_threads.return_value = []
    threads.is_object_monitor_usage_supported.return_value = True
    threads.is_synchronizer_usage_supported.return_value = True
    return threads


@pytest.fixture()
def mock_connection(attribute_values, attribute_metadata, mock_thread_introspection):
    """Connection backed by the sample values and metadata above."""
    conn = MagicMock(name="Connection")
    conn.connection_id = "mock://localhost:8778"

    conn.query_names.return_value = [
        ObjectName.parse(n) for n in (MEMORY, RUNTIME, POOL_A, POOL_B, THREADING_OBJECT_NAME)
    ]

    def _metadata(name):
        try:
            return attribute_metadata[str(name)]
        except KeyError:
            raise InstanceNotFoundError(f"{name} not registered", object_name=str(name))

    def _attribute(name, attribute):
        key = (str(name), attribute)
        if key not in attribute_values:
            raise AttributeNotFoundError(f"No such attribute: {attribute}", path=attribute)
        return attribute_values[key]

    conn.get_metadata.side_effect = _metadata
    conn.get_attribute.side_effect = _attribute
    conn.thread_introspection.return_value = mock_thread_introspection
    return conn


@pytest.fixture()
def mock_connector(mock_connection):
    connector = MagicMock(name="Connector")
    connector.connect.return_value = mock_connection
    return connector
