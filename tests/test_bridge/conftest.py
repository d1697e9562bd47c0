"""Bridge test fixtures: a scripted Jolokia agent behind httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from jmxcli.bridge.jolokia import JolokiaConnector


_THREAD_INFO_JSON = {
    "threadName": "worker-1",
    "threadId": 7,
    "threadState": "BLOCKED",
    "lockName": "java.lang.Object@4554617c",
    "lockOwnerName": "worker-2",
    "lockOwnerId": 8,
    "suspended": False,
    "inNative": False,
    "stackTrace": [
        {
            "className": "com.example.Transfer",
            "methodName": "debit",
            "fileName": "Transfer.java",
            "lineNumber": 31,
            "nativeMethod": False,
        },
        {
            "className": "com.example.Worker",
            "methodName": "run",
            "fileName": "Worker.java",
            "lineNumber": 12,
            "nativeMethod": False,
        },
    ],
    "lockedMonitors": [
        {
            "className": "java.lang.Object",
            "identityHashCode": 459126150,
            "lockedStackDepth": 0,
            "lockedStackFrame": {
                "className": "com.example.Transfer",
                "methodName": "debit",
                "fileName": "Transfer.java",
                "lineNumber": 31,
                "nativeMethod": False,
            },
        }
    ],
    "lockedSynchronizers": [
        {
            "className": "java.util.concurrent.locks.ReentrantLock$NonfairSync",
            "identityHashCode": 1956725890,
        }
    ],
}


class ScriptedAgent:
    """Answers Jolokia requests from a handler and records every payload."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        if payload["type"] == "version":
            return httpx.Response(200, json={"status": 200, "value": {"agent": "1.7.2"}})
        result = self.handler(payload)
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)

    def payloads(self, request_type):
        return [p for p in self.requests if p["type"] == request_type]


@pytest.fixture()
def thread_info_json():
    """A serialized ThreadInfo composite as the agent returns it."""
    return json.loads(json.dumps(_THREAD_INFO_JSON))


@pytest.fixture()
def make_connection():
    """Factory: ``make_connection(handler) -> (connection, agent)``."""
    opened = []

    def _make(handler, **connector_options):
        agent = ScriptedAgent(handler)
        connector = JolokiaConnector(transport=httpx.MockTransport(agent), **connector_options)
        connection = connector.connect("localhost", 8778)
        opened.append(connection)
        return connection, agent

    yield _make

    for connection in opened:
        connection.close()
