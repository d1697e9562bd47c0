"""Core test fixtures: resolvers and a reader over the mock connection."""

from __future__ import annotations

import pytest

from jmxcli.bridge.transport import THREADING_OBJECT_NAME
from jmxcli.bridge.types import ObjectMetadata
from jmxcli.core.reader import AttributeReader
from jmxcli.core.resolver import AttributeResolver, ObjectResolver


@pytest.fixture()
def object_resolver(mock_connection):
    return ObjectResolver(mock_connection)


@pytest.fixture()
def attribute_resolver(mock_connection):
    return AttributeResolver(mock_connection)


@pytest.fixture()
def reader(mock_connection):
    return AttributeReader(mock_connection)


@pytest.fixture()
def basic_connection(mock_connection, attribute_metadata):
    """Connection whose threading object only offers the monitor deadlock finder."""
    attribute_metadata[THREADING_OBJECT_NAME] = ObjectMetadata(
        operations=["findMonitorDeadlockedThreads", "getThreadInfo"],
    )
    return mock_connection
