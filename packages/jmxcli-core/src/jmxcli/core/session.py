"""Session: owns the single connection to a management endpoint."""

from __future__ import annotations

import logging
from typing import Optional

from jmxcli.bridge.errors import JmxError, TransportError
from jmxcli.bridge.transport import Connection, Connector, create_connector

from jmxcli.core.types.config import ConnectionConfig

logger = logging.getLogger(__name__)


class Session:
    """Scoped ownership of one logical connection.

    ``connect()`` is idempotent and ``close()`` may be called any number of
    times.  As a context manager the connection is released on every exit
    path, including errors.

    Usage::

        with Session(ConnectionConfig(host="db01", port=8778)) as session:
            conn = session.connect()
    """

    def __init__(
        self,
        config: ConnectionConfig,
        connector: Optional[Connector] = None,
    ) -> None:
        self.config = config
        self._connector = connector or create_connector(
            config.transport,
            scheme=config.scheme,
            path=config.path,
            timeout=config.timeout,
        )
        self._connection: Optional[Connection] = None

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            raise TransportError(
                f"Not connected to {self.config.host}:{self.config.port}. Call connect() first."
            )
        return self._connection

    def connect(self) -> Connection:
        """Open the connection, or return it if it is already open.

        Raises
        ------
        TransportError
            If the endpoint cannot be reached.
        """
        if self._connection is not None:
            return self._connection

        self._connection = self._connector.connect(
            self.config.host, self.config.port, self.config.credentials
        )
        logger.info(
            "Connected to %s:%d (%s)",
            self.config.host, self.config.port, self._connection.connection_id,
        )
        return self._connection

    def close(self) -> None:
        """Close the connection if one is open."""
        connection, self._connection = self._connection, None
        if connection is None:
            return
        try:
            connection.close()
        except JmxError as exc:
            logger.warning("Could not close connection %s: %s", connection.connection_id, exc)

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
