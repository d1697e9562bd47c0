"""Typed exceptions raised by management transports."""

from __future__ import annotations

from typing import Optional


class JmxError(Exception):
    """Base exception for every jmxcli failure."""


class TransportError(JmxError, ConnectionError):
    """Connection refused, I/O failure, or use of a closed session.

    Always recoverable: the caller may retry on its next poll cycle.
    """


class NotFoundError(JmxError, LookupError):
    """A named managed object, attribute, or field does not exist."""


class InstanceNotFoundError(NotFoundError):
    """The managed object is not registered on the endpoint."""

    def __init__(self, message: str, object_name: Optional[str] = None):
        super().__init__(message)
        self.object_name = object_name


class AttributeNotFoundError(NotFoundError):
    """The attribute, or the field of a composite attribute, is absent."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        object_name: Optional[str] = None,
    ):
        super().__init__(message)
        self.path = path
        self.object_name = object_name


class MalformedObjectNameError(JmxError, ValueError):
    """Text could not be parsed as an object name."""
