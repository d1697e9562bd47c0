"""Exceptions raised by the jmxcli core on top of the transport errors."""

from __future__ import annotations

from typing import Optional

from jmxcli.bridge.errors import JmxError


class NotCompositeError(JmxError, TypeError):
    """A dotted attribute path was applied to a non-composite value."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class MalformedPatternError(JmxError, ValueError):
    """An object or attribute pattern is not a valid regular expression."""

    def __init__(self, message: str, pattern: Optional[str] = None):
        super().__init__(message)
        self.pattern = pattern


class IntrospectionError(JmxError, RuntimeError):
    """The endpoint's thread-introspection metadata could not be read."""
