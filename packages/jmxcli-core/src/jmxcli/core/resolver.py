"""Wildcard resolution of object and attribute names.

A pattern without ``*`` is taken literally and returned unchanged; its
existence is only checked when it is read.  A pattern with ``*`` is a
regular expression that must match the *whole* name.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional, Pattern, Tuple, Union

from jmxcli.bridge.errors import JmxError
from jmxcli.bridge.transport import Connection
from jmxcli.bridge.types import AttributeDescriptor, ObjectName

from jmxcli.core.errors import MalformedPatternError
from jmxcli.core.types.results import ResolveResult

logger = logging.getLogger(__name__)

WILDCARD = "*"


def has_wildcard(pattern: str) -> bool:
    return WILDCARD in pattern


def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile *pattern* as a regular expression.

    Raises
    ------
    MalformedPatternError
        If *pattern* is not a valid regular expression.
    """
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise MalformedPatternError(
            f"Invalid pattern {pattern!r}: {exc}", pattern=pattern
        ) from exc


def match_names(pattern: Union[str, Pattern[str]], names: Iterable[str]) -> List[str]:
    """Return the names that fully match *pattern*, in input order, once each."""
    regex = pattern if isinstance(pattern, re.Pattern) else compile_pattern(pattern)
    matched: List[str] = []
    seen = set()
    for name in names:
        if name not in seen and regex.fullmatch(name):
            matched.append(name)
            seen.add(name)
    return matched


class ObjectResolver:
    """Turns object-name patterns into the names currently registered."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def list_objects(self) -> ResolveResult:
        """Return every object name known to the endpoint."""
        try:
            names = [str(n) for n in self._connection.query_names(None)]
        except JmxError as exc:
            logger.warning("Could not enumerate objects: %s", exc)
            return ResolveResult(pattern=WILDCARD, error=exc)
        return ResolveResult(pattern=WILDCARD, names=names)

    def resolve(self, pattern: str) -> ResolveResult:
        """Resolve *pattern* to concrete object names.

        Never raises; failures are reported through ``ResolveResult.error``.
        """
        if not has_wildcard(pattern):
            return ResolveResult(pattern=pattern, names=[pattern])

        try:
            regex = compile_pattern(pattern)
        except MalformedPatternError as exc:
            logger.warning("%s", exc)
            return ResolveResult(pattern=pattern, error=exc)

        listing = self.list_objects()
        if not listing.ok:
            return ResolveResult(pattern=pattern, error=listing.error)

        names = match_names(regex, listing.names)
        logger.debug("Pattern %r matched %d object(s)", pattern, len(names))
        return ResolveResult(pattern=pattern, names=names)

    def resolve_many(self, patterns: Iterable[str]) -> Dict[str, ResolveResult]:
        """Resolve each pattern independently of the others' failures."""
        return {pattern: self.resolve(pattern) for pattern in patterns}

    def first_match(self, pattern: str) -> Optional[str]:
        """Return the first object matching the name pattern *pattern*.

        Unlike :meth:`resolve`, *pattern* uses object-name pattern syntax
        (``domain:type=Foo,*``) and is evaluated by the endpoint.  Returns
        ``None`` when nothing matches or the query fails.
        """
        try:
            names = self._connection.query_names(ObjectName.parse(pattern))
        except JmxError as exc:
            logger.warning("Could not query %r: %s", pattern, exc)
            return None
        return str(names[0]) if names else None


class AttributeResolver:
    """Turns attribute-name patterns into attributes of one object."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def describe_result(self, object_name: str) -> Tuple[List[AttributeDescriptor], Optional[JmxError]]:
        """Return the attribute descriptors of *object_name* and any error."""
        try:
            metadata = self._connection.get_metadata(ObjectName.parse(object_name))
        except JmxError as exc:
            logger.warning("Could not read metadata of %s: %s", object_name, exc)
            return [], exc
        return list(metadata.attributes), None

    def describe(self, object_name: str) -> List[AttributeDescriptor]:
        """Return the attribute descriptors of *object_name* (empty on failure)."""
        descriptors, _ = self.describe_result(object_name)
        return descriptors

    def resolve(self, object_name: str, pattern: str) -> ResolveResult:
        """Resolve *pattern* to attribute names of *object_name*.

        Never raises; failures are reported through ``ResolveResult.error``.
        """
        if not has_wildcard(pattern):
            return ResolveResult(pattern=pattern, names=[pattern])

        try:
            regex = compile_pattern(pattern)
        except MalformedPatternError as exc:
            logger.warning("%s", exc)
            return ResolveResult(pattern=pattern, error=exc)

        descriptors, error = self.describe_result(object_name)
        if error is not None:
            return ResolveResult(pattern=pattern, error=error)

        names = match_names(regex, (d.name for d in descriptors))
        return ResolveResult(pattern=pattern, names=names)
