"""Attribute value reading, including one level of composite nesting."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List

from jmxcli.bridge.errors import AttributeNotFoundError, JmxError
from jmxcli.bridge.transport import Connection
from jmxcli.bridge.types import ObjectName

from jmxcli.core.errors import NotCompositeError
from jmxcli.core.render import fields_of, is_composite, render_value
from jmxcli.core.types.results import AttributeReading

logger = logging.getLogger(__name__)

COMPOSITE_ATTRIBUTE_DELIMITER = "."


class AttributeReader:
    """Reads and renders attribute values of managed objects.

    A path ``Attr`` reads the attribute directly; ``Attr.field`` reads the
    composite attribute ``Attr`` and selects its ``field``.
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def read_raw(self, object_name: str, path: str) -> Any:
        """Return the unrendered value at *path* on *object_name*.

        Raises
        ------
        AttributeNotFoundError
            If the attribute, or the selected field, does not exist.
        NotCompositeError
            If *path* selects a field of a non-composite value, or nests
            deeper than one level.
        MalformedObjectNameError
            If *object_name* cannot be parsed.
        TransportError
            If the endpoint cannot be reached.
        """
        name = ObjectName.parse(object_name)
        segments = path.split(COMPOSITE_ATTRIBUTE_DELIMITER)

        if len(segments) == 1:
            return self._get(name, object_name, path)

        if len(segments) > 2:
            raise NotCompositeError(
                f"Only one level of composite nesting is supported: {path}",
                path=path,
            )

        attribute, field_name = segments
        raw = self._get(name, object_name, attribute)
        if not is_composite(raw):
            raise NotCompositeError(
                f"The following attribute is not a composite attribute : {path}",
                path=path,
            )

        value = fields_of(raw).get(field_name)
        if value is None:
            raise AttributeNotFoundError(
                f"Attribute ({path}) not found on {object_name}",
                path=path,
                object_name=object_name,
            )
        return value

    def read(self, object_name: str, path: str) -> str:
        """Return the rendered value at *path* on *object_name*.

        Raises the same errors as :meth:`read_raw`.
        """
        return render_value(self.read_raw(object_name, path))

    def read_many(self, object_name: str, paths: Iterable[str]) -> List[AttributeReading]:
        """Read every path, capturing per-path failures instead of raising."""
        readings: List[AttributeReading] = []
        for path in paths:
            try:
                value = self.read(object_name, path)
            except JmxError as exc:
                logger.warning("Could not read %s on %s: %s", path, object_name, exc)
                readings.append(
                    AttributeReading(object_name=object_name, attribute=path, error=exc)
                )
            else:
                readings.append(
                    AttributeReading(object_name=object_name, attribute=path, value=value)
                )
        return readings

    # -- helpers -----------------------------------------------------------

    def _get(self, name: ObjectName, object_name: str, attribute: str) -> Any:
        try:
            return self._connection.get_attribute(name, attribute)
        except AttributeNotFoundError as exc:
            raise AttributeNotFoundError(
                f"Attribute ({attribute}) not found on {object_name}",
                path=attribute,
                object_name=object_name,
            ) from exc
