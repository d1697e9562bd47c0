from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from jmxcli.bridge.errors import JmxError


class ResolveResult(BaseModel):
    """Concrete names a pattern resolved to.

    ``error`` is set when resolution could not run (unreachable endpoint,
    missing object, malformed pattern); ``names`` is then empty.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    pattern: str
    names: List[str] = []
    error: Optional[JmxError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AttributeReading(BaseModel):
    """One rendered attribute value, or the error that prevented reading it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    object_name: str
    attribute: str
    value: Optional[str] = None
    error: Optional[JmxError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.error is not None:
            return f"{self.attribute}=<{self.error}>"
        return f"{self.attribute}={self.value}"


class TargetResolution(BaseModel):
    """Objects matched by an object pattern and, per object, matched attributes.

    Errors from either stage are kept so the caller can tell an unreachable
    endpoint or a malformed pattern apart from a pattern that matched nothing.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    objects: ResolveResult
    attributes: Dict[str, ResolveResult] = {}

    @property
    def targets(self) -> Dict[str, List[str]]:
        """Map each matched object to its matched attribute names."""
        return {name: result.names for name, result in self.attributes.items()}

    @property
    def errors(self) -> List[JmxError]:
        errors = [self.objects.error] if self.objects.error is not None else []
        errors.extend(r.error for r in self.attributes.values() if r.error is not None)
        return errors

    @property
    def ok(self) -> bool:
        return not self.errors
