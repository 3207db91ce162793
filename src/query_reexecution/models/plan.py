"""
Compiled plan snapshots handed to plugins between attempts.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class PlanSnapshot(BaseModel):
    """
    Read-only view of a compiled execution plan.

    The orchestrator passes the previous and the freshly compiled snapshot to
    every plugin's after-compile vote. Plugins compare ``fingerprint`` values
    to tell whether recompilation changed the plan shape; ``payload`` is the
    engine's own plan handle and is never inspected by this package.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    query_id: Optional[str] = Field(default=None, description="Query the plan was compiled for")
    fingerprint: str = Field(..., min_length=1, description="Stable identity of the plan shape")
    settings: Mapping[str, str] = Field(
        default_factory=dict,
        description="Settings overlay the plan was compiled with (read-only)",
    )
    payload: Any = Field(default=None, description="Opaque engine plan handle")

    @field_validator("settings", mode="after")
    @classmethod
    def freeze_settings(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        """Copy into a read-only mapping so callers' dicts and plugins cannot alter it."""
        return MappingProxyType(dict(value))

    @field_serializer("settings")
    def serialize_settings(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    def same_shape(self, other: "PlanSnapshot") -> bool:
        """True when both snapshots describe the same plan shape."""
        return self.fingerprint == other.fingerprint
