"""Core data types shared by the loader façade, the engine and the hooks.

Rules:
- `LoadRecord` is the one mutable object passed through every hook
- `CodeUnit` and `SourceMapInfo` are produced by the engine and treated as
  opaque by the façade (except `CodeUnit.result` for scripts)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Goal(str, Enum):
    """Parse target for a unit of source."""

    MODULE = "module"
    SCRIPT = "script"

    @classmethod
    def parse(cls, value: "Goal | str") -> "Goal":
        if isinstance(value, Goal):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Invalid goal {value!r}: expected 'module' or 'script'")


@dataclass(frozen=True)
class LoadReferrer:
    """Who is requesting a load. Passed through to the engine untouched."""

    referrer_name: str | None = None
    address: str | None = None


@dataclass
class LoadRecord:
    """The load object handed to each hook.

    Hooks may fill in `address`, `source` and `metadata`; the engine reads them
    back after each stage.
    """

    name: str
    goal: Goal
    referrer_name: str | None = None
    referrer_address: str | None = None
    normalized_name: str | None = None
    address: str | None = None
    source: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CodeUnit:
    """One fetched, translated and evaluated unit of source."""

    normalized_name: str
    goal: Goal
    result: Any = None
    address: str | None = None
    source: str | None = None


@dataclass(frozen=True)
class SourceMapInfo:
    normalized_name: str
    goal: Goal
    url: str | None = None
    source_map: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "normalized_name": self.normalized_name,
            "goal": self.goal.value,
            "url": self.url,
            "source_map": self.source_map,
        }
