"""Loading engine contract.

The façade only ever talks to an engine through this interface:
`load()` for named units, `script()` / `module()` for inline source,
`options` and `source_map_info()` for read-only inspection.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Mapping

from codeloader.core.types import CodeUnit, Goal, SourceMapInfo
from codeloader.libs.hooks.hook_set import ResolvedHooks
from codeloader.libs.registry.module_registry import ModuleRegistry


class BaseEngine(ABC):
    """Abstract base for loading engines.

    Subclasses receive the resolved hooks and the registry at construction
    and must implement the four operations below.
    """

    def __init__(
        self,
        settings: Any,
        hooks: ResolvedHooks,
        registry: ModuleRegistry,
        **_: Any,
    ) -> None:
        self.settings = settings
        self.hooks = hooks
        self.registry = registry
        options = getattr(getattr(settings, "loader", None), "options", None) or {}
        self._options: Mapping[str, Any] = MappingProxyType(dict(options))

    @property
    def options(self) -> Mapping[str, Any]:
        """Read-only engine options bag."""
        return self._options

    @abstractmethod
    async def load(
        self,
        name: str,
        referrer_name: str | None,
        address: str | None,
        goal: Goal | str,
    ) -> CodeUnit:
        """Normalize, fetch, translate, instantiate and evaluate one named unit."""

    @abstractmethod
    async def script(
        self,
        source: str,
        name: str | None,
        referrer_name: str | None,
        address: str | None,
    ) -> Any:
        """Evaluate inline source under the script goal and return its value."""

    @abstractmethod
    async def module(
        self,
        source: str,
        name: str | None,
        referrer_name: str | None,
        address: str | None,
    ) -> Any:
        """Evaluate inline source under the module goal and return its namespace."""

    @abstractmethod
    def source_map_info(self, normalized_name: str, goal: Goal | str) -> SourceMapInfo | None:
        """Return source map details recorded for a loaded unit, if any."""
