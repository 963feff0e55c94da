"""Factory that creates loading engines from settings.

- Registration: engine classes are mapped to names (``hooks`` by default).
- Creation: `settings.loader.engine` picks the class to instantiate.
"""

from __future__ import annotations

from typing import Any

from codeloader.core.errors import EngineNotFoundError
from codeloader.libs.engine.base_engine import BaseEngine
from codeloader.libs.engine.hook_engine import HookEngine
from codeloader.libs.hooks.hook_set import ResolvedHooks
from codeloader.libs.registry.module_registry import ModuleRegistry

DEFAULT_ENGINE = "hooks"


class EngineFactory:
    """Registry-backed engine factory."""

    _ENGINES: dict[str, type[BaseEngine]] = {DEFAULT_ENGINE: HookEngine}

    @classmethod
    def register_engine(cls, name: str, engine_cls: type[BaseEngine]) -> None:
        """Register an engine class.

        Names are lower-cased so settings are case-insensitive.
        """

        normalized_name = name.strip().lower()
        if not normalized_name:
            raise ValueError("Engine name cannot be empty")

        if not isinstance(engine_cls, type) or not issubclass(engine_cls, BaseEngine):
            raise ValueError("Engine class must inherit from BaseEngine")

        cls._ENGINES[normalized_name] = engine_cls

    @classmethod
    def create(
        cls,
        settings: Any,
        hooks: ResolvedHooks,
        registry: ModuleRegistry,
        **kwargs: Any,
    ) -> BaseEngine:
        """Create the engine named by `settings.loader.engine`.

        A missing setting falls back to the default hook engine.
        """

        engine_name = getattr(getattr(settings, "loader", None), "engine", None)
        if not isinstance(engine_name, str) or not engine_name.strip():
            engine_name = DEFAULT_ENGINE

        engine_cls = cls._ENGINES.get(engine_name.strip().lower())
        if engine_cls is None:
            raise EngineNotFoundError(engine_name, cls.list_engines())

        return engine_cls(settings, hooks, registry, **kwargs)

    @classmethod
    def list_engines(cls) -> list[str]:
        return sorted(cls._ENGINES)
