"""Public loader façade.

`CodeLoader` is the only entry point callers need: single and batch imports,
script loading, inline evaluation, alias maps and registration. Every
operation delegates to the engine or the registry; failures from either are
surfaced unchanged.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, Mapping, Sequence

from codeloader.core.errors import HookConfigurationError
from codeloader.core.settings import Settings
from codeloader.core.types import Goal, LoadReferrer, SourceMapInfo
from codeloader.libs.engine.base_engine import BaseEngine
from codeloader.libs.engine.engine_factory import EngineFactory
from codeloader.libs.hooks.hook_set import HookSet, ResolvedHooks, resolve_hooks
from codeloader.libs.registry.module_registry import ModuleFactory, ModuleRegistry
from codeloader.loader.semver import semver_map
from codeloader.observability.logger import get_logger
from codeloader.version import __version__

MODULE_NAME = f"codeloader@{__version__}/loader/facade"
VERSION = MODULE_NAME[: MODULE_NAME.index("/")]


class CodeLoader:
    """Asynchronous façade over a loading engine and a module registry.

    Args:
        hook_set: Caller-owned hooks. Required; `None` fails immediately.
        settings: Loader settings. Defaults are used when omitted.
        registry: Module registry to register into. A fresh one by default.
        engine: Pre-built engine. Built through `EngineFactory` by default.
    """

    def __init__(
        self,
        hook_set: HookSet,
        *,
        settings: Settings | None = None,
        registry: ModuleRegistry | None = None,
        engine: BaseEngine | None = None,
    ) -> None:
        if hook_set is None:
            raise HookConfigurationError("A HookSet is required to construct a loader")

        self.settings = settings if settings is not None else Settings()
        self.logger = get_logger("facade")

        self._hook_set = hook_set
        self._hooks = resolve_hooks(hook_set, self.settings.fetch)

        if registry is None:
            registry = getattr(engine, "registry", None)
        self._registry = registry if registry is not None else ModuleRegistry()

        if engine is None:
            engine = EngineFactory.create(self.settings, self._hooks, self._registry)
        self._engine = engine

    async def import_module(
        self,
        name: str,
        *,
        referrer_name: str | None = None,
        address: str | None = None,
        referrer: LoadReferrer | None = None,
    ) -> Any:
        """Load `name` under the module goal and return its namespace."""

        context = _referrer_context(referrer_name, address, referrer)

        self.logger.debug("import %s (referrer=%s)", name, context.referrer_name)
        unit = await self._engine.load(name, context.referrer_name, context.address, Goal.MODULE)
        return unit.result

    async def import_all(
        self,
        names: Iterable[str],
        *,
        referrer_name: str | None = None,
        address: str | None = None,
        referrer: LoadReferrer | None = None,
    ) -> list[Any]:
        """Import every name concurrently; results keep the input order.

        The first failure is raised as-is. Imports already in flight are not
        cancelled.
        """

        return await self._gather(
            self.import_module(name, referrer_name=referrer_name, address=address, referrer=referrer)
            for name in names
        )

    async def load_as_script(
        self,
        name: str,
        *,
        referrer_name: str | None = None,
        address: str | None = None,
        referrer: LoadReferrer | None = None,
    ) -> Any:
        """Load `name` under the script goal and return its evaluation result.

        Same as `import_module()` except for the goal. A script may `require()`
        modules, but only ones already registered; anything else is an engine
        error raised during evaluation.
        """

        context = _referrer_context(referrer_name, address, referrer)

        self.logger.debug("load_as_script %s (referrer=%s)", name, context.referrer_name)
        unit = await self._engine.load(name, context.referrer_name, context.address, Goal.SCRIPT)
        return unit.result

    async def load_as_script_all(
        self,
        names: Iterable[str],
        *,
        referrer_name: str | None = None,
        address: str | None = None,
        referrer: LoadReferrer | None = None,
    ) -> list[Any]:
        return await self._gather(
            self.load_as_script(name, referrer_name=referrer_name, address=address, referrer=referrer)
            for name in names
        )

    async def script(
        self,
        source: str,
        *,
        name: str | None = None,
        referrer_name: str | None = None,
        address: str | None = None,
        referrer: LoadReferrer | None = None,
    ) -> Any:
        """Evaluate `source` as a script, like `eval()` but with every hook applied first."""

        context = _referrer_context(referrer_name, address, referrer)
        return await self._engine.script(source, name, context.referrer_name, context.address)

    async def module(
        self,
        source: str,
        *,
        name: str | None = None,
        referrer_name: str | None = None,
        address: str | None = None,
        referrer: LoadReferrer | None = None,
    ) -> Any:
        """Evaluate `source` as a module and return its namespace."""

        context = _referrer_context(referrer_name, address, referrer)
        return await self._engine.module(source, name, context.referrer_name, context.address)

    def semver_map(self, normalized_name: str) -> dict[str, str]:
        return semver_map(normalized_name)

    def register(
        self,
        normalized_name: str,
        dependency_specifiers: Sequence[str],
        factory: ModuleFactory,
    ) -> None:
        self._registry.register(normalized_name, dependency_specifiers, factory)

    def source_map_info(self, normalized_name: str, goal: Goal | str) -> SourceMapInfo | None:
        return self._engine.source_map_info(normalized_name, goal)

    @property
    def version(self) -> str:
        return VERSION

    @property
    def options(self) -> Mapping[str, Any]:
        return self._engine.options

    @property
    def base_url(self) -> str:
        return self._hook_set.base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        # writes through to the caller's HookSet
        self._hook_set.base_url = value

    @property
    def hooks(self) -> ResolvedHooks:
        return self._hooks

    @property
    def registry(self) -> ModuleRegistry:
        return self._registry

    @property
    def engine(self) -> BaseEngine:
        return self._engine

    @staticmethod
    async def _gather(aws: Iterable[Any]) -> list[Any]:
        aws = list(aws)
        if not aws:
            return []
        return list(await asyncio.gather(*aws))


def _referrer_context(
    referrer_name: str | None,
    address: str | None,
    referrer: LoadReferrer | None,
) -> LoadReferrer:
    """Merge the keyword referrer fields and an optional `LoadReferrer`.

    Passing both forms at once is ambiguous and rejected.
    """

    if referrer is None:
        return LoadReferrer(referrer_name=referrer_name, address=address)
    if referrer_name is not None or address is not None:
        raise ValueError("Pass either referrer or referrer_name/address, not both")
    return referrer
