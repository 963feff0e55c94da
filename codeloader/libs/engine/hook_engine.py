"""Default engine: runs the resolved hooks in order and evaluates Python source.

Pipeline for a named load:

    normalize -> (registry hit for modules) -> resolve -> fetch
              -> translate -> instantiate -> evaluate

If the instantiate hook returns a value it is used as the result; otherwise
the translated source is evaluated here. An explicit `address` passed to
`load()` is used as the unit's address and the resolve hook is skipped; it is
also handed to normalize as the referrer address. Scripts see a `require(name)`
function that only returns modules already present in the registry.
"""

from __future__ import annotations

import asyncio
import types
from typing import Any, Callable

from codeloader.core.trace import LoadTrace
from codeloader.core.types import CodeUnit, Goal, LoadRecord, SourceMapInfo
from codeloader.libs.engine.base_engine import BaseEngine
from codeloader.observability.logger import get_logger

ANONYMOUS_SCRIPT = "<script>"
ANONYMOUS_MODULE = "<module>"


def _source_length(source: Any) -> int | None:
    return len(source) if isinstance(source, str) else None


class HookEngine(BaseEngine):
    def __init__(self, settings: Any, hooks, registry, **kwargs: Any) -> None:
        super().__init__(settings, hooks, registry, **kwargs)
        self.logger = get_logger("engine")
        self._source_maps: dict[tuple[str, Goal], SourceMapInfo] = {}

        observability = getattr(settings, "observability", None)
        self._trace_file: str | None = None
        if getattr(observability, "trace_enabled", False):
            self._trace_file = getattr(observability, "trace_file", None)

    async def load(self, name, referrer_name, address, goal) -> CodeUnit:
        goal = Goal.parse(goal)
        load = LoadRecord(
            name=name,
            goal=goal,
            referrer_name=referrer_name,
            referrer_address=address,
        )
        trace = LoadTrace(name=name, goal=goal.value, log_file=self._trace_file)
        try:
            return await self._load_named(load, trace)
        except Exception as error:
            trace.record_stage("error", {"type": type(error).__name__, "message": str(error)})
            raise
        finally:
            await self._finish_trace(trace)

    async def script(self, source, name, referrer_name, address) -> Any:
        unit = await self._evaluate_inline(source, name, referrer_name, address, Goal.SCRIPT)
        return unit.result

    async def module(self, source, name, referrer_name, address) -> Any:
        unit = await self._evaluate_inline(source, name, referrer_name, address, Goal.MODULE)
        return unit.result

    def source_map_info(self, normalized_name: str, goal) -> SourceMapInfo | None:
        return self._source_maps.get((normalized_name, Goal.parse(goal)))

    async def _load_named(self, load: LoadRecord, trace: LoadTrace) -> CodeUnit:
        load.normalized_name = await self.hooks.normalize(
            load.name, load.referrer_name, load.referrer_address
        )
        trace.record_stage("normalize", {"normalized_name": load.normalized_name})

        if load.goal is Goal.MODULE and self.registry.is_registered(load.normalized_name):
            self.logger.debug("Using registered module %s", load.normalized_name)
            trace.record_stage("registry", {"hit": True})
            return CodeUnit(
                normalized_name=load.normalized_name,
                goal=load.goal,
                result=self.registry.get(load.normalized_name),
            )

        if load.referrer_address:
            load.address = load.referrer_address
            trace.record_stage("resolve", {"address": load.address, "explicit": True})
        else:
            load.address = await self.hooks.resolve(load)
            trace.record_stage("resolve", {"address": load.address})

        load.source = await self.hooks.fetch(load)
        trace.record_stage("fetch", {"length": _source_length(load.source)})

        return await self._translate_and_evaluate(load, trace)

    async def _evaluate_inline(self, source, name, referrer_name, address, goal: Goal) -> CodeUnit:
        if not isinstance(source, str):
            raise TypeError(f"Source must be a string, got {type(source).__name__}")

        load = LoadRecord(
            name=name or (ANONYMOUS_SCRIPT if goal is Goal.SCRIPT else ANONYMOUS_MODULE),
            goal=goal,
            referrer_name=referrer_name,
            referrer_address=address,
            address=address,
            source=source,
        )
        trace = LoadTrace(name=load.name, goal=goal.value, log_file=self._trace_file)
        try:
            if name:
                load.normalized_name = await self.hooks.normalize(name, referrer_name, address)
            else:
                load.normalized_name = load.name
            trace.record_stage("normalize", {"normalized_name": load.normalized_name})
            return await self._translate_and_evaluate(load, trace)
        except Exception as error:
            trace.record_stage("error", {"type": type(error).__name__, "message": str(error)})
            raise
        finally:
            await self._finish_trace(trace)

    async def _translate_and_evaluate(self, load: LoadRecord, trace: LoadTrace) -> CodeUnit:
        load.source = await self.hooks.translate(load)
        trace.record_stage("translate", {"length": _source_length(load.source)})

        instance = await self.hooks.instantiate(load)
        if instance is not None:
            trace.record_stage("instantiate", {"provided": True})
            result = instance
        else:
            result = self._evaluate(load)
            trace.record_stage("evaluate", {"result_type": type(result).__name__})

        self._source_maps[(load.normalized_name, load.goal)] = SourceMapInfo(
            normalized_name=load.normalized_name,
            goal=load.goal,
            url=load.address,
            source_map=load.metadata.get("source_map"),
        )
        self.logger.debug("Loaded %s as %s", load.normalized_name, load.goal.value)

        return CodeUnit(
            normalized_name=load.normalized_name,
            goal=load.goal,
            result=result,
            address=load.address,
            source=load.source,
        )

    async def _finish_trace(self, trace: LoadTrace) -> None:
        # a trace write never changes the outcome of the load
        try:
            await asyncio.to_thread(trace.finish)
        except OSError as error:
            self.logger.warning("Failed to write trace %s to %s: %s", trace.trace_id, trace.log_file, error)

    def _require_for(self, load: LoadRecord) -> Callable[[str], Any]:
        def require(name: str) -> Any:
            return self.registry.get(name, requested_by=load.normalized_name)

        return require

    def _evaluate(self, load: LoadRecord) -> Any:
        if not isinstance(load.source, str):
            raise TypeError(
                f"Translated source for {load.normalized_name} must be a string, "
                f"got {type(load.source).__name__}"
            )
        filename = load.address or load.normalized_name

        if load.goal is Goal.MODULE:
            module = types.ModuleType(load.normalized_name)
            module.__file__ = filename
            module.require = self._require_for(load)
            exec(compile(load.source, filename, "exec"), module.__dict__)
            return module

        # a single expression evaluates to its value, statements to None
        try:
            code = compile(load.source, filename, "eval")
        except SyntaxError:
            code = compile(load.source, filename, "exec")
        namespace = {"__name__": load.normalized_name, "require": self._require_for(load)}
        return eval(code, namespace)
