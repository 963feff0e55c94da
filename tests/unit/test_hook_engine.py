"""Tests for the default hook engine pipeline."""

from __future__ import annotations

import asyncio
import json
import types
from pathlib import Path

import pytest

from codeloader.core.errors import FetchError, ModuleNotRegisteredError
from codeloader.core.settings import ObservabilitySettings, Settings
from codeloader.core.types import Goal
from codeloader.libs.engine import HookEngine
from codeloader.libs.hooks import HookSet, resolve_hooks
from codeloader.libs.registry import ModuleRegistry


def _engine(hook_set: HookSet, settings: Settings | None = None, registry=None) -> HookEngine:
    return HookEngine(
        settings or Settings(),
        resolve_hooks(hook_set),
        registry if registry is not None else ModuleRegistry(),
    )


def _memory_fetch(sources: dict[str, str]):
    async def fetch(load):
        return sources[load.normalized_name]

    return fetch


@pytest.mark.unit
class TestHookEngineLoad:
    def test_module_from_filesystem(self, tmp_path: Path) -> None:
        (tmp_path / "pkg").mkdir()
        (tmp_path / "pkg" / "mod.py").write_text("answer = 42\n", encoding="utf-8")
        engine = _engine(HookSet(base_url=str(tmp_path)))

        unit = asyncio.run(engine.load("pkg/mod", None, None, Goal.MODULE))

        assert isinstance(unit.result, types.ModuleType)
        assert unit.result.answer == 42
        assert unit.normalized_name == "pkg/mod"
        assert unit.address == str(tmp_path / "pkg" / "mod.py")

    def test_script_expression_returns_value(self) -> None:
        engine = _engine(HookSet(resolve=lambda load: "mem://" + load.normalized_name,
                                 fetch=_memory_fetch({"calc": "6 * 7"})))
        unit = asyncio.run(engine.load("calc", None, None, "script"))
        assert unit.result == 42

    def test_script_statements_return_none(self) -> None:
        engine = _engine(HookSet(resolve=lambda load: "mem", fetch=_memory_fetch({"s": "x = 1\ny = 2\n"})))
        assert asyncio.run(engine.load("s", None, None, Goal.SCRIPT)).result is None

    def test_hooks_run_in_order(self) -> None:
        calls: list[str] = []

        def normalize(name, referrer_name, referrer_address):
            calls.append(f"normalize:{referrer_name}:{referrer_address}")
            return "norm/" + name

        def resolve(load):
            calls.append("resolve")
            return "addr"

        async def fetch(load):
            calls.append("fetch")
            return "1"

        def translate(load):
            calls.append("translate")
            return load.source + " + 1"

        def instantiate(load):
            calls.append("instantiate")
            return None

        engine = _engine(HookSet(normalize=normalize, resolve=resolve, fetch=fetch,
                                 translate=translate, instantiate=instantiate))
        unit = asyncio.run(engine.load("x", "ref", None, Goal.SCRIPT))

        assert unit.result == 2
        assert unit.normalized_name == "norm/x"
        assert calls == ["normalize:ref:None", "resolve", "fetch", "translate", "instantiate"]

    def test_explicit_address_skips_resolve(self) -> None:
        def resolve(load):
            raise AssertionError("resolve must not run when an address is given")

        seen: list[str] = []

        def fetch(load):
            seen.append(load.address)
            return "'fetched'"

        engine = _engine(HookSet(resolve=resolve, fetch=fetch))
        unit = asyncio.run(engine.load("x", None, "mem://explicit", Goal.SCRIPT))

        assert unit.result == "fetched"
        assert unit.address == "mem://explicit"
        assert seen == ["mem://explicit"]
        assert engine.source_map_info("x", Goal.SCRIPT).url == "mem://explicit"

    def test_plain_hook_returning_coroutine_is_awaited(self) -> None:
        async def read_source(load):
            await asyncio.sleep(0)
            return "40 + 2"

        engine = _engine(HookSet(resolve=lambda load: "a", fetch=lambda load: read_source(load)))
        assert asyncio.run(engine.load("x", None, None, Goal.SCRIPT)).result == 42

    def test_instantiate_value_skips_evaluation(self) -> None:
        engine = _engine(HookSet(resolve=lambda load: "a", fetch=lambda load: "raise SystemExit",
                                 instantiate=lambda load: {"provided": True}))
        unit = asyncio.run(engine.load("m", None, None, Goal.MODULE))
        assert unit.result == {"provided": True}

    def test_registered_module_short_circuits_fetch(self) -> None:
        def fetch(load):
            raise AssertionError("fetch must not run for registered modules")

        registry = ModuleRegistry()
        registry.register("dep", [], lambda deps: "registered")
        engine = _engine(HookSet(fetch=fetch), registry=registry)

        assert asyncio.run(engine.load("dep", None, None, Goal.MODULE)).result == "registered"

    def test_script_require_uses_registry(self) -> None:
        registry = ModuleRegistry()
        registry.register("math-lib", [], lambda deps: types.SimpleNamespace(double=lambda v: v * 2))
        engine = _engine(
            HookSet(resolve=lambda load: "a", fetch=lambda load: "require('math-lib').double(21)"),
            registry=registry,
        )
        assert asyncio.run(engine.load("s", None, None, Goal.SCRIPT)).result == 42

    def test_script_require_of_unregistered_module_fails(self) -> None:
        engine = _engine(HookSet(resolve=lambda load: "a", fetch=lambda load: "require('ghost')"))
        with pytest.raises(ModuleNotRegisteredError, match="ghost"):
            asyncio.run(engine.load("s", None, None, Goal.SCRIPT))

    def test_fetch_errors_propagate(self, tmp_path: Path) -> None:
        engine = _engine(HookSet(base_url=str(tmp_path)))
        with pytest.raises(FetchError):
            asyncio.run(engine.load("missing", None, None, Goal.MODULE))

    def test_syntax_errors_propagate(self) -> None:
        engine = _engine(HookSet(resolve=lambda load: "a", fetch=lambda load: "def (:"))
        with pytest.raises(SyntaxError):
            asyncio.run(engine.load("bad", None, None, Goal.SCRIPT))

    def test_non_string_translation_rejected(self) -> None:
        engine = _engine(HookSet(resolve=lambda load: "a", fetch=lambda load: "1",
                                 translate=lambda load: 123))
        with pytest.raises(TypeError, match="must be a string"):
            asyncio.run(engine.load("x", None, None, Goal.SCRIPT))

    def test_invalid_goal(self) -> None:
        engine = _engine(HookSet())
        with pytest.raises(ValueError, match="Invalid goal"):
            asyncio.run(engine.load("x", None, None, "program"))


@pytest.mark.unit
class TestHookEngineInline:
    def test_script_applies_translate(self) -> None:
        engine = _engine(HookSet(translate_synchronous=lambda load: load.source.replace("ONE", "1")))
        assert asyncio.run(engine.script("ONE + ONE", None, None, None)) == 2

    def test_module_returns_namespace(self) -> None:
        engine = _engine(HookSet())
        module = asyncio.run(engine.module("value = 'hi'", "inline/mod", None, None))
        assert module.value == "hi"
        assert module.__name__ == "inline/mod"

    def test_script_source_must_be_string(self) -> None:
        engine = _engine(HookSet())
        with pytest.raises(TypeError):
            asyncio.run(engine.script(b"1", None, None, None))


@pytest.mark.unit
class TestHookEngineInspection:
    def test_options_are_read_only(self) -> None:
        from codeloader.core.settings import EngineSettings

        engine = _engine(HookSet(), settings=Settings(loader=EngineSettings(options={"strict": True})))
        assert engine.options["strict"] is True
        with pytest.raises(TypeError):
            engine.options["strict"] = False

    def test_source_map_info_recorded(self) -> None:
        def translate(load):
            load.metadata["source_map"] = '{"version": 3}'
            return load.source

        engine = _engine(HookSet(resolve=lambda load: "mem://s", fetch=lambda load: "1", translate=translate))
        asyncio.run(engine.load("s", None, None, Goal.SCRIPT))

        info = engine.source_map_info("s", "script")
        assert info is not None
        assert info.url == "mem://s"
        assert info.source_map == '{"version": 3}'
        assert engine.source_map_info("s", Goal.MODULE) is None

    def test_trace_written_when_enabled(self, tmp_path: Path) -> None:
        trace_file = tmp_path / "traces" / "loads.jsonl"
        settings = Settings(
            observability=ObservabilitySettings(trace_enabled=True, trace_file=str(trace_file))
        )
        engine = _engine(HookSet(resolve=lambda load: "a", fetch=lambda load: "2"), settings=settings)
        asyncio.run(engine.load("t", None, None, Goal.SCRIPT))

        record = json.loads(trace_file.read_text(encoding="utf-8").strip())
        assert record["name"] == "t"
        assert list(record["stages"]) == ["normalize", "resolve", "fetch", "translate", "evaluate"]

    def test_unwritable_trace_file_does_not_fail_load(self, tmp_path: Path) -> None:
        settings = Settings(
            observability=ObservabilitySettings(trace_enabled=True, trace_file=str(tmp_path))
        )
        engine = _engine(HookSet(resolve=lambda load: "a", fetch=lambda load: "7"), settings=settings)

        assert asyncio.run(engine.load("t", None, None, Goal.SCRIPT)).result == 7

    def test_unwritable_trace_file_keeps_original_error(self, tmp_path: Path) -> None:
        settings = Settings(
            observability=ObservabilitySettings(trace_enabled=True, trace_file=str(tmp_path))
        )
        engine = _engine(HookSet(resolve=lambda load: "a", fetch=lambda load: "require('x')"),
                         settings=settings)

        with pytest.raises(ModuleNotRegisteredError):
            asyncio.run(engine.load("t", None, None, Goal.SCRIPT))
        with pytest.raises(ModuleNotRegisteredError):
            asyncio.run(engine.script("require('x')", None, None, None))

    def test_trace_records_error(self, tmp_path: Path) -> None:
        trace_file = tmp_path / "loads.jsonl"
        settings = Settings(
            observability=ObservabilitySettings(trace_enabled=True, trace_file=str(trace_file))
        )
        engine = _engine(HookSet(resolve=lambda load: "a", fetch=lambda load: "require('x')"),
                         settings=settings)
        with pytest.raises(ModuleNotRegisteredError):
            asyncio.run(engine.load("t", None, None, Goal.SCRIPT))

        record = json.loads(trace_file.read_text(encoding="utf-8").strip())
        assert record["stages"]["error"]["data"]["type"] == "ModuleNotRegisteredError"
