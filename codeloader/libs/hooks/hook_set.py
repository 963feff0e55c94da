"""Caller hook configuration and its one-time resolution into async hooks.

A `HookSet` belongs to the caller. `resolve_hooks()` turns it into a frozen
`ResolvedHooks` where every hook is a coroutine function, so the engine never
has to care whether a hook was written sync or async. The caller's object is
never modified here; only `base_url` stays live on it.
"""

from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from codeloader.core.errors import HookConfigurationError
from codeloader.core.settings import FetchSettings
from codeloader.core.types import LoadRecord
from codeloader.libs.hooks import defaults
from codeloader.observability.logger import get_logger

Hook = Callable[..., Any]
AsyncHook = Callable[..., Awaitable[Any]]

HOOK_NAMES = ("normalize", "resolve", "fetch", "translate", "translate_synchronous", "instantiate")


@dataclass
class HookSet:
    """Caller-supplied callbacks customizing each pipeline stage.

    Signatures (each may be a plain function or a coroutine function):
    - normalize(name, referrer_name, referrer_address) -> normalized name
    - resolve(load) -> address
    - fetch(load) -> source text
    - translate(load) -> translated source text
    - translate_synchronous(load) -> translated source text (always sync)
    - instantiate(load) -> evaluated value, or None to let the engine evaluate

    Only one of `translate` / `translate_synchronous` is used; the synchronous
    one wins when both are set.
    """

    normalize: Optional[Hook] = None
    resolve: Optional[Hook] = None
    fetch: Optional[Hook] = None
    translate: Optional[Hook] = None
    translate_synchronous: Optional[Hook] = None
    instantiate: Optional[Hook] = None
    base_url: str = "."


@dataclass(frozen=True)
class ResolvedHooks:
    """Hooks actually used by the engine. All of them are async."""

    normalize: AsyncHook
    resolve: AsyncHook
    fetch: AsyncHook
    translate: AsyncHook
    instantiate: AsyncHook
    source: HookSet

    @property
    def base_url(self) -> str:
        return self.source.base_url


def as_async(hook: Hook) -> AsyncHook:
    """Wrap a plain callable so it can be awaited like a coroutine function.

    A plain callable may still hand back an awaitable (a lambda around a
    coroutine function, an object with an async ``__call__``); it is awaited.
    """

    if inspect.iscoroutinefunction(hook):
        return hook

    @functools.wraps(hook)
    async def _call(*args: Any, **kwargs: Any) -> Any:
        result = hook(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    return _call


def adapt_synchronous_translate(translate_synchronous: Hook) -> AsyncHook:
    """Build an async translate that resolves to the sync hook's return value."""

    @functools.wraps(translate_synchronous)
    async def translate(load: LoadRecord) -> Any:
        return translate_synchronous(load)

    return translate


def _check_callables(hook_set: HookSet) -> None:
    for name in HOOK_NAMES:
        value = getattr(hook_set, name)
        if value is not None and not callable(value):
            raise HookConfigurationError(
                f"Hook '{name}' must be callable, got {type(value).__name__}",
                {"hook": name},
            )
    if not isinstance(hook_set.base_url, str) or not hook_set.base_url:
        raise HookConfigurationError("HookSet.base_url must be a non-empty string")


def resolve_hooks(hook_set: HookSet | None, fetch_settings: FetchSettings | None = None) -> ResolvedHooks:
    """Resolve a caller hook set into async hooks with defaults filled in.

    Raises:
        HookConfigurationError: hook set missing, not a HookSet, or holding a
            non-callable hook.
    """

    if hook_set is None:
        raise HookConfigurationError("A HookSet is required to construct a loader")
    if not isinstance(hook_set, HookSet):
        raise HookConfigurationError(
            f"Expected HookSet, got {type(hook_set).__name__}",
        )
    _check_callables(hook_set)

    fetch_settings = fetch_settings or FetchSettings()

    if hook_set.translate_synchronous is not None:
        if hook_set.translate is not None:
            get_logger("hooks").warning(
                "Both translate and translate_synchronous supplied; using translate_synchronous"
            )
        translate = adapt_synchronous_translate(hook_set.translate_synchronous)
    elif hook_set.translate is not None:
        translate = as_async(hook_set.translate)
    else:
        translate = defaults.default_translate

    if hook_set.resolve is not None:
        resolve = as_async(hook_set.resolve)
    else:
        async def resolve(load: LoadRecord) -> str:
            # base_url is read per call so later writes through the loader apply
            return defaults.default_resolve(load, hook_set.base_url)

    if hook_set.fetch is not None:
        fetch = as_async(hook_set.fetch)
    else:
        fetch = functools.partial(
            defaults.default_fetch,
            timeout=fetch_settings.timeout,
            encoding=fetch_settings.encoding,
        )

    return ResolvedHooks(
        normalize=as_async(hook_set.normalize or defaults.default_normalize),
        resolve=resolve,
        fetch=fetch,
        translate=translate,
        instantiate=as_async(hook_set.instantiate or defaults.default_instantiate),
        source=hook_set,
    )
