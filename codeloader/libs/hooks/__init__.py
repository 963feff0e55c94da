"""Hook package.

Caller-facing `HookSet` plus the resolution step that produces the async
`ResolvedHooks` consumed by engines.
"""

from codeloader.libs.hooks.hook_set import (
    HookSet,
    ResolvedHooks,
    adapt_synchronous_translate,
    as_async,
    resolve_hooks,
)

__all__ = [
    "HookSet",
    "ResolvedHooks",
    "adapt_synchronous_translate",
    "as_async",
    "resolve_hooks",
]
