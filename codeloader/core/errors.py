"""Loader error taxonomy.

Errors are grouped by origin. The façade adds none of its own besides
configuration errors; engine and hook failures reach the caller unchanged.
"""

from __future__ import annotations


class LoaderError(Exception):
    def __init__(self, code: int, message: str, data: dict[str, object] | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data or {}

    def to_dict(self) -> dict[str, object]:
        return {"code": self.code, "message": self.message, "data": self.data}


HOOK_CONFIGURATION = 1001
MODULE_NOT_REGISTERED = 1002
DUPLICATE_REGISTRATION = 1003
FETCH_FAILED = 1004
ENGINE_NOT_FOUND = 1005


class HookConfigurationError(LoaderError):
    """Raised when the hook set is missing or malformed."""

    def __init__(self, message: str, data: dict[str, object] | None = None):
        super().__init__(HOOK_CONFIGURATION, message, data)


class ModuleNotRegisteredError(LoaderError):
    """Raised at evaluation time when a dependency was never registered."""

    def __init__(self, name: str, requested_by: str | None = None):
        message = f"Module not registered: {name}"
        if requested_by:
            message += f" (required by {requested_by})"
        super().__init__(
            MODULE_NOT_REGISTERED,
            message,
            {"name": name, "requested_by": requested_by},
        )
        self.name = name


class DuplicateRegistrationError(LoaderError):
    def __init__(self, name: str):
        super().__init__(
            DUPLICATE_REGISTRATION,
            f"Module already registered: {name}",
            {"name": name},
        )
        self.name = name


class FetchError(LoaderError):
    def __init__(self, address: str, reason: str):
        super().__init__(
            FETCH_FAILED,
            f"Failed to fetch {address}: {reason}",
            {"address": address},
        )
        self.address = address


class EngineNotFoundError(LoaderError):
    def __init__(self, name: str, available: list[str]):
        listing = ", ".join(available) or "(none)"
        super().__init__(
            ENGINE_NOT_FOUND,
            f"Unsupported loader engine '{name}'. Available engines: {listing}",
            {"name": name, "available": list(available)},
        )
