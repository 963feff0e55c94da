"""Registry package."""

from codeloader.libs.registry.module_registry import ModuleRecord, ModuleRegistry

__all__ = ["ModuleRecord", "ModuleRegistry"]
