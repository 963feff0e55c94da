"""Explicit module registry.

Registered modules are records of (name, dependency names, factory). Nothing
is evaluated at registration time: dependencies are only checked when a
module is first requested through `get()`, which is also where an
unregistered dependency surfaces as `ModuleNotRegisteredError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from codeloader.core.errors import DuplicateRegistrationError, ModuleNotRegisteredError
from codeloader.observability.logger import get_logger

ModuleFactory = Callable[[list[Any]], Any]


@dataclass
class ModuleRecord:
    name: str
    dependencies: tuple[str, ...]
    factory: ModuleFactory
    instance: Any = None
    evaluated: bool = False


class ModuleRegistry:
    """Registry owning every registered module record.

    One writer per name: registering a name twice is rejected instead of
    silently replacing the first record.
    """

    def __init__(self) -> None:
        self._records: dict[str, ModuleRecord] = {}
        self.logger = get_logger("registry")

    def register(
        self,
        normalized_name: str,
        dependency_specifiers: Sequence[str],
        factory: ModuleFactory,
    ) -> None:
        """Register a module factory under a normalized name.

        Raises:
            ValueError: empty name, non-string dependency, or non-callable factory.
            DuplicateRegistrationError: the name is already registered.
        """

        if not isinstance(normalized_name, str) or not normalized_name.strip():
            raise ValueError("Module name cannot be empty")
        if isinstance(dependency_specifiers, (str, bytes)):
            raise ValueError("dependency_specifiers must be a sequence of names, not a string")
        for index, dep in enumerate(dependency_specifiers):
            if not isinstance(dep, str) or not dep.strip():
                raise ValueError(f"Dependency at index {index} must be a non-empty string")
        if not callable(factory):
            raise ValueError("Module factory must be callable")

        if normalized_name in self._records:
            raise DuplicateRegistrationError(normalized_name)

        self._records[normalized_name] = ModuleRecord(
            name=normalized_name,
            dependencies=tuple(dependency_specifiers),
            factory=factory,
        )
        self.logger.debug(
            "Registered %s (deps=%s)", normalized_name, list(dependency_specifiers)
        )

    def is_registered(self, name: str) -> bool:
        return name in self._records

    def list_registered(self) -> list[str]:
        return sorted(self._records)

    def get(self, name: str, requested_by: str | None = None) -> Any:
        """Return the module instance, evaluating it (and its deps) on first use."""

        record = self._records.get(name)
        if record is None:
            raise ModuleNotRegisteredError(name, requested_by)

        if not record.evaluated:
            dependencies = [self.get(dep, requested_by=name) for dep in record.dependencies]
            record.instance = record.factory(dependencies)
            record.evaluated = True
            self.logger.debug("Evaluated %s", name)

        return record.instance

    def unregister(self, name: str) -> None:
        self._records.pop(name, None)

    def clear(self) -> None:
        self._records.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)
