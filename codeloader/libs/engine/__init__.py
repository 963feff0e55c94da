"""Engine package.

Exports the engine contract, the default hook engine and the factory.
"""

from codeloader.libs.engine.base_engine import BaseEngine
from codeloader.libs.engine.engine_factory import EngineFactory
from codeloader.libs.engine.hook_engine import HookEngine

__all__ = ["BaseEngine", "EngineFactory", "HookEngine"]
