"""
Core Layer - Shared contracts.

This package contains:
- Configuration management (settings.py)
- Core data types (types.py) - shared by the façade, engine and hooks
- Error taxonomy (errors.py)
- Load tracing
"""

from codeloader.core.types import CodeUnit, Goal, LoadRecord, LoadReferrer, SourceMapInfo

__all__ = ["CodeUnit", "Goal", "LoadRecord", "LoadReferrer", "SourceMapInfo"]
