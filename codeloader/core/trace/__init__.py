"""
Trace Module.

This package contains tracing components:
- Load trace (one per engine load)
"""

from codeloader.core.trace.trace_context import LoadTrace

__all__ = ['LoadTrace']
