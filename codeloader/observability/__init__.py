"""
Observability Layer.

This package contains logging helpers shared by the loader components.
"""

from codeloader.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
