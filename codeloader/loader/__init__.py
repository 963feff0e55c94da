"""
Loader Layer - public façade.

This package contains:
- CodeLoader (facade.py)
- semver alias maps (semver.py)
"""

from codeloader.loader.facade import VERSION, CodeLoader
from codeloader.loader.semver import semver_map

__all__ = ["CodeLoader", "VERSION", "semver_map"]
