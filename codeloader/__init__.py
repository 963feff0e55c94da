"""codeloader - asynchronous module/script loading façade."""

from codeloader.version import __version__

__all__ = ["__version__"]
