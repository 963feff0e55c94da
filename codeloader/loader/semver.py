"""Semver alias maps for versioned specifiers.

A normalized specifier such as ``lodash@4.17.21/index.py`` can be referenced
as ``lodash``, ``lodash@4`` or ``lodash@4.17``; all three aliases point at
the canonical version segment ``lodash@4.17.21``.
"""

from __future__ import annotations

import re

SEMVER_PATTERN = re.compile(
    r"^(\d+)\.(\d+)\.(\d+)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+[0-9A-Za-z-]+)?",
    re.ASCII,
)


def version_segment(normalized_name: str) -> str:
    """Return the part of a specifier before the first ``/``."""

    slash = normalized_name.find("/")
    return normalized_name if slash == -1 else normalized_name[:slash]


def semver_map(normalized_name: str) -> dict[str, str]:
    """Build the alias map for a normalized specifier.

    Returns an empty dict when the specifier carries no ``@`` or when the
    text after the last ``@`` is not ``MAJOR.MINOR.PATCH[-PRE][+BUILD]``.
    The full ``name@MAJOR.MINOR.PATCH`` form is not repeated as an alias.
    """

    version = version_segment(normalized_name)
    at = version.rfind("@")
    if at == -1:
        return {}

    package_name = version[:at]
    match = SEMVER_PATTERN.fullmatch(version[at + 1:])
    if match is None:
        return {}

    major, minor = match.group(1), match.group(2)
    return {
        package_name: version,
        f"{package_name}@{major}": version,
        f"{package_name}@{major}.{minor}": version,
    }
