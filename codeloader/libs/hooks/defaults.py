"""Default hooks used when the caller leaves a stage unset.

- normalize: resolves ``./`` and ``../`` names against the referrer
- resolve: joins the normalized name onto ``base_url`` (URL or directory)
- fetch: HTTP(S) through httpx, everything else from the filesystem
- translate / instantiate: pass-through
"""

from __future__ import annotations

import asyncio
import posixpath
from pathlib import Path
from typing import Any
from urllib.parse import urljoin

import httpx

from codeloader.core.errors import FetchError
from codeloader.core.types import LoadRecord

DEFAULT_SUFFIX = ".py"


def _is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def default_normalize(
    name: str,
    referrer_name: str | None = None,
    referrer_address: str | None = None,
) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Specifier must be a non-empty string")

    if name.startswith(("./", "../")):
        base = posixpath.dirname(referrer_name or "")
        return posixpath.normpath(posixpath.join(base, name))
    return name


def default_resolve(load: LoadRecord, base_url: str) -> str:
    name = load.normalized_name or load.name
    if not posixpath.splitext(name)[1]:
        name += DEFAULT_SUFFIX

    if _is_url(base_url):
        return urljoin(base_url.rstrip("/") + "/", name)
    return str(Path(base_url) / name)


async def default_fetch(load: LoadRecord, *, timeout: float = 30.0, encoding: str = "utf-8") -> str:
    address = load.address
    if not address:
        raise FetchError(load.normalized_name or load.name, "no address resolved")

    if _is_url(address):
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(address)
                response.raise_for_status()
        except httpx.TimeoutException as error:
            raise FetchError(address, f"timed out after {timeout}s") from error
        except httpx.HTTPStatusError as error:
            raise FetchError(address, f"HTTP {error.response.status_code}") from error
        except httpx.RequestError as error:
            raise FetchError(address, str(error)) from error
        return response.text

    path = Path(address)
    try:
        return await asyncio.to_thread(path.read_text, encoding=encoding)
    except OSError as error:
        raise FetchError(address, str(error)) from error


async def default_translate(load: LoadRecord) -> Any:
    return load.source


def default_instantiate(load: LoadRecord) -> Any:
    return None
