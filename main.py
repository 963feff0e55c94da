"""Application entrypoint.

Loads settings, builds a `CodeLoader` and runs the requested imports/scripts.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from codeloader.core.settings import SettingsError, load_settings
from codeloader.libs.hooks import HookSet
from codeloader.loader import CodeLoader
from codeloader.observability.logger import configure_logging, get_logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Load and run Python modules and scripts")
    parser.add_argument("--settings", default="config/settings.yaml", help="Settings file path")
    parser.add_argument(
        "--import",
        dest="imports",
        action="append",
        default=[],
        metavar="NAME",
        help="Module specifier to import (repeatable)",
    )
    parser.add_argument(
        "--script",
        dest="scripts",
        action="append",
        default=[],
        metavar="NAME",
        help="Script specifier to load and run (repeatable)",
    )
    parser.add_argument("--semver", default=None, metavar="NAME", help="Print the alias map for a specifier")
    return parser


async def _run(loader: CodeLoader, args: argparse.Namespace) -> dict[str, Any]:
    output: dict[str, Any] = {"version": loader.version}
    if args.semver:
        output["semver"] = loader.semver_map(args.semver)
    if args.imports:
        modules = await loader.import_all(args.imports)
        output["imports"] = [getattr(module, "__name__", repr(module)) for module in modules]
    if args.scripts:
        output["scripts"] = await loader.load_as_script_all(args.scripts)
    return output


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    logger = get_logger()

    try:
        settings = load_settings(args.settings)
    except SettingsError as e:
        logger.error(str(e))
        raise SystemExit(1) from e

    configure_logging(settings)
    logger.info(
        "Settings loaded (engine=%s, base_url=%s)",
        settings.loader.engine,
        settings.loader.base_url,
    )

    loader = CodeLoader(HookSet(base_url=settings.loader.base_url), settings=settings)
    output = asyncio.run(_run(loader, args))
    print(json.dumps(output, indent=2, default=repr))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(130)
