# twigsmith — layout composition for static site builds
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Command-line entry point.

Example::

    twigsmith build src dist --config site.yaml --metadata metadata.yaml
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateError

from twigsmith.errors import TwigsmithError
from twigsmith.site import build

logger = logging.getLogger(__name__)


def load_yaml(path: str | None) -> dict[str, Any]:
    """Load a YAML mapping from *path*; ``None`` yields an empty dict."""
    if path is None:
        return {}
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise TwigsmithError(f"{path} does not contain a mapping")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twigsmith",
        description="Render page templates through shared layouts.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    build_cmd = commands.add_parser("build", help="Build a site from a source tree")
    build_cmd.add_argument("source", help="Source directory")
    build_cmd.add_argument("destination", help="Output directory")
    build_cmd.add_argument("--config", help="YAML file with plugin options")
    build_cmd.add_argument("--metadata", help="YAML file with site metadata")
    build_cmd.add_argument(
        "--no-clean",
        action="store_true",
        help="Keep existing files in the output directory",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        files = build(
            args.source,
            args.destination,
            config=load_yaml(args.config),
            metadata=load_yaml(args.metadata),
            clean=not args.no_clean,
        )
    except (TwigsmithError, TemplateError, yaml.YAMLError, OSError) as exc:
        logger.error("Build failed: %s", exc)
        return 1

    logger.info("Built %d files into %s", len(files), args.destination)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
