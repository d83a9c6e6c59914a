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

"""Minimal host pipeline: read a source tree, run the plugin, write output.

Front matter of text files becomes the file's metadata, and the
remaining body becomes its contents.  Files that are not valid UTF-8
are copied through untouched.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any

from twigsmith.config import PluginConfig
from twigsmith.files import SiteFile, split_front_matter
from twigsmith.plugin import TwigPlugin

logger = logging.getLogger(__name__)


def read_file(path: Path) -> SiteFile:
    """Load a single file, parsing front matter when it is text."""
    data = path.read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return SiteFile(contents=data)
    metadata, body = split_front_matter(text)
    if not metadata:
        return SiteFile(contents=data)
    return SiteFile(contents=body.encode("utf-8"), metadata=metadata)


def read_files(source: str | Path) -> dict[str, SiteFile]:
    """Return the file map for every file below *source*, sorted by path."""
    source = Path(source)
    files: dict[str, SiteFile] = {}
    for path in sorted(source.rglob("*")):
        if path.is_file():
            files[path.relative_to(source).as_posix()] = read_file(path)
    logger.debug("Read %d files from %s", len(files), source)
    return files


def write_files(
    files: dict[str, SiteFile],
    destination: str | Path,
    clean: bool = True,
) -> None:
    """Write the file map below *destination*, optionally emptying it first."""
    destination = Path(destination)
    if clean and destination.exists():
        shutil.rmtree(destination)
    for name, file in files.items():
        target = destination / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(file.contents)
    logger.info("Wrote %d files to %s", len(files), destination)


def build(
    source: str | Path,
    destination: str | Path,
    config: PluginConfig | dict[str, Any] | None = None,
    metadata: dict[str, Any] | None = None,
    clean: bool = True,
) -> dict[str, SiteFile]:
    """Read *source*, render it, and write the result to *destination*.

    Nothing is written if rendering fails.
    """
    source = Path(source).resolve()
    files = read_files(source)
    TwigPlugin(config)(files, metadata=metadata, source=source)
    write_files(files, destination, clean=clean)
    return files
