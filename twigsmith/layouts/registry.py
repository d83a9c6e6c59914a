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

"""Classification of the file map into layouts and pages.

Layouts are registered under a logical name: the file's ``layoutName``
metadata when present, otherwise the file stem (``layouts/base.twig`` ->
``base``).  Pages are whatever the page patterns match, minus anything
the layout patterns match.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Sequence
from dataclasses import dataclass

from twigsmith.config import DEFAULT_LAYOUT, NO_LAYOUT, STATIC_LAYOUT
from twigsmith.errors import ConfigurationError
from twigsmith.files import SiteFile
from twigsmith.matching import match_paths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutEntry:
    """A registered layout: its logical name, original path and file."""

    name: str
    file_name: str
    file: SiteFile


def layout_name_for(path: str, file: SiteFile) -> str:
    """Return the name a layout file registers itself under."""
    return file.layout_name or posixpath.splitext(posixpath.basename(path))[0]


def build_layout_registry(
    files: dict[str, SiteFile],
    layout_patterns: str | Sequence[str],
    default_layout: str = DEFAULT_LAYOUT,
) -> dict[str, LayoutEntry]:
    """Register every layout-matching file by its logical name.

    When a layout's name equals *default_layout* it is also aliased as
    ``"default-layout"``.  Later matches replace earlier ones on name clashes.
    """
    registry: dict[str, LayoutEntry] = {}
    for path in match_paths(files.keys(), layout_patterns):
        file = files[path]
        name = layout_name_for(path, file)
        if name in registry and registry[name].file_name != path:
            logger.warning(
                "Layout %r from %s replaces %s", name, path, registry[name].file_name,
            )
        entry = LayoutEntry(name=name, file_name=path, file=file)
        registry[name] = entry
        if name == default_layout and default_layout != DEFAULT_LAYOUT:
            registry[DEFAULT_LAYOUT] = entry
    return registry


def collect_pages(
    files: dict[str, SiteFile],
    page_patterns: str | Sequence[str],
    layout_patterns: str | Sequence[str],
) -> dict[str, SiteFile]:
    """Return page files in page-pattern order, excluding any layout match."""
    blacklist = set(match_paths(files.keys(), layout_patterns))
    return {
        path: files[path]
        for path in match_paths(files.keys(), page_patterns)
        if path not in blacklist
    }


def classify(
    files: dict[str, SiteFile],
    layout_patterns: str | Sequence[str],
    page_patterns: str | Sequence[str],
    default_layout: str = DEFAULT_LAYOUT,
) -> tuple[dict[str, LayoutEntry], dict[str, SiteFile]]:
    """Build the layout registry and the page set in one call."""
    registry = build_layout_registry(files, layout_patterns, default_layout)
    pages = collect_pages(files, page_patterns, layout_patterns)
    logger.debug("Classified %d layouts and %d pages", len(registry), len(pages))
    return registry, pages


def validate_layouts(
    registry: dict[str, LayoutEntry],
    default_layout: str,
    static_layout: str,
) -> None:
    """Check that the configured layout names can be resolved.

    Raises :class:`ConfigurationError` before any rendering happens.
    """
    if default_layout not in registry and default_layout not in (DEFAULT_LAYOUT, NO_LAYOUT):
        raise ConfigurationError(
            f"Configuration error: layout with the name {default_layout!r} does not exist. "
            f"Available: {sorted(registry)}"
        )
    if static_layout not in registry and static_layout != STATIC_LAYOUT:
        raise ConfigurationError(
            f"Configuration error: layout with the name {static_layout!r} does not exist. "
            f"Available: {sorted(registry)}"
        )
