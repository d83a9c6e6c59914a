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

"""Build step rendering pages through their layouts.

Every page is rendered against the untouched file map first.  Renames and
content replacements are queued and applied only once all pages rendered,
then layout files are dropped from the output.  Any error leaves the file
map exactly as it was handed in.

Usage::

    from twigsmith import TwigPlugin

    plugin = TwigPlugin({"layouts": "layouts/*.twig", "defaultLayout": "base"})
    plugin(files, metadata={"title": "My site"}, source="src")
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any

from jinja2 import Environment

from twigsmith.config import PluginConfig
from twigsmith.errors import ConfigurationError
from twigsmith.files import SiteFile
from twigsmith.layouts import (
    LayoutEntry,
    classify,
    compose_page,
    render_static,
    validate_layouts,
)
from twigsmith.matching import match_paths
from twigsmith.templates import configure_environment, render_source

logger = logging.getLogger(__name__)

OUTPUT_EXTENSION = ".html"


def html_path(path: str) -> str:
    """Return *path* with its extension replaced by ``.html``."""
    return posixpath.splitext(path)[0] + OUTPUT_EXTENSION


@dataclass(frozen=True)
class PendingRename:
    """A rendered page waiting to be written back into the file map."""

    path: str
    rendered: str
    new_path: str

    def apply(self, files: dict[str, SiteFile]) -> None:
        file = files.pop(self.path)
        file.contents = self.rendered.encode("utf-8")
        files[self.new_path] = file


def check_output_paths(
    pages: dict[str, SiteFile],
    files: dict[str, SiteFile],
) -> None:
    """Raise :class:`ConfigurationError` if two outputs would share a path.

    A page target collides with another page target, or with any file
    that is not itself a page, layouts included.
    """
    targets: dict[str, str] = {}
    for path in pages:
        target = html_path(path)
        if target in targets:
            raise ConfigurationError(
                f"Configuration error: pages {targets[target]} and {path} "
                f"both render to {target}"
            )
        if target in files and target not in pages:
            raise ConfigurationError(
                f"Configuration error: page {path} renders to {target}, "
                f"which would overwrite {target}"
            )
        targets[target] = path


def build_context(
    metadata: dict[str, Any],
    page: SiteFile,
    files: dict[str, SiteFile],
) -> dict[str, Any]:
    """Merge site metadata, page attributes and the file map, later wins."""
    return {**metadata, **page.attributes(), **files}


class TwigPlugin:
    """Render pages with their layouts and rewrite the file map.

    Args:
        config: A :class:`PluginConfig` or a plain mapping of options.
    """

    def __init__(self, config: PluginConfig | dict[str, Any] | None = None) -> None:
        if not isinstance(config, PluginConfig):
            config = PluginConfig.from_dict(config)
        self.config = config

    def __call__(
        self,
        files: dict[str, SiteFile],
        metadata: dict[str, Any] | None = None,
        source: str | Path | None = None,
        cwd: str | Path | None = None,
    ) -> dict[str, SiteFile]:
        """Run one build over *files*, mutating and returning it."""
        config = self.config
        metadata = metadata or {}

        registry, pages = classify(
            files, config.layouts, config.pages, config.default_layout,
        )
        validate_layouts(registry, config.default_layout, config.static_layout)

        env = configure_environment(config.environment, source, cwd=cwd)

        layout_paths = match_paths(files.keys(), config.layouts)
        check_output_paths(pages, files)

        pending: list[PendingRename] = []
        for path, page in pages.items():
            rendered = self.render_page(env, path, page, registry, metadata, files)
            pending.append(PendingRename(path, rendered, html_path(path)))

        for rename in pending:
            rename.apply(files)
        for path in layout_paths:
            files.pop(path, None)

        logger.info(
            "Rendered %d pages, removed %d layout files", len(pending), len(layout_paths),
        )
        return files

    def render_page(
        self,
        env: Environment,
        path: str,
        page: SiteFile,
        registry: dict[str, LayoutEntry],
        metadata: dict[str, Any],
        files: dict[str, SiteFile],
    ) -> str:
        context = build_context(metadata, page, files)
        render = partial(render_source, env)

        if page.static:
            logger.debug("Rendering static page %s", path)
            return render_static(
                page, path, registry, self.config.static_layout, context, render,
            )

        logger.debug(
            "Rendering page %s (layout=%s)", path, page.layout or self.config.default_layout,
        )
        source = compose_page(
            page, registry, self.config.default_layout, environment=env, page_path=path,
        )
        return render(source, context, path)


def twig_plugin(config: PluginConfig | dict[str, Any] | None = None) -> TwigPlugin:
    """Return a configured :class:`TwigPlugin`."""
    return TwigPlugin(config)
