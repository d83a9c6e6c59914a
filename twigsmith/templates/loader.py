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

"""Jinja2 loader searching site roots, then installed theme packages.

Resolution order for ``{% extends 'theme/base.twig' %}``:

1. ``<root>/theme/base.twig`` for each configured root, in order
2. ``<cwd>/node_modules/theme/base.twig`` — an installed package
3. ``<workspace>/node_modules/theme/base.twig`` — when the site lives
   inside a multi-package workspace (see :func:`find_workspace_root`)

Front matter is stripped from every loaded source.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from pathlib import Path

from jinja2 import BaseLoader, Environment

from twigsmith.errors import TemplateResolutionError
from twigsmith.files import strip_front_matter

logger = logging.getLogger(__name__)


def find_workspace_root(cwd: str | Path, manifest: str = "lerna.json") -> Path | None:
    """Return the workspace root two levels above *cwd*, if it has *manifest*."""
    candidate = (Path(cwd) / ".." / "..").resolve()
    if (candidate / manifest).is_file():
        return candidate
    return None


class ModuleLoader(BaseLoader):
    """Loader with root directories plus dependency-directory fallbacks.

    Args:
        search_paths: Ordered root directories.
        cwd: Directory whose dependency directory is searched second.
        workspace_root: Workspace root searched last, or ``None``.
        modules_dir: Name of the dependency directory.
        no_cache: Report every loaded template as stale.

    Attributes:
        reporter: Template name -> path for templates found in a
            dependency directory.
        paths_to_names: Resolved path -> template name for every load.
    """

    def __init__(
        self,
        search_paths: Sequence[str | Path],
        cwd: str | Path,
        workspace_root: str | Path | None = None,
        modules_dir: str = "node_modules",
        no_cache: bool = False,
    ) -> None:
        self.search_paths = [Path(p) for p in search_paths]
        self.cwd = Path(cwd)
        self.workspace_root = Path(workspace_root) if workspace_root else None
        self.modules_dir = modules_dir
        self.no_cache = no_cache
        self.reporter: dict[str, str] = {}
        self.paths_to_names: dict[str, str] = {}

    def _find_in_roots(self, template: str) -> Path | None:
        # Already resolved by resolve_relative.
        if Path(template).is_absolute():
            return Path(template) if Path(template).is_file() else None
        for root in self.search_paths:
            path = root / template
            if path.is_file():
                return path
        return None

    def _find_in_modules(self, base: Path, template: str) -> Path | None:
        path = base / self.modules_dir / template
        try:
            if path.is_file():
                return path.resolve()
        except OSError as exc:
            logger.debug("Module lookup for %s under %s failed: %s", template, base, exc)
        return None

    def find(self, template: str) -> Path | None:
        """Return the file *template* resolves to, or ``None``."""
        path = self._find_in_roots(template)
        if path is not None:
            return path

        for base in (self.cwd, self.workspace_root):
            if base is None:
                continue
            path = self._find_in_modules(base, template)
            if path is not None:
                self.reporter[template] = str(path)
                logger.debug("Resolved %s from %s", template, path)
                return path
        return None

    def get_source(
        self, environment: Environment, template: str,
    ) -> tuple[str, str, Callable[[], bool]]:
        path = self.find(template)
        if path is None:
            raise TemplateResolutionError(template)

        source = strip_front_matter(path.read_text(encoding="utf-8"))
        self.paths_to_names[str(path)] = template
        if self.no_cache:
            return source, str(path), lambda: False
        mtime = path.stat().st_mtime
        return source, str(path), lambda: path.is_file() and path.stat().st_mtime == mtime

    def resolve_relative(self, from_name: str, to_name: str) -> str | None:
        """Resolve *to_name* relative to the template *from_name*.

        Each prefix (the working directory, then every root) is tried as
        ``prefix/dirname(from)/to`` and then ``prefix/from/to``.
        """
        from_dir = os.path.dirname(from_name)
        for prefix in (self.cwd, *self.search_paths):
            for candidate in (prefix / from_dir / to_name, prefix / from_name / to_name):
                if candidate.exists():
                    return str(candidate.resolve())
        return None
