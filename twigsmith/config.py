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

"""Plugin configuration.

:meth:`PluginConfig.from_dict` accepts both the camelCase option names
used in site configuration files (``defaultLayout``, ``nunjucks``,
``removeSourceFromPath`` ...) and their snake_case equivalents.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

DEFAULT_LAYOUT = "default-layout"
STATIC_LAYOUT = "static-layout"
NO_LAYOUT = "none"


def _default_options() -> dict[str, Any]:
    return {
        "autoescape": True,
        "trim_blocks": True,
        "lstrip_blocks": True,
    }


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the value of the first key in *keys* present in *data*."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _as_list(value: str | list[str]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


@dataclass
class EnvironmentConfig:
    """Settings for the Jinja2 environment and template loader.

    Args:
        paths: Ordered template search roots.
        remove_source_from_path: Do not append the pipeline source
            directory to *paths*.
        custom_filters: Filter name to ``"module:attr"`` reference or callable.
        custom_environment: ``(loaders, config, source) -> Environment``
            replacing the default construction.
        custom: ``(env) -> Environment`` post-processing hook.
        options: Keyword arguments for :class:`jinja2.Environment`.
        modules_dir: Dependency directory searched after *paths*.
        workspace_manifest: File marking a workspace root two levels up.
        no_cache: Never reuse compiled templates between renders.
    """

    paths: list[str] = field(default_factory=lambda: [os.getcwd()])
    remove_source_from_path: bool = False
    custom_filters: dict[str, str | Callable[..., Any]] = field(default_factory=dict)
    custom_environment: Callable[..., Any] | None = None
    custom: Callable[..., Any] | None = None
    options: dict[str, Any] = field(default_factory=_default_options)
    modules_dir: str = "node_modules"
    workspace_manifest: str = "lerna.json"
    no_cache: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnvironmentConfig:
        options = _default_options()
        options.update(_pick(data, "options", "config", default={}) or {})
        defaults = cls()
        return cls(
            paths=_as_list(_pick(data, "paths", default=defaults.paths)),
            remove_source_from_path=bool(
                _pick(data, "removeSourceFromPath", "remove_source_from_path", default=False)
            ),
            custom_filters=dict(
                _pick(data, "customFilters", "custom_filters", default={}) or {}
            ),
            custom_environment=_pick(data, "customEnvironment", "custom_environment"),
            custom=data.get("custom"),
            options=options,
            modules_dir=_pick(data, "modulesDir", "modules_dir", default=defaults.modules_dir),
            workspace_manifest=_pick(
                data, "workspaceManifest", "workspace_manifest",
                default=defaults.workspace_manifest,
            ),
            no_cache=bool(_pick(data, "noCache", "no_cache", default=False)),
        )


@dataclass
class PluginConfig:
    """Top-level plugin configuration."""

    pages: list[str] = field(default_factory=lambda: ["**/*.twig"])
    layouts: list[str] = field(default_factory=lambda: ["layouts/*.twig"])
    default_layout: str = DEFAULT_LAYOUT
    static_layout: str = STATIC_LAYOUT
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> PluginConfig:
        data = data or {}
        defaults = cls()
        return cls(
            pages=_as_list(data.get("pages", defaults.pages)),
            layouts=_as_list(data.get("layouts", defaults.layouts)),
            default_layout=_pick(
                data, "defaultLayout", "default_layout", default=DEFAULT_LAYOUT,
            ),
            static_layout=_pick(
                data, "staticLayout", "static_layout", default=STATIC_LAYOUT,
            ),
            environment=EnvironmentConfig.from_dict(
                _pick(data, "nunjucks", "jinja", "environment", default={}) or {}
            ),
        )
