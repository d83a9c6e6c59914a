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

"""Construction of the Jinja2 environment used for a build."""

from __future__ import annotations

import importlib
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from jinja2 import BaseLoader, Environment

from twigsmith.config import EnvironmentConfig
from twigsmith.errors import ConfigurationError
from twigsmith.templates.loader import ModuleLoader, find_workspace_root

logger = logging.getLogger(__name__)


class SiteEnvironment(Environment):
    """Environment resolving ``extends``/``include`` relative to the caller.

    Names the loader cannot resolve relative to the referencing template
    are passed through unchanged and looked up from the roots.
    """

    def join_path(self, template: str, parent: str) -> str:
        resolve = getattr(self.loader, "resolve_relative", None)
        if resolve is None:
            return template
        return resolve(parent, template) or template


def render_source(
    env: Environment, source: str, context: dict[str, Any], name: str,
) -> str:
    """Render template *source* as if it had been loaded under *name*.

    Giving the template a name lets relative ``extends``/``include``
    targets resolve against it.
    """
    code = env.compile(source, name=name)
    template = env.template_class.from_code(env, code, env.make_globals(None))
    return template.render(context)


def load_filter(reference: str | Callable[..., Any]) -> Callable[..., Any]:
    """Resolve a ``"package.module:attr"`` (or dotted) reference to a callable."""
    if callable(reference):
        return reference
    if ":" in reference:
        module_name, _, attr = reference.partition(":")
    else:
        module_name, _, attr = reference.rpartition(".")
    try:
        target = getattr(importlib.import_module(module_name), attr) if attr else None
    except (ImportError, AttributeError, ValueError) as exc:
        raise ConfigurationError(f"Cannot load filter {reference!r}: {exc}") from exc
    if not callable(target):
        raise ConfigurationError(f"Filter {reference!r} is not callable")
    return target


def add_custom_filters(
    env: Environment, filters: dict[str, str | Callable[..., Any]],
) -> None:
    """Register each configured filter on *env*."""
    for name, reference in filters.items():
        env.filters[name] = load_filter(reference)
        logger.debug("Registered filter %s", name)


def search_paths_for(config: EnvironmentConfig, source: str | Path | None) -> list[str]:
    """Return the configured roots plus the pipeline source directory."""
    paths: list[Any] = list(config.paths)
    if not config.remove_source_from_path:
        paths.append(source)
    return [str(p) for p in paths if p]


def configure_environment(
    config: EnvironmentConfig,
    source: str | Path | None,
    cwd: str | Path | None = None,
) -> Environment:
    """Build the Jinja2 environment for one build.

    A fresh :class:`ModuleLoader` is created on every call.
    """
    cwd = Path(cwd) if cwd is not None else Path(os.getcwd())
    loaders: list[BaseLoader] = [
        ModuleLoader(
            search_paths_for(config, source),
            cwd=cwd,
            workspace_root=find_workspace_root(cwd, config.workspace_manifest),
            modules_dir=config.modules_dir,
            no_cache=config.no_cache,
        ),
    ]
    if config.custom_environment is not None:
        env = config.custom_environment(loaders, config, source)
    else:
        env = SiteEnvironment(loader=loaders[0], **config.options)

    if config.custom_filters:
        add_custom_filters(env, config.custom_filters)
    env.filters["raw"] = env.filters["safe"]

    return config.custom(env) if config.custom is not None else env
