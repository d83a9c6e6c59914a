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

"""Jinja2 environment and template loading for site builds.

Usage::

    from twigsmith.config import EnvironmentConfig
    from twigsmith.templates import configure_environment, render_source

    env = configure_environment(EnvironmentConfig(paths=["src"]), source="src")
    html = render_source(env, "{% extends 'layouts/base.twig' %}", {}, "index.twig")
"""

from twigsmith.templates.environment import (
    SiteEnvironment,
    add_custom_filters,
    configure_environment,
    load_filter,
    render_source,
)
from twigsmith.templates.loader import ModuleLoader, find_workspace_root

__all__ = [
    "ModuleLoader",
    "SiteEnvironment",
    "add_custom_filters",
    "configure_environment",
    "find_workspace_root",
    "load_filter",
    "render_source",
]
