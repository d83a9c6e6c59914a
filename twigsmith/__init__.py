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

"""Compose page templates with shared layouts in a static site build.

Usage::

    from twigsmith import TwigPlugin, read_files

    files = read_files("src")
    TwigPlugin({"defaultLayout": "base"})(files, metadata={"title": "Site"}, source="src")
"""

from twigsmith.config import EnvironmentConfig, PluginConfig
from twigsmith.errors import ConfigurationError, TemplateResolutionError, TwigsmithError
from twigsmith.files import SiteFile, strip_front_matter
from twigsmith.plugin import TwigPlugin, twig_plugin
from twigsmith.site import build, read_files, write_files

__all__ = [
    "ConfigurationError",
    "EnvironmentConfig",
    "PluginConfig",
    "SiteFile",
    "TemplateResolutionError",
    "TwigPlugin",
    "TwigsmithError",
    "build",
    "read_files",
    "strip_front_matter",
    "twig_plugin",
    "write_files",
]
