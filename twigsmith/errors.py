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

"""Exceptions raised during a site build.

Every error here is fatal to the build pass: a static site is either
rendered completely or not at all.
"""

from __future__ import annotations

from jinja2 import TemplateNotFound


class TwigsmithError(Exception):
    """Base class for twigsmith errors."""


class ConfigurationError(TwigsmithError, ValueError):
    """Invalid plugin configuration (unknown layout, bad filter reference)."""


class TemplateResolutionError(TemplateNotFound, TwigsmithError):
    """A template name could not be found by any loader strategy."""
