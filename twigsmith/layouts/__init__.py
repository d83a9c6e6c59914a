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

"""Layout registry, block detection and page composition.

Usage::

    from twigsmith.layouts import classify, validate_layouts, compose_page

    registry, pages = classify(files, ["layouts/*.twig"], ["**/*.twig"])
    validate_layouts(registry, "default-layout", "static-layout")
    source = compose_page(pages["index.twig"], registry)
"""

from twigsmith.layouts.composer import compose_page, render_static, wrap_in_block
from twigsmith.layouts.registry import (
    LayoutEntry,
    build_layout_registry,
    classify,
    collect_pages,
    validate_layouts,
)
from twigsmith.layouts.scanner import contains_block

__all__ = [
    "LayoutEntry",
    "build_layout_registry",
    "collect_pages",
    "classify",
    "validate_layouts",
    "contains_block",
    "compose_page",
    "render_static",
    "wrap_in_block",
]
