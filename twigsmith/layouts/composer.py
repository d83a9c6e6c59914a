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

"""Compose page sources with their layouts.

Two strategies exist:

* **Inheritance** (:func:`compose_page`) — the page source is prefixed
  with an ``{% extends %}`` directive pointing at its layout.  Pages that
  never declare ``{% block body %}`` are wrapped in one, so a flat page
  still lands in the layout's ``body`` slot.
* **Static wrapping** (:func:`render_static`) — the page is rendered on
  its own, then handed to the static layout as a ready-made ``contents``
  string.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from jinja2 import Environment
from markupsafe import Markup

from twigsmith.config import DEFAULT_LAYOUT, NO_LAYOUT
from twigsmith.errors import ConfigurationError
from twigsmith.files import SiteFile
from twigsmith.layouts.registry import LayoutEntry
from twigsmith.layouts.scanner import _lexing_env, contains_block

logger = logging.getLogger(__name__)

BODY_BLOCK = "body"

# (source, context, template path) -> rendered text
RenderFunc = Callable[[str, dict[str, Any], str], str]


def extends_directive(layout: LayoutEntry, environment: Environment | None = None) -> str:
    env = environment or _lexing_env
    return f"{env.block_start_string} extends '{layout.file_name}' {env.block_end_string}\n"


def wrap_in_block(
    source: str,
    block_name: str = BODY_BLOCK,
    environment: Environment | None = None,
) -> str:
    env = environment or _lexing_env
    start, end = env.block_start_string, env.block_end_string
    return f"{start} block {block_name} {end}{source}{start} endblock {end}"


def compose_page(
    page: SiteFile,
    registry: dict[str, LayoutEntry],
    default_layout: str = DEFAULT_LAYOUT,
    environment: Environment | None = None,
    page_path: str | None = None,
) -> str:
    """Return the template source to render for *page*.

    Decision order:

    1. ``layout: none`` on the page — the body as is.
    2. ``layout`` naming a registered layout — extend that layout.
    3. *default_layout* is ``"none"`` — the body as is.
    4. Extend the default layout, wrapping the body in
       ``{% block body %}`` unless the page already declares it.

    Directives use the block delimiters of *environment*.
    """
    body = page.body
    if page.layout is not None and not isinstance(page.layout, str):
        raise ConfigurationError(
            f"Configuration error: page {page_path or '<unnamed>'} has layout "
            f"{page.layout!r}, expected a layout name"
        )
    if page.layout == NO_LAYOUT:
        return body
    if page.layout and page.layout in registry:
        return extends_directive(registry[page.layout], environment) + body
    if default_layout == NO_LAYOUT:
        return body

    layout = registry.get(DEFAULT_LAYOUT)
    if layout is None:
        raise ConfigurationError(
            f"Configuration error: no default layout registered for {default_layout!r}"
        )
    directive = extends_directive(layout, environment)
    if contains_block(body, BODY_BLOCK, environment):
        return directive + body
    return directive + wrap_in_block(body, BODY_BLOCK, environment)


def render_static(
    page: SiteFile,
    page_path: str,
    registry: dict[str, LayoutEntry],
    static_layout: str,
    context: dict[str, Any],
    render: RenderFunc,
) -> str:
    """Render *page* in isolation, then inside the static layout.

    The wrapper receives ``contents`` (the rendered page, marked safe)
    and ``context`` (the page's render context).
    """
    layout = registry.get(static_layout)
    if layout is None:
        raise ConfigurationError(
            f"Configuration error: static page {page_path} needs layout "
            f"{static_layout!r}, which does not exist"
        )
    inner = render(page.body, context, page_path)
    logger.debug("Wrapping static page %s in %s", page_path, layout.file_name)
    return render(
        layout.file.body,
        {"context": context, "contents": Markup(inner)},
        layout.file_name,
    )
