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

"""Detect ``{% block name %}`` declarations from the raw token stream.

Only the lexer runs, so a template that would fail to parse (unclosed
blocks, unknown tags) can still be inspected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from jinja2 import Environment, TemplateSyntaxError

logger = logging.getLogger(__name__)

_lexing_env = Environment()


def _tokens(source: str, environment: Environment) -> Iterator[tuple[str, str]]:
    try:
        for _, token_type, value in environment.lex(source):
            yield token_type, value
    except TemplateSyntaxError as exc:
        logger.debug("Lexing stopped early: %s", exc)


def contains_block(
    source: str,
    block_name: str,
    environment: Environment | None = None,
) -> bool:
    """Return ``True`` if *source* opens a block called *block_name*."""
    tokens = _tokens(source, environment or _lexing_env)
    for token_type, _ in tokens:
        if token_type != "block_begin":
            continue
        token = next(tokens, None)
        if token is not None and token[0] == "whitespace":
            token = next(tokens, None)
        if token != ("name", "block"):
            continue
        token = next(tokens, None)
        if token is not None and token[0] == "whitespace":
            token = next(tokens, None)
        if token == ("name", block_name):
            return True
    return False
