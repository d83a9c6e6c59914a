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

"""In-memory site files and front-matter handling.

A build operates on a *file map*: an insertion-ordered ``dict`` from a
POSIX-style relative path to a :class:`SiteFile`.  The host pipeline owns
the map; the plugin mutates it in place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import yaml

# Leading "---" (or "= yaml =") block, closed by the same marker or "...".
FRONT_MATTER_RE = re.compile(
    r"\A\ufeff?(= yaml =|---)$(.*?)^(?:\1|\.\.\.)$\r?\n?",
    re.MULTILINE | re.DOTALL,
)


def strip_front_matter(text: str) -> str:
    """Remove a leading front-matter block from *text*.

    Text without front matter is returned unchanged.
    """
    return FRONT_MATTER_RE.sub("", text, count=1)


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split *text* into parsed front matter and the remaining body.

    Front matter that is empty or not a YAML mapping yields ``{}``.
    Malformed YAML raises :class:`yaml.YAMLError`.
    """
    match = FRONT_MATTER_RE.match(text)
    if match is None:
        return {}, text
    data = yaml.safe_load(match.group(2)) or {}
    if not isinstance(data, dict):
        data = {}
    return data, text[match.end():]


@dataclass
class SiteFile:
    """A file travelling through the build: raw bytes plus metadata."""

    contents: bytes
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.contents.decode("utf-8")

    @property
    def body(self) -> str:
        """Decoded contents with any front matter removed."""
        return strip_front_matter(self.text)

    @property
    def layout(self) -> str | None:
        return self.metadata.get("layout")

    @property
    def layout_name(self) -> str | None:
        return self.metadata.get("layoutName") or self.metadata.get("layout_name")

    @property
    def static(self) -> bool:
        return bool(self.metadata.get("static", False))

    def attributes(self) -> dict[str, Any]:
        """Return the file's attributes as a flat mapping for render contexts."""
        return {**self.metadata, "contents": self.contents}
