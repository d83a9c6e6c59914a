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

"""Glob matching of file-map paths.

Patterns are applied in order.  A pattern starting with ``!`` removes
paths matched so far; a leading ``**/`` also matches files at the root,
so ``**/*.twig`` covers ``index.twig`` as well as ``pages/about.twig``.
As with :mod:`fnmatch`, ``*`` also matches across ``/``.
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable, Sequence


def _normalize(patterns: str | Sequence[str]) -> list[str]:
    if isinstance(patterns, str):
        return [patterns]
    return list(patterns)


def path_matches(path: str, pattern: str) -> bool:
    """Return ``True`` if *path* matches a single (non-negated) *pattern*."""
    if fnmatch.fnmatchcase(path, pattern):
        return True
    if pattern.startswith("**/"):
        return path_matches(path, pattern[3:])
    return False


def match_paths(paths: Iterable[str], patterns: str | Sequence[str]) -> list[str]:
    """Return the subset of *paths* matching *patterns*.

    Results are grouped by the first positive pattern that matched them,
    and keep input order within each group.
    """
    paths = list(paths)
    matched: list[str] = []
    for pattern in _normalize(patterns):
        if pattern.startswith("!"):
            negated = pattern[1:]
            matched = [path for path in matched if not path_matches(path, negated)]
            continue
        seen = set(matched)
        matched.extend(
            path for path in paths if path not in seen and path_matches(path, pattern)
        )
    return matched
