# Copyright 2026 Cisco Systems, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""
File-target resolution shared by the file, content and code-pattern checks.

A target is one of:

- ``dir/`` (trailing separator): every file inside ``dir`` at any depth
- a glob: ``*`` matches within one path segment, ``**`` across segments,
  ``?`` one character. Globs containing a separator match the full relative
  path; other globs match the file name alone.
- anything else: exact relative path

Case handling is fixed once per run by a :class:`PathPolicy`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import lru_cache

WILDCARD_CHARS = ("*", "?")


def normalize_path(path: str) -> str:
    """Forward slashes, no leading ``./`` or ``/``, no trailing ``/``."""
    normalized = path.strip().replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.strip("/")


def has_wildcard(target: str) -> bool:
    return any(ch in target for ch in WILDCARD_CHARS)


def glob_to_regex(pattern: str) -> str:
    """Translate a glob to an anchored regular expression.

    Everything except the wildcards is escaped. ``**/`` also matches zero
    directories so ``**/*.py`` covers files at the root.
    """
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "*":
            if pattern.startswith("**/", i):
                parts.append("(?:.*/)?")
                i += 3
                continue
            if pattern.startswith("**", i):
                parts.append(".*")
                i += 2
                continue
            parts.append("[^/]*")
        elif ch == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(ch))
        i += 1
    return "^" + "".join(parts) + "$"


@lru_cache(maxsize=512)
def _compile_glob(pattern: str, flags: int) -> re.Pattern[str]:
    return re.compile(glob_to_regex(pattern), flags)


@dataclass(frozen=True)
class PathPolicy:
    """Run-scoped case-sensitivity decision for path and name comparisons."""

    case_insensitive: bool = True

    @property
    def regex_flags(self) -> int:
        return re.IGNORECASE if self.case_insensitive else 0

    def key(self, value: str) -> str:
        return value.casefold() if self.case_insensitive else value

    def equals(self, left: str, right: str) -> bool:
        return self.key(left) == self.key(right)

    def glob_match(self, pattern: str, value: str) -> bool:
        """Match a single name (not a path) against a glob or literal."""
        if not has_wildcard(pattern):
            return self.equals(pattern, value)
        return _compile_glob(pattern, self.regex_flags).match(value) is not None


DEFAULT_POLICY = PathPolicy()


class PatternResolver:
    """Turns a declarative file target into the matching subset of a file list."""

    def __init__(self, policy: PathPolicy | None = None):
        self.policy = policy or DEFAULT_POLICY

    def resolve(self, target: str, files: Iterable[str]) -> list[str]:
        """
        Return the files matched by ``target``, in file-list order.

        Args:
            target: Exact path, directory (trailing ``/``) or glob
            files: Normalized relative paths of the project

        Returns:
            Matching paths; empty when the target is blank
        """
        if not target or not target.strip():
            return []
        raw = target.strip().replace("\\", "/")
        if raw.endswith("/"):
            return self._resolve_directory(normalize_path(raw), files)
        normalized = normalize_path(raw)
        if has_wildcard(normalized):
            return self._resolve_glob(normalized, files)
        wanted = self.policy.key(normalized)
        return [f for f in files if self.policy.key(f) == wanted]

    def resolve_any(self, targets: Sequence[str], files: Sequence[str]) -> tuple[str | None, list[str]]:
        """First target (in declared order) with a non-empty resolution."""
        for target in targets:
            matches = self.resolve(target, files)
            if matches:
                return target, matches
        return None, []

    def _resolve_directory(self, directory: str, files: Iterable[str]) -> list[str]:
        if not directory:
            return list(files)
        prefix = self.policy.key(directory) + "/"
        return [f for f in files if self.policy.key(f).startswith(prefix)]

    def _resolve_glob(self, pattern: str, files: Iterable[str]) -> list[str]:
        regex = _compile_glob(pattern, self.policy.regex_flags)
        if "/" in pattern:
            return [f for f in files if regex.match(f)]
        return [f for f in files if regex.match(f.rsplit("/", 1)[-1])]
