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
Discovers check-list documents under a root and selects those that apply.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..config.constants import RepoClassifierConstants
from .exceptions import ChecklistLoadError
from .loader import ChecklistLoader
from .models import CheckList
from .patterns import PathPolicy

logger = logging.getLogger(__name__)

_POLICY = PathPolicy(case_insensitive=True)


def _matches_any(patterns: Sequence[str], values: Sequence[str]) -> bool:
    return any(_POLICY.glob_match(p, v) for p in patterns for v in values)


class ChecklistProvider:
    """Loads every check list under ``root`` once and filters per project."""

    def __init__(self, root: str | Path | None = None, strict: bool = True):
        self.root = Path(root) if root else RepoClassifierConstants.CHECKLISTS_DIR
        self.loader = ChecklistLoader(strict=strict)
        self._checklists: list[CheckList] | None = None
        self.errors: dict[str, str] = {}

    def discover(self) -> list[Path]:
        """Check-list documents under the root, sorted by path."""
        if self.root.is_file():
            return [self.root]
        if not self.root.is_dir():
            return []
        return sorted(
            p for p in self.root.rglob("*") if p.is_file() and p.suffix.lower() in RepoClassifierConstants.CHECKLIST_EXTENSIONS
        )

    def load_all(self) -> list[CheckList]:
        """
        Load (and cache) every document under the root.

        A document that fails to load is skipped with a warning and recorded
        in ``errors``; it does not hide the others.
        """
        if self._checklists is not None:
            return self._checklists

        checklists: list[CheckList] = []
        for path in self.discover():
            try:
                checklists.append(self.loader.load(path))
            except ChecklistLoadError as e:
                logger.warning("Skipping check list %s: %s", path, e)
                self.errors[str(path)] = str(e)
        logger.debug("Loaded %d check list(s) from %s", len(checklists), self.root)
        self._checklists = checklists
        return checklists

    def get_checklists(self, toolchain: str = "", platforms: Sequence[str] = ()) -> list[CheckList]:
        """
        Check lists applicable to a project.

        A document with no ``appliesTo`` globs applies everywhere. Otherwise
        each declared dimension must match: a toolchain glob against the
        project's toolchain, a platform glob against any declared platform.
        """
        applicable = []
        for checklist in self.load_all():
            meta = checklist.metadata
            if meta.applies_to_toolchains and not _matches_any(meta.applies_to_toolchains, [toolchain]):
                continue
            if meta.applies_to_platforms and not _matches_any(meta.applies_to_platforms, list(platforms)):
                continue
            applicable.append(checklist)
        return applicable

    def get_by_type(self, project_type: str) -> CheckList | None:
        for checklist in self.load_all():
            if checklist.project_type.casefold() == project_type.casefold():
                return checklist
        return None
