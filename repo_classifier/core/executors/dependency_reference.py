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
Dependency-reference check over the project's declared dependencies.

For the target and then each alternative, in order:

1. exact name match (case-insensitive, ``-``/``_``/``.`` runs equivalent)
2. grouped expansion: for umbrella names such as ``zope``, any dependency
   named ``zope.<something>`` counts
3. wildcard target: anchored glob over all dependency names, with both sides
   normalized the same way as exact matches

Independently of the declared list, a fixed table marks build backends as
implicitly present when the project's toolchain is that backend.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from ..models import Check, CheckType, ProjectFacts
from ..outcomes import FailureReason, Outcome
from ..patterns import PathPolicy, has_wildcard
from .base import BaseCheckExecutor

logger = logging.getLogger(__name__)

GROUPED_DEPENDENCIES = frozenset({"zope", "jaraco", "backports", "ruamel", "plone", "collective", "sphinxcontrib"})

# dependency name -> toolchain identifier that brings it in implicitly
IMPLICIT_DEPENDENCIES: Mapping[str, str] = {
    "setuptools": "setuptools.build_meta",
    "hatchling": "hatchling.build",
    "poetry-core": "poetry.core.masonry.api",
    "flit-core": "flit_core.buildapi",
    "pdm-backend": "pdm.backend",
}

_NAME_POLICY = PathPolicy(case_insensitive=True)
_SEPARATOR_RUN = re.compile(r"[-_.]+")


def canonical_name(name: str) -> str:
    return _SEPARATOR_RUN.sub("-", name.strip()).casefold()


class DependencyReferenceExecutor(BaseCheckExecutor):
    check_type = CheckType.DEPENDENCY_REFERENCE

    def __init__(
        self,
        implicit_dependencies: Mapping[str, str] | None = None,
        grouped_dependencies: Iterable[str] | None = None,
    ):
        super().__init__()
        table = IMPLICIT_DEPENDENCIES if implicit_dependencies is None else implicit_dependencies
        self.implicit_dependencies = {canonical_name(k): v.casefold() for k, v in table.items()}
        groups = GROUPED_DEPENDENCIES if grouped_dependencies is None else grouped_dependencies
        self.grouped_dependencies = frozenset(g.casefold() for g in groups)

    def execute(self, check: Check, facts: ProjectFacts) -> Outcome:
        names = facts.dependency_names
        targets = [t.strip() for t in check.targets if t and t.strip()]
        if not targets:
            return Outcome.failure(FailureReason.NO_SEARCH_CRITERIA, "No dependency name declared")

        for target in targets:
            matched = self._match_target(target, names)
            if matched:
                return Outcome.success(f"Found dependency {matched}", matched=matched)

        toolchain = facts.toolchain.strip().casefold()
        if toolchain:
            for target in targets:
                if self.implicit_dependencies.get(canonical_name(target)) == toolchain:
                    return Outcome.success(f"{target} is implied by toolchain {facts.toolchain}", matched=target)

        return Outcome.failure(FailureReason.NO_MATCH, f"No dependency matches {', '.join(targets)}")

    def _match_target(self, target: str, names: list[str]) -> str | None:
        wanted = canonical_name(target)
        for name in names:
            if canonical_name(name) == wanted:
                return name

        if target.casefold() in self.grouped_dependencies:
            prefix = target.casefold() + "."
            for name in names:
                if name.casefold().startswith(prefix):
                    return name

        if has_wildcard(target):
            for name in names:
                if _NAME_POLICY.glob_match(wanted, canonical_name(name)):
                    return name
        return None
