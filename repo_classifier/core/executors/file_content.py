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
File-content check: regex or literal search over resolved files.

Strategy order is regex pattern, then literal expected value(s). A check
declaring neither fails with ``NO_SEARCH_CRITERIA``. Oversized files come
back from the reader as empty, so they fail for that file only.
"""

import logging
import re
from collections.abc import Callable

from ..models import Check, CheckType, ProjectFacts
from ..outcomes import FailureReason, Outcome
from .base import BaseCheckExecutor

logger = logging.getLogger(__name__)


class FileContentExecutor(BaseCheckExecutor):
    check_type = CheckType.FILE_CONTENT

    def execute(self, check: Check, facts: ProjectFacts) -> Outcome:
        predicate: Callable[[str], bool]
        if check.pattern:
            try:
                regex = re.compile(check.pattern, re.IGNORECASE | re.MULTILINE)
            except re.error as e:
                logger.warning("Check %s has an invalid pattern %r: %s", check.id, check.pattern, e)
                return Outcome.failure(FailureReason.INVALID_PATTERN, f"Invalid pattern: {e}")

            def predicate(text: str) -> bool:
                return regex.search(text) is not None

        else:
            needles = [v.casefold() for v in check.expected_values if v]
            if not needles:
                return Outcome.failure(
                    FailureReason.NO_SEARCH_CRITERIA,
                    "Content check declares neither a pattern nor an expected value",
                )

            def predicate(text: str) -> bool:
                folded = text.casefold()
                return any(needle in folded for needle in needles)

        return self.first_success(check.targets, lambda target: self._search(target, facts, predicate))

    def _search(self, target: str, facts: ProjectFacts, predicate: Callable[[str], bool]) -> Outcome:
        files = self.resolver.resolve(target, facts.files)
        if not files:
            return Outcome.failure(FailureReason.NO_MATCHING_FILES, f"No file matches '{target}'")

        for path in files:
            result = self.read_file(facts, path)
            if not result.ok:
                logger.debug("Skipping %s: %s", path, result.reason.value)
                continue
            if predicate(result.content):
                return Outcome.success(f"Content matched in {path}", matched=path)

        return Outcome.failure(FailureReason.NO_MATCH, f"No content match in {len(files)} file(s) for '{target}'")
