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
Base class for check executors.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from ..models import Check, CheckType, ProjectFacts
from ..outcomes import FailureReason, Outcome, ReadResult
from ..patterns import PatternResolver

logger = logging.getLogger(__name__)


class BaseCheckExecutor(ABC):
    """Abstract base class for the five check strategies.

    Executors hold no per-evaluation state, so one instance may serve
    concurrent checks.
    """

    check_type: CheckType

    def __init__(self, resolver: PatternResolver | None = None):
        self.resolver = resolver or PatternResolver()

    @abstractmethod
    def execute(self, check: Check, facts: ProjectFacts) -> Outcome:
        """
        Evaluate one check against a project.

        Args:
            check: The check to evaluate
            facts: Read-only project snapshot

        Returns:
            Outcome with a typed failure reason when the check does not pass
        """
        pass

    def get_name(self) -> str:
        return self.check_type.value

    @staticmethod
    def first_success(targets: tuple[str, ...], evaluate: Callable[[str], Outcome]) -> Outcome:
        """Try each target in declared order; the first passing outcome wins.

        When every target fails, the primary target's failure is returned.
        """
        first_failure: Outcome | None = None
        for target in targets:
            if not target:
                continue
            outcome = evaluate(target)
            if outcome.passed:
                return outcome
            if first_failure is None:
                first_failure = outcome
        return first_failure or Outcome.failure(FailureReason.NO_MATCHING_FILES, "No target declared")

    @staticmethod
    def read_file(facts: ProjectFacts, path: str) -> ReadResult:
        try:
            return facts.reader.read(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s in %s: %s", path, facts.name, e)
            return ReadResult(path=path, reason=FailureReason.READ_ERROR)
