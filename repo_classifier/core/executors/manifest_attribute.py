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
Manifest-attribute check over pre-extracted toolchain and platform facts.

Only two targets exist: the build toolchain and the target platforms. The
manifest itself is never re-read here.
"""

import logging
import re

from ..models import Check, CheckType, ProjectFacts
from ..outcomes import FailureReason, Outcome
from .base import BaseCheckExecutor

logger = logging.getLogger(__name__)

TOOLCHAIN_TARGETS = frozenset({"toolchain", "build-backend", "build-system.build-backend", "project/@sdk"})
PLATFORM_TARGETS = frozenset(
    {"platform", "platforms", "target-platform", "project/propertygroup/targetframework"}
)


class ManifestAttributeExecutor(BaseCheckExecutor):
    check_type = CheckType.MANIFEST_ATTRIBUTE

    def execute(self, check: Check, facts: ProjectFacts) -> Outcome:
        target = check.target.strip().casefold()
        if target in TOOLCHAIN_TARGETS:
            return self._check_toolchain(check, facts)
        if target in PLATFORM_TARGETS:
            return self._check_platforms(check, facts)
        return Outcome.failure(FailureReason.UNSUPPORTED_TARGET, f"Unsupported manifest target: {check.target}")

    def _check_toolchain(self, check: Check, facts: ProjectFacts) -> Outcome:
        if not check.expected_values:
            return Outcome.failure(FailureReason.NO_SEARCH_CRITERIA, "No expected toolchain declared")
        toolchain = facts.toolchain.strip().casefold()
        if toolchain and any(toolchain == v.strip().casefold() for v in check.expected_values):
            return Outcome.success(f"Toolchain is {facts.toolchain}", matched=facts.toolchain)
        return Outcome.failure(FailureReason.NO_MATCH, f"Toolchain {facts.toolchain or '(none)'} not expected")

    def _check_platforms(self, check: Check, facts: ProjectFacts) -> Outcome:
        if check.pattern:
            try:
                regex = re.compile(check.pattern, re.IGNORECASE)
            except re.error as e:
                logger.warning("Check %s has an invalid pattern %r: %s", check.id, check.pattern, e)
                return Outcome.failure(FailureReason.INVALID_PATTERN, f"Invalid pattern: {e}")
            for platform in facts.platforms:
                if regex.search(platform):
                    return Outcome.success(f"Platform {platform} matches pattern", matched=platform)
        elif check.expected_values:
            expected = {v.strip().casefold() for v in check.expected_values}
            for platform in facts.platforms:
                if platform.casefold() in expected:
                    return Outcome.success(f"Platform {platform} declared", matched=platform)
        else:
            return Outcome.failure(FailureReason.NO_SEARCH_CRITERIA, "No expected platform declared")

        declared = ", ".join(facts.platforms) or "(none)"
        return Outcome.failure(FailureReason.NO_MATCH, f"Declared platforms {declared} do not match")
