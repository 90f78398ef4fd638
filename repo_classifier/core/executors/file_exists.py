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

"""Passes when the target (or an alternative) resolves to at least one file."""

from ..models import Check, CheckType, ProjectFacts
from ..outcomes import FailureReason, Outcome
from .base import BaseCheckExecutor


class FileExistsExecutor(BaseCheckExecutor):
    check_type = CheckType.FILE_EXISTS

    def execute(self, check: Check, facts: ProjectFacts) -> Outcome:
        targets = [t for t in check.targets if t]
        target, matches = self.resolver.resolve_any(targets, facts.files)
        if matches:
            return Outcome.success(f"Found {matches[0]} for target '{target}'", matched=matches[0])
        return Outcome.failure(
            FailureReason.NO_MATCHING_FILES,
            f"No file matches {', '.join(repr(t) for t in targets) or 'an empty target'}",
        )
