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
Typed step results for reading, parsing and check execution.

Each step (resolve, read, parse, match) returns one of these values instead
of raising, so a failure cause is an enum member rather than message text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FailureReason(str, Enum):
    """Why a step did not succeed."""

    NO_MATCHING_FILES = "no_matching_files"
    NO_MATCH = "no_match"
    NO_SEARCH_CRITERIA = "no_search_criteria"
    UNSUPPORTED_TARGET = "unsupported_target"
    UNSUPPORTED_SUBTYPE = "unsupported_subtype"
    UNKNOWN_CHECK_TYPE = "unknown_check_type"
    INVALID_PATTERN = "invalid_pattern"
    READ_ERROR = "read_error"
    FILE_TOO_LARGE = "file_too_large"
    PARSE_ERROR = "parse_error"
    PARSE_TIMEOUT = "parse_timeout"
    EXECUTOR_ERROR = "executor_error"

    @property
    def is_configuration_defect(self) -> bool:
        return self in _CONFIGURATION_DEFECTS


_CONFIGURATION_DEFECTS = frozenset(
    {
        FailureReason.NO_SEARCH_CRITERIA,
        FailureReason.UNSUPPORTED_TARGET,
        FailureReason.UNSUPPORTED_SUBTYPE,
        FailureReason.UNKNOWN_CHECK_TYPE,
        FailureReason.INVALID_PATTERN,
    }
)


@dataclass(frozen=True)
class Outcome:
    """Pass/fail verdict of one executor run."""

    passed: bool
    reason: FailureReason | None = None
    detail: str = ""
    matched: str | None = None
    """The file, dependency or fact that satisfied the check, when passed."""

    @classmethod
    def success(cls, detail: str = "Check passed", matched: str | None = None) -> Outcome:
        return cls(passed=True, detail=detail, matched=matched)

    @classmethod
    def failure(cls, reason: FailureReason, detail: str = "") -> Outcome:
        return cls(passed=False, reason=reason, detail=detail or "Check failed")


@dataclass(frozen=True)
class ReadResult:
    """Content of one project file, or why it could not be read."""

    path: str
    content: str = ""
    reason: FailureReason | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class ParseResult:
    """Syntax tree for one source file, or why parsing failed."""

    path: str
    tree: Any = None
    reason: FailureReason | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.reason is None
