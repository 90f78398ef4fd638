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
Executor registry: one executor per :class:`CheckType` member.
"""

from __future__ import annotations

import logging

from ..config.config import Config
from .exceptions import RegistryError
from .executors.base import BaseCheckExecutor
from .executors.code_pattern import CodePatternExecutor
from .executors.dependency_reference import DependencyReferenceExecutor
from .executors.file_content import FileContentExecutor
from .executors.file_exists import FileExistsExecutor
from .executors.manifest_attribute import ManifestAttributeExecutor
from .models import CheckType
from .patterns import PathPolicy, PatternResolver
from .static_analysis.parser.python_parser import SyntaxParser

logger = logging.getLogger(__name__)


class ExecutorRegistry:
    """Maps check types to executors."""

    def __init__(self) -> None:
        self._executors: dict[CheckType, BaseCheckExecutor] = {}

    def register(self, executor: BaseCheckExecutor) -> None:
        if executor.check_type in self._executors:
            logger.debug("Replacing executor for %s", executor.check_type.value)
        self._executors[executor.check_type] = executor

    def get(self, check_type: CheckType | str) -> BaseCheckExecutor | None:
        """Executor for a type; unknown or unregistered types return None."""
        if not isinstance(check_type, CheckType):
            check_type = CheckType.parse(str(check_type))
            if check_type is None:
                return None
        return self._executors.get(check_type)

    def validate(self) -> None:
        """Raise unless every check type has an executor."""
        missing = [t.value for t in CheckType if t not in self._executors]
        if missing:
            raise RegistryError(f"No executor registered for: {', '.join(missing)}")

    def list_types(self) -> list[str]:
        return [t.value for t in self._executors]

    def __len__(self) -> int:
        return len(self._executors)

    def __contains__(self, check_type: object) -> bool:
        if isinstance(check_type, str) and not isinstance(check_type, CheckType):
            check_type = CheckType.parse(check_type)
        return check_type in self._executors


def build_default_registry(
    config: Config | None = None,
    parser: SyntaxParser | None = None,
    policy: PathPolicy | None = None,
) -> ExecutorRegistry:
    """
    Create a registry with the five built-in executors.

    Args:
        config: Parse timeout, source extensions and case policy
        parser: Syntax parser for code-pattern checks (Python ``ast`` by default)
        policy: Overrides the case policy derived from ``config``

    Returns:
        A validated registry
    """
    config = config or Config()
    resolver = PatternResolver(policy or PathPolicy(case_insensitive=config.case_insensitive_paths))

    registry = ExecutorRegistry()
    registry.register(FileExistsExecutor(resolver))
    registry.register(FileContentExecutor(resolver))
    registry.register(ManifestAttributeExecutor())
    registry.register(DependencyReferenceExecutor())
    registry.register(
        CodePatternExecutor(
            resolver,
            parser=parser,
            source_extensions=config.source_extensions,
            parse_timeout=config.parse_timeout_seconds,
            annotation_suffix=config.annotation_suffix,
        )
    )
    registry.validate()
    return registry
