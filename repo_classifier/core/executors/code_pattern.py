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
Structural code-pattern check.

Each resolved source file goes through two phases:

1. Pre-filter: a case-insensitive substring test of the raw text against the
   expected names. Every structural match implies the name occurs in the
   text, so skipping a file here never loses a hit.
2. Structural match: the file is parsed (under a per-file timeout) and the
   declarations are queried with one of six analysis subtypes.

Read failures, parse errors, timeouts and any other error raised while
matching a file count as "no match" for that file.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from ..models import AnalysisSubtype, Check, CheckType, ProjectFacts
from ..outcomes import FailureReason, Outcome, ParseResult
from ..patterns import PatternResolver
from ..static_analysis.matching import (
    ANNOTATION_SUFFIX,
    any_annotation_matches,
    return_type_matches,
    type_name_matches,
)
from ..static_analysis.parser.python_parser import (
    Declaration,
    DeclarationKind,
    PythonSyntaxParser,
    SyntaxParser,
    SyntaxTree,
)
from .base import BaseCheckExecutor

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_EXTENSIONS = (".py",)
DEFAULT_PARSE_TIMEOUT = 10.0

_ANNOTATION_KINDS = {
    AnalysisSubtype.CLASS_ANNOTATION: DeclarationKind.TYPE,
    AnalysisSubtype.METHOD_ANNOTATION: DeclarationKind.METHOD,
    AnalysisSubtype.PARAMETER_ANNOTATION: DeclarationKind.PARAMETER,
    AnalysisSubtype.PROPERTY_ANNOTATION: DeclarationKind.PROPERTY,
}


class CodePatternExecutor(BaseCheckExecutor):
    check_type = CheckType.CODE_PATTERN

    def __init__(
        self,
        resolver: PatternResolver | None = None,
        parser: SyntaxParser | None = None,
        source_extensions: Sequence[str] = DEFAULT_SOURCE_EXTENSIONS,
        parse_timeout: float | None = DEFAULT_PARSE_TIMEOUT,
        annotation_suffix: str = ANNOTATION_SUFFIX,
    ):
        super().__init__(resolver)
        self.parser = parser or PythonSyntaxParser()
        self.source_extensions = tuple(ext.casefold() for ext in source_extensions)
        self.parse_timeout = parse_timeout
        self.annotation_suffix = annotation_suffix

    def execute(self, check: Check, facts: ProjectFacts) -> Outcome:
        subtype = check.analysis_subtype
        if isinstance(subtype, str) and not isinstance(subtype, AnalysisSubtype):
            subtype = AnalysisSubtype.parse(subtype)
        if subtype is None:
            return Outcome.failure(
                FailureReason.UNSUPPORTED_SUBTYPE, f"Unsupported analysis subtype: {check.analysis_subtype}"
            )

        expected = [v.strip() for v in check.expected_values if v and v.strip()]
        if not expected:
            return Outcome.failure(FailureReason.NO_SEARCH_CRITERIA, "No expected names declared")

        return self.first_success(check.targets, lambda target: self._scan(target, facts, subtype, expected))

    def _scan(self, target: str, facts: ProjectFacts, subtype: AnalysisSubtype, expected: list[str]) -> Outcome:
        files = [f for f in self.resolver.resolve(target, facts.files) if f.casefold().endswith(self.source_extensions)]
        if not files:
            return Outcome.failure(FailureReason.NO_MATCHING_FILES, f"No source file matches '{target}'")

        fingerprints = [e.casefold() for e in expected]
        parsed_count = 0
        for path in files:
            try:
                parsed, hit = self._scan_file(facts, path, subtype, expected, fingerprints)
            except Exception as e:
                logger.debug("Skipping %s after %s: %s", path, type(e).__name__, e)
                continue
            parsed_count += parsed
            if hit is not None:
                return Outcome.success(
                    f"{subtype.value}: {hit.kind.value} '{hit.name}' in {path}:{hit.line_number}",
                    matched=path,
                )

        logger.debug("%s over %d file(s), %d parsed, no match", subtype.value, len(files), parsed_count)
        return Outcome.failure(FailureReason.NO_MATCH, f"No {subtype.value} match in {len(files)} file(s)")

    def _scan_file(
        self,
        facts: ProjectFacts,
        path: str,
        subtype: AnalysisSubtype,
        expected: list[str],
        fingerprints: list[str],
    ) -> tuple[bool, Declaration | None]:
        """Returns (parsed, first hit) for one file."""
        read = self.read_file(facts, path)
        if not read.ok:
            return False, None
        folded = read.content.casefold()
        if not any(fp in folded for fp in fingerprints):
            return False, None
        parsed = self.parse_source(path, read.content)
        if not parsed.ok:
            return False, None
        return True, self.find_declaration(parsed.tree, subtype, expected)

    def parse_source(self, path: str, content: str) -> ParseResult:
        """Parse one file, bounded by ``parse_timeout`` seconds when set."""
        if not self.parse_timeout or self.parse_timeout <= 0:
            return self._parse_now(path, content)

        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="repo-classifier-parse")
        try:
            future = pool.submit(self.parser.parse, content)
            tree = future.result(timeout=self.parse_timeout)
        except FutureTimeoutError:
            logger.warning("Parsing %s exceeded %.1fs, treating as no match", path, self.parse_timeout)
            return ParseResult(path=path, reason=FailureReason.PARSE_TIMEOUT)
        except Exception as e:
            logger.debug("Could not parse %s: %s", path, e)
            return ParseResult(path=path, reason=FailureReason.PARSE_ERROR, error=str(e))
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
        return ParseResult(path=path, tree=tree)

    def _parse_now(self, path: str, content: str) -> ParseResult:
        try:
            return ParseResult(path=path, tree=self.parser.parse(content))
        except Exception as e:
            logger.debug("Could not parse %s: %s", path, e)
            return ParseResult(path=path, reason=FailureReason.PARSE_ERROR, error=str(e))

    def find_declaration(self, tree: SyntaxTree, subtype: AnalysisSubtype, expected: list[str]) -> Declaration | None:
        """First declaration satisfying ``subtype``, in source order."""
        if subtype is AnalysisSubtype.CLASS_INHERITANCE:
            for decl in tree.types:
                if any(type_name_matches(base, e) for base in decl.base_types for e in expected):
                    return decl
            return None

        if subtype is AnalysisSubtype.METHOD_RETURN_TYPE:
            for decl in tree.methods:
                if any(return_type_matches(decl.return_type, e) for e in expected):
                    return decl
            return None

        for decl in tree.of_kind(_ANNOTATION_KINDS[subtype]):
            if any_annotation_matches(decl.annotations, expected, self.annotation_suffix):
                return decl
        return None
