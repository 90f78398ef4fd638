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
Data models for check lists, project facts and detection results.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from .outcomes import FailureReason, ReadResult


class CheckType(str, Enum):
    """Closed set of check strategies. Each member has exactly one executor."""

    FILE_EXISTS = "FileExists"
    MANIFEST_ATTRIBUTE = "ManifestAttribute"
    FILE_CONTENT = "FileContent"
    DEPENDENCY_REFERENCE = "DependencyReference"
    CODE_PATTERN = "CodePattern"

    @classmethod
    def parse(cls, value: str) -> CheckType | None:
        """Resolve a declared type name (or legacy alias) to a member."""
        key = value.strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return _CHECK_TYPE_ALIASES.get(key)


_CHECK_TYPE_ALIASES = {
    "projectfile": CheckType.MANIFEST_ATTRIBUTE,
    "manifest": CheckType.MANIFEST_ATTRIBUTE,
    "nugetpackage": CheckType.DEPENDENCY_REFERENCE,
    "package": CheckType.DEPENDENCY_REFERENCE,
    "dependency": CheckType.DEPENDENCY_REFERENCE,
    "codeanalysis": CheckType.CODE_PATTERN,
}


class AnalysisSubtype(str, Enum):
    """Structural queries supported by the code-pattern executor."""

    CLASS_INHERITANCE = "ClassInheritance"
    CLASS_ANNOTATION = "ClassAnnotation"
    METHOD_ANNOTATION = "MethodAnnotation"
    PARAMETER_ANNOTATION = "ParameterAnnotation"
    PROPERTY_ANNOTATION = "PropertyAnnotation"
    METHOD_RETURN_TYPE = "MethodReturnType"

    @classmethod
    def parse(cls, value: str) -> AnalysisSubtype | None:
        key = value.strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        # "ClassAttribute" / "ClassDecorator" spellings
        for suffix in ("attribute", "decorator"):
            if key.endswith(suffix):
                return _SUBTYPE_BY_PREFIX.get(key[: -len(suffix)])
        return None


_SUBTYPE_BY_PREFIX = {
    "class": AnalysisSubtype.CLASS_ANNOTATION,
    "method": AnalysisSubtype.METHOD_ANNOTATION,
    "parameter": AnalysisSubtype.PARAMETER_ANNOTATION,
    "property": AnalysisSubtype.PROPERTY_ANNOTATION,
}


# ---------------------------------------------------------------------------
# Check lists
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Check:
    """One declarative rule: type, target, expectation and weight."""

    id: str
    type: CheckType | str
    """Unknown type names are kept verbatim when loading in lenient mode."""
    target: str = ""
    category: str = ""
    expected_values: tuple[str, ...] = ()
    pattern: str | None = None
    alternative_targets: tuple[str, ...] = ()
    analysis_subtype: AnalysisSubtype | str | None = None
    weight: float = 1.0
    description: str = ""
    platform_filter: tuple[str, ...] = ()

    @property
    def expected_value(self) -> str | None:
        return self.expected_values[0] if self.expected_values else None

    @property
    def targets(self) -> tuple[str, ...]:
        """Primary target followed by alternatives, in declared order."""
        return (self.target, *self.alternative_targets)

    @property
    def type_name(self) -> str:
        return self.type.value if isinstance(self.type, CheckType) else str(self.type)


@dataclass(frozen=True)
class Threshold:
    """Inclusive confidence range mapped to an interpretation."""

    min: float
    max: float
    interpretation: str
    confidence_label: str

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class InterpretationRules:
    thresholds: tuple[Threshold, ...] = ()
    minimum_checks_for_confidence: dict[str, tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class ChecklistMetadata:
    project_type: str
    schema_version: str = "1.0"
    description: str = ""
    last_updated: str = ""
    applies_to_toolchains: tuple[str, ...] = ()
    applies_to_platforms: tuple[str, ...] = ()


@dataclass(frozen=True)
class CheckList:
    """Ordered checks plus interpretation rules for one project type."""

    metadata: ChecklistMetadata
    interpretation_rules: InterpretationRules = field(default_factory=InterpretationRules)
    checks: tuple[Check, ...] = ()
    source_path: str | None = None

    @property
    def project_type(self) -> str:
        return self.metadata.project_type

    def get_check(self, check_id: str) -> Check | None:
        for check in self.checks:
            if check.id == check_id:
                return check
        return None


# ---------------------------------------------------------------------------
# Project facts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DependencyReference:
    """A declared dependency: distribution name plus version specifier."""

    name: str
    version: str = ""


class FileReader(Protocol):
    """Reads a project file by normalized relative path."""

    def read(self, relative_path: str) -> ReadResult: ...


@dataclass
class ProjectFacts:
    """Read-only snapshot of a project's manifest and file layout."""

    name: str
    path: str
    reader: FileReader
    toolchain: str = ""
    platforms: tuple[str, ...] = ()
    dependencies: tuple[DependencyReference, ...] = ()
    files: tuple[str, ...] = ()
    manifest_path: str | None = None
    # local path dependencies, relative to ``path`` unless absolute
    project_references: tuple[str, ...] = ()

    @property
    def dependency_names(self) -> list[str]:
        return [dep.name for dep in self.dependencies]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CheckResult:
    """Verdict for a single check. ``details`` is diagnostic text only."""

    check_id: str
    passed: bool
    weight: float
    category: str = ""
    description: str = ""
    details: str = ""
    reason: FailureReason | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "check_id": self.check_id,
            "passed": self.passed,
            "weight": self.weight,
            "category": self.category,
            "description": self.description,
            "details": self.details,
            "reason": self.reason.value if self.reason else None,
        }


@dataclass
class DetectionResult:
    """Outcome of evaluating one check list against one project."""

    project_name: str
    project_path: str
    project_type: str
    check_results: tuple[CheckResult, ...] = ()
    confidence: float = 0.0
    interpretation: str = ""
    confidence_label: str = ""
    missing_checks: tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=datetime.now)
    duration_seconds: float = 0.0

    @property
    def total_score(self) -> float:
        return sum(r.weight for r in self.check_results if r.passed)

    @property
    def max_possible_score(self) -> float:
        return sum(r.weight for r in self.check_results)

    @property
    def passed_checks(self) -> list[CheckResult]:
        return [r for r in self.check_results if r.passed]

    @property
    def failed_checks(self) -> list[CheckResult]:
        return [r for r in self.check_results if not r.passed]

    def get_result(self, check_id: str) -> CheckResult | None:
        for result in self.check_results:
            if result.check_id == check_id:
                return result
        return None

    def pass_vector(self) -> tuple[tuple[str, bool], ...]:
        """Check ids with their verdicts; stable across repeated runs."""
        return tuple((r.check_id, r.passed) for r in self.check_results)

    def to_dict(self) -> dict[str, Any]:
        """Convert detection result to dictionary."""
        return {
            "project_name": self.project_name,
            "project_path": self.project_path,
            "project_type": self.project_type,
            "confidence": round(self.confidence, 4),
            "confidence_label": self.confidence_label,
            "interpretation": self.interpretation,
            "total_score": self.total_score,
            "max_possible_score": self.max_possible_score,
            "missing_checks": list(self.missing_checks),
            "checks_passed": len(self.passed_checks),
            "checks_total": len(self.check_results),
            "check_results": [r.to_dict() for r in self.check_results],
            "duration_ms": int(self.duration_seconds * 1000),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class Report:
    """Aggregated detection results across one or more projects.

    ``references`` maps a project to the projects it depends on through local
    path dependencies. Projects that no other project references are the
    repository's entry points.
    """

    results: list[DetectionResult] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    references: dict[str, list[str]] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)
    root: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def _track(self, project_path: str):
        if project_path not in self.projects:
            self.projects.append(project_path)

    def add_results(self, project_path: str, results: list[DetectionResult]):
        """Record every check-list result for one project."""
        self._track(project_path)
        self.results.extend(results)

    def add_error(self, project_path: str, message: str):
        self._track(project_path)
        self.errors[project_path] = message

    def add_references(self, project_path: str, referenced: list[str]):
        self._track(project_path)
        self.references[project_path] = [p for p in referenced if p != project_path]

    def add_skipped(self, project_path: str):
        self._track(project_path)
        if project_path not in self.skipped:
            self.skipped.append(project_path)

    def referenced_by(self, project_path: str) -> list[str]:
        return [p for p in self.projects if project_path in self.references.get(p, ())]

    @property
    def entry_points(self) -> list[str]:
        """Projects no other project references, in discovery order."""
        referenced = {ref for refs in self.references.values() for ref in refs}
        return [p for p in self.projects if p not in referenced]

    def relative_path(self, project_path: str) -> str:
        """``project_path`` relative to the repository root, when below it."""
        if not self.root:
            return project_path
        try:
            return Path(project_path).relative_to(self.root).as_posix()
        except ValueError:
            return project_path

    def best_match(self, project_path: str) -> DetectionResult | None:
        """Highest-confidence result for a project; first declared wins ties."""
        best: DetectionResult | None = None
        for result in self.results:
            if result.project_path != project_path:
                continue
            if best is None or result.confidence > best.confidence:
                best = result
        return best

    @property
    def type_counts(self) -> Counter:
        """How many projects had each project type as their best match."""
        counts: Counter = Counter()
        for project in self.projects:
            best = self.best_match(project)
            if best is not None and best.confidence > 0:
                counts[best.project_type] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary."""
        return {
            "summary": {
                "total_projects": len(self.projects),
                "total_results": len(self.results),
                "failed_projects": len(self.errors),
                "best_matches": dict(self.type_counts),
                "entry_points": len(self.entry_points),
                "timestamp": self.timestamp.isoformat(),
            },
            "results": [result.to_dict() for result in self.results],
            "errors": dict(self.errors),
            "entry_points": self.entry_points,
            "references": {project: list(refs) for project, refs in self.references.items()},
            "skipped": list(self.skipped),
        }
