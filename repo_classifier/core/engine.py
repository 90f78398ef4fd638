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
Detection engine: runs a check list against project facts.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path

from ..config.config import Config
from .checklist_provider import ChecklistProvider
from .exceptions import ProjectLoadError
from .models import Check, CheckList, CheckResult, DetectionResult, ProjectFacts, Report
from .outcomes import FailureReason, Outcome
from .patterns import PathPolicy
from .project_loader import ProjectLoader, discover_projects, resolve_references
from .registry import ExecutorRegistry, build_default_registry
from .scoring import compute_confidence, interpret

logger = logging.getLogger(__name__)

_PLATFORM_POLICY = PathPolicy(case_insensitive=True)


class DetectionEngine:
    """Evaluates check lists against projects and assembles detection results."""

    def __init__(
        self,
        registry: ExecutorRegistry | None = None,
        config: Config | None = None,
        max_workers: int | None = None,
    ):
        """
        Initialize the engine.

        Args:
            registry: Executors by check type. If None, the five built-ins.
            config: Run configuration. If None, defaults plus environment.
            max_workers: Checks evaluated concurrently; overrides config.
        """
        self.config = config or Config()
        self.registry = registry if registry is not None else build_default_registry(self.config)
        self.max_workers = max(1, max_workers if max_workers is not None else self.config.max_workers)

    def evaluate(self, facts: ProjectFacts, checklist: CheckList) -> DetectionResult:
        """
        Run every applicable check and score the project.

        Never raises for a defective check: unknown types and executor
        errors become failed results.

        Args:
            facts: Project snapshot
            checklist: Checks and interpretation rules for one project type

        Returns:
            DetectionResult with results in check declaration order
        """
        start_time = time.time()
        timestamp = datetime.now()
        checks = self.applicable_checks(checklist, facts)
        skipped = len(checklist.checks) - len(checks)
        if skipped:
            logger.debug("%d check(s) of %s not applicable to %s", skipped, checklist.project_type, facts.name)

        if self.max_workers > 1 and len(checks) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="repo-classifier") as pool:
                results = tuple(pool.map(lambda c: self.run_check(c, facts), checks))
        else:
            results = tuple(self.run_check(check, facts) for check in checks)

        confidence = compute_confidence(results)
        interpretation = interpret(confidence, results, checklist.interpretation_rules)

        logger.info(
            "%s as %s: %.2f (%s)", facts.name, checklist.project_type, confidence, interpretation.label
        )
        return DetectionResult(
            project_name=facts.name,
            project_path=facts.path,
            project_type=checklist.project_type,
            check_results=results,
            confidence=confidence,
            interpretation=interpretation.text,
            confidence_label=interpretation.label,
            missing_checks=interpretation.missing_checks,
            timestamp=timestamp,
            duration_seconds=time.time() - start_time,
        )

    def evaluate_all(self, facts: ProjectFacts, checklists: list[CheckList]) -> list[DetectionResult]:
        """Evaluate several check lists, best match first (stable on ties)."""
        results = [self.evaluate(facts, checklist) for checklist in checklists]
        return sorted(results, key=lambda r: r.confidence, reverse=True)

    @staticmethod
    def is_applicable(check: Check, platforms: tuple[str, ...]) -> bool:
        """A check applies when it has no platform filter or a filter glob matches a platform."""
        if not check.platform_filter:
            return True
        return any(_PLATFORM_POLICY.glob_match(p, platform) for p in check.platform_filter for platform in platforms)

    def applicable_checks(self, checklist: CheckList, facts: ProjectFacts) -> list[Check]:
        return [check for check in checklist.checks if self.is_applicable(check, facts.platforms)]

    def run_check(self, check: Check, facts: ProjectFacts) -> CheckResult:
        """Execute one check, converting every failure mode into a result."""
        executor = self.registry.get(check.type)
        if executor is None:
            outcome = Outcome.failure(
                FailureReason.UNKNOWN_CHECK_TYPE, f"No executor found for check type: {check.type_name}"
            )
        else:
            try:
                outcome = executor.execute(check, facts)
            except Exception as e:
                logger.error("Check %s failed on %s: %s", check.id, facts.name, e)
                outcome = Outcome.failure(FailureReason.EXECUTOR_ERROR, f"Error executing check: {e}")

        if not outcome.passed:
            logger.debug("Check %s failed: %s", check.id, outcome.detail)
        return CheckResult(
            check_id=check.id,
            passed=outcome.passed,
            weight=check.weight,
            category=check.category,
            description=check.description,
            details=outcome.detail,
            reason=outcome.reason,
        )

    # ------------------------------------------------------------------
    # Filesystem entry points
    # ------------------------------------------------------------------

    def detect_project(
        self, project_dir: str | Path, provider: ChecklistProvider | None = None
    ) -> list[DetectionResult]:
        """
        Load a project from disk and evaluate every applicable check list.

        Raises:
            ProjectLoadError: If the project has no readable manifest
        """
        provider = provider or self._default_provider()
        return self.detect_facts(ProjectLoader(self.config).load_project(project_dir), provider)

    def detect_facts(self, facts: ProjectFacts, provider: ChecklistProvider) -> list[DetectionResult]:
        checklists = provider.get_checklists(facts.toolchain, facts.platforms)
        if not checklists:
            logger.warning("No check lists apply to %s", facts.name)
        return self.evaluate_all(facts, checklists)

    def detect_repository(
        self,
        repo_dir: str | Path,
        exclude_keywords: list[str] | None = None,
        provider: ChecklistProvider | None = None,
        entry_points_only: bool = False,
    ) -> Report:
        """
        Discover every project under a repository and evaluate each.

        Projects are linked through their local path dependencies. Per-project
        load failures are recorded on the report and do not stop the run.

        Args:
            repo_dir: Repository root
            exclude_keywords: Skip projects whose relative path contains any of these
            provider: Check-list source; built from config if None
            entry_points_only: Evaluate only projects no other project references

        Returns:
            Report with results, references and load errors
        """
        repo_dir = Path(repo_dir)
        if not repo_dir.exists():
            raise FileNotFoundError(f"Directory does not exist: {repo_dir}")

        provider = provider or self._default_provider()
        loader = ProjectLoader(self.config)
        report = Report(root=str(repo_dir))
        project_dirs = discover_projects(repo_dir, exclude_keywords, self.config.excluded_directories)
        known = {project_dir.resolve(): str(project_dir) for project_dir in project_dirs}

        loaded: list[ProjectFacts] = []
        for project_dir in project_dirs:
            try:
                facts = loader.load_project(project_dir)
            except ProjectLoadError as e:
                logger.warning("Failed to load %s: %s", project_dir, e)
                report.add_error(str(project_dir), str(e))
                continue
            report.add_references(facts.path, resolve_references(facts, known))
            loaded.append(facts)

        entry_points = set(report.entry_points)
        logger.info("%d project(s), %d entry point(s) under %s", len(report.projects), len(entry_points), repo_dir)
        for facts in loaded:
            if entry_points_only and facts.path not in entry_points:
                logger.debug("Skipping %s: referenced by %s", facts.path, report.referenced_by(facts.path))
                report.add_skipped(facts.path)
                continue
            report.add_results(facts.path, self.detect_facts(facts, provider))
        return report

    def _default_provider(self) -> ChecklistProvider:
        return ChecklistProvider(self.config.checklist_dir, strict=self.config.strict_checklists)


def detect_project(project_dir: str | Path, config: Config | None = None) -> list[DetectionResult]:
    """
    Convenience function to classify a single project.

    Args:
        project_dir: Directory holding pyproject.toml or requirements.txt
        config: Optional run configuration

    Returns:
        Detection results, best match first
    """
    return DetectionEngine(config=config).detect_project(project_dir)


def detect_repository(
    repo_dir: str | Path,
    exclude_keywords: list[str] | None = None,
    config: Config | None = None,
    entry_points_only: bool = False,
) -> Report:
    """Convenience function to classify every project in a repository."""
    return DetectionEngine(config=config).detect_repository(
        repo_dir, exclude_keywords, entry_points_only=entry_points_only
    )
