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
Markdown format reporter for detection results.
"""

from ...core.models import CheckResult, DetectionResult, Report


class MarkdownReporter:
    """Generates Markdown format reports."""

    def __init__(self, detailed: bool = True):
        """
        Initialize Markdown reporter.

        Args:
            detailed: If True, include a per-check table for each result
        """
        self.detailed = detailed

    def generate_report(self, data: DetectionResult | list[DetectionResult] | Report) -> str:
        """
        Generate Markdown report.

        Args:
            data: One result, the results for one project, or a Report

        Returns:
            Markdown string
        """
        if isinstance(data, DetectionResult):
            return "\n".join(self._format_result(data, level=1))
        if isinstance(data, Report):
            return self._generate_repository_report(data)
        return self._generate_project_report(list(data))

    def _generate_project_report(self, results: list[DetectionResult]) -> str:
        lines = ["# Project Type Detection Report", ""]
        if not results:
            lines.append("No check list applied to this project.")
            return "\n".join(lines)

        best = results[0]
        lines.append(f"**Project:** {best.project_name}")
        lines.append(f"**Path:** {best.project_path}")
        lines.append(f"**Best Match:** {best.project_type} ({best.confidence:.0%}, {best.confidence_label})")
        lines.append("")
        lines.extend(self._summary_table(results))
        lines.append("")
        for result in results:
            lines.extend(self._format_result(result, level=2))
            lines.append("")
        return "\n".join(lines)

    def _generate_repository_report(self, report: Report) -> str:
        entry_points = report.entry_points
        lines = ["# Repository Detection Report", ""]
        lines.append(f"**Timestamp:** {report.timestamp.isoformat()}")
        lines.append(f"**Projects:** {len(report.projects)}")
        lines.append(f"**Entry Points:** {len(entry_points)}")
        lines.append("")

        lines.append("## Best Matches")
        lines.append("")
        lines.append("| Project | Type | Confidence | Label | Entry Point |")
        lines.append("|---------|------|------------|-------|-------------|")
        for project in report.projects:
            entry = "yes" if project in entry_points else "no"
            if project in report.errors:
                lines.append(f"| {project} | _load error_ | - | - | {entry} |")
                continue
            if project in report.skipped:
                lines.append(f"| {report.relative_path(project)} | _not evaluated_ | - | - | {entry} |")
                continue
            best = report.best_match(project)
            if best is None:
                lines.append(f"| {report.relative_path(project)} | _none_ | - | - | {entry} |")
            else:
                lines.append(
                    f"| {best.project_name} | {best.project_type} | {best.confidence:.0%} "
                    f"| {best.confidence_label} | {entry} |"
                )
        lines.append("")

        if any(report.references.values()):
            lines.extend(self._references_section(report))

        if report.errors:
            lines.append("## Errors")
            lines.append("")
            for project, message in report.errors.items():
                lines.append(f"- `{project}`: {message}")
            lines.append("")

        if self.detailed:
            for result in report.results:
                lines.extend(self._format_result(result, level=2))
                lines.append("")
        return "\n".join(lines)

    @staticmethod
    def _references_section(report: Report) -> list[str]:
        lines = ["## Project References", ""]
        for project, refs in report.references.items():
            targets = ", ".join(f"`{report.relative_path(ref)}`" for ref in refs) or "(none)"
            lines.append(f"- `{report.relative_path(project)}` -> {targets}")
        lines.append("")

        # node ids are positional; labels carry the paths
        node_ids: dict[str, str] = {}

        def node(path: str) -> str:
            if path not in node_ids:
                node_ids[path] = f"p{len(node_ids)}"
            label = report.relative_path(path).replace('"', "'")
            return f'{node_ids[path]}["{label}"]'

        lines.append("```mermaid")
        lines.append("graph TD")
        for project, refs in report.references.items():
            if not refs:
                lines.append(f"    {node(project)}")
            for ref in refs:
                lines.append(f"    {node(project)} --> {node(ref)}")
        lines.append("```")
        lines.append("")
        return lines

    @staticmethod
    def _summary_table(results: list[DetectionResult]) -> list[str]:
        lines = ["| Project Type | Confidence | Label | Checks |", "|--------------|------------|-------|--------|"]
        for result in results:
            lines.append(
                f"| {result.project_type} | {result.confidence:.0%} | {result.confidence_label} "
                f"| {len(result.passed_checks)}/{len(result.check_results)} |"
            )
        return lines

    def _format_result(self, result: DetectionResult, level: int) -> list[str]:
        heading = "#" * level
        lines = [f"{heading} {result.project_name}: {result.project_type}", ""]
        lines.append(f"- **Confidence:** {result.confidence:.2%} ({result.confidence_label})")
        lines.append(f"- **Interpretation:** {result.interpretation}")
        lines.append(f"- **Score:** {result.total_score:g} / {result.max_possible_score:g}")
        if result.missing_checks:
            lines.append(f"- **Missing critical checks:** {', '.join(result.missing_checks)}")
        if self.detailed and result.check_results:
            lines.append("")
            lines.append("| Check | Result | Weight | Details |")
            lines.append("|-------|--------|--------|---------|")
            for check in result.check_results:
                lines.append(self._format_check_row(check))
        return lines

    @staticmethod
    def _format_check_row(check: CheckResult) -> str:
        status = "[OK]" if check.passed else "[FAIL]"
        details = check.details.replace("|", "\\|")
        return f"| {check.check_id} | {status} | {check.weight:g} | {details} |"
