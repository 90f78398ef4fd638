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
Tests for the JSON and Markdown reporters.
"""

import json

import pytest

from repo_classifier.core.models import CheckResult, DetectionResult, Report
from repo_classifier.core.outcomes import FailureReason
from repo_classifier.core.reporters.json_reporter import JSONReporter
from repo_classifier.core.reporters.markdown_reporter import MarkdownReporter


@pytest.fixture
def results():
    web = DetectionResult(
        project_name="shop",
        project_path="/repo/shop",
        project_type="web-service",
        check_results=(
            CheckResult("WEB-001", True, 3.0, details="Found dependency fastapi"),
            CheckResult("WEB-003", False, 3.0, details="a | b", reason=FailureReason.NO_MATCH),
        ),
        confidence=0.5,
        interpretation="Likely a web service",
        confidence_label="medium",
    )
    cli = DetectionResult(
        project_name="shop",
        project_path="/repo/shop",
        project_type="cli-tool",
        check_results=(CheckResult("CLI-001", False, 3.0, reason=FailureReason.NO_MATCH),),
        confidence=0.0,
        interpretation="Not a command-line tool",
        confidence_label="none",
    )
    return [web, cli]


@pytest.fixture
def report(results):
    report = Report()
    report.add_results("/repo/shop", results)
    report.add_error("/repo/broken", "No pyproject.toml or requirements.txt in /repo/broken")
    return report


class TestJSONReporter:
    def test_project_results(self, results):
        data = json.loads(JSONReporter().generate_report(results))
        assert [r["project_type"] for r in data["results"]] == ["web-service", "cli-tool"]
        assert data["results"][0]["check_results"][1]["reason"] == "no_match"

    def test_single_result(self, results):
        data = json.loads(JSONReporter().generate_report(results[0]))
        assert data["confidence"] == 0.5
        assert data["total_score"] == 3.0

    def test_report(self, report):
        data = json.loads(JSONReporter().generate_report(report))
        assert data["summary"]["total_projects"] == 2
        assert "/repo/broken" in data["errors"]

    def test_compact(self, results):
        output = JSONReporter(pretty=False).generate_report(results)
        assert "\n" not in output
        assert json.loads(output)["results"]


class TestMarkdownReporter:
    def test_project_report(self, results):
        output = MarkdownReporter(detailed=True).generate_report(results)
        assert output.startswith("# Project Type Detection Report")
        assert "**Best Match:** web-service (50%, medium)" in output
        assert "| WEB-003 | [FAIL] | 3 | a \\| b |" in output

    def test_summary_only(self, results):
        output = MarkdownReporter(detailed=False).generate_report(results)
        assert "| web-service | 50% | medium | 1/2 |" in output
        assert "| Check | Result |" not in output

    def test_empty_project_report(self):
        assert "No check list applied" in MarkdownReporter().generate_report([])

    def test_repository_report(self, report):
        output = MarkdownReporter(detailed=False).generate_report(report)
        assert "| shop | web-service | 50% | medium |" in output
        assert "| /repo/broken | _load error_ | - | - |" in output
        assert "## Errors" in output


class TestProjectReferences:
    @pytest.fixture
    def linked_report(self, results):
        report = Report(root="/repo")
        report.add_references("/repo/shop", ["/repo/libs/core"])
        report.add_references("/repo/libs/core", [])
        report.add_results("/repo/shop", results)
        report.add_skipped("/repo/libs/core")
        return report

    def test_json_includes_references(self, linked_report):
        data = json.loads(JSONReporter().generate_report(linked_report))
        assert data["entry_points"] == ["/repo/shop"]
        assert data["references"] == {"/repo/shop": ["/repo/libs/core"], "/repo/libs/core": []}
        assert data["skipped"] == ["/repo/libs/core"]
        assert data["summary"]["entry_points"] == 1

    def test_markdown_lists_references(self, linked_report):
        output = MarkdownReporter(detailed=False).generate_report(linked_report)
        assert "**Entry Points:** 1" in output
        assert "| shop | web-service | 50% | medium | yes |" in output
        assert "| libs/core | _not evaluated_ | - | - | no |" in output
        assert "## Project References" in output
        assert "- `shop` -> `libs/core`" in output
        assert "- `libs/core` -> (none)" in output

    def test_markdown_dependency_graph(self, linked_report):
        output = MarkdownReporter(detailed=False).generate_report(linked_report)
        assert "```mermaid\ngraph TD\n" in output
        assert 'p0["shop"] --> p1["libs/core"]' in output

    def test_no_reference_section_without_references(self, report):
        assert "## Project References" not in MarkdownReporter().generate_report(report)
