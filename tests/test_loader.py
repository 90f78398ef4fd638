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
Tests for check-list loading and validation.
"""

import json

import pytest

from repo_classifier.core.exceptions import ChecklistLoadError
from repo_classifier.core.loader import ChecklistLoader, load_checklist
from repo_classifier.core.models import AnalysisSubtype, CheckType


def document(*checks, **extra):
    doc = {
        "metadata": {"projectType": "web-service", "schemaVersion": "2.0"},
        "interpretationRules": {
            "thresholds": [
                {"min": 0.7, "max": 1.0, "interpretation": "Yes", "confidence": "high"},
                {"min": 0.0, "max": 0.7, "interpretation": "No", "confidenceLabel": "low"},
            ],
            "minimumChecksForConfidence": {"high": ["C-1"]},
        },
        "checks": list(checks) or [{"id": "C-1", "type": "FileExists", "target": "app.py"}],
    }
    doc.update(extra)
    return doc


class TestLoadDocument:
    def test_yaml_round_trip_of_fields(self, make_checklist_file):
        path = make_checklist_file(
            document(
                {
                    "id": "C-1",
                    "type": "CodePattern",
                    "category": "code",
                    "target": "**/*.py",
                    "alternativeTargets": ["src/**/*.py"],
                    "analysisSubtype": "MethodAttribute",
                    "expectedAttributes": ["get", "post"],
                    "weight": 3,
                    "description": "Routes",
                    "platformFilter": "python3*",
                }
            )
        )
        checklist = load_checklist(path)
        assert checklist.project_type == "web-service"
        assert checklist.metadata.schema_version == "2.0"
        assert checklist.source_path == str(path)

        check = checklist.checks[0]
        assert check.type is CheckType.CODE_PATTERN
        assert check.analysis_subtype is AnalysisSubtype.METHOD_ANNOTATION
        assert check.expected_values == ("get", "post")
        assert check.alternative_targets == ("src/**/*.py",)
        assert check.platform_filter == ("python3*",)
        assert check.weight == 3.0

    def test_json_document(self, make_checklist_file):
        path = make_checklist_file(json.dumps(document()), suffix=".json")
        assert load_checklist(path).checks[0].type is CheckType.FILE_EXISTS

    def test_thresholds_keep_declared_order(self, make_checklist_file):
        rules = load_checklist(make_checklist_file(document())).interpretation_rules
        assert [t.confidence_label for t in rules.thresholds] == ["high", "low"]
        assert rules.minimum_checks_for_confidence == {"high": ("C-1",)}

    def test_expected_value_keys_are_merged(self):
        checklist = ChecklistLoader().load_data(
            document(
                {
                    "id": "C-1",
                    "type": "CodePattern",
                    "analysisSubtype": "ClassInheritance",
                    "expectedValue": "Base",
                    "expectedBases": ["Base", "Other"],
                }
            )
        )
        assert checklist.checks[0].expected_values == ("Base", "Other")
        assert checklist.checks[0].expected_value == "Base"

    def test_legacy_type_alias(self):
        checklist = ChecklistLoader().load_data(
            document({"id": "C-1", "type": "NuGetPackage", "target": "fastapi"})
        )
        assert checklist.checks[0].type is CheckType.DEPENDENCY_REFERENCE

    def test_applies_to(self):
        doc = document()
        doc["metadata"]["appliesTo"] = {"toolchains": "hatchling*", "platforms": ["python3*"]}
        meta = ChecklistLoader().load_data(doc).metadata
        assert meta.applies_to_toolchains == ("hatchling*",)
        assert meta.applies_to_platforms == ("python3*",)


class TestValidation:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ChecklistLoadError, match="not found"):
            load_checklist(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, make_checklist_file):
        with pytest.raises(ChecklistLoadError, match="Failed to parse"):
            load_checklist(make_checklist_file("metadata: [unclosed\n"))

    def test_document_must_be_mapping(self):
        with pytest.raises(ChecklistLoadError):
            ChecklistLoader().load_data(["not", "a", "mapping"])

    def test_project_type_required(self):
        with pytest.raises(ChecklistLoadError, match="projectType"):
            ChecklistLoader().load_data(document(metadata={}))

    def test_duplicate_ids(self):
        check = {"id": "C-1", "type": "FileExists", "target": "a"}
        with pytest.raises(ChecklistLoadError, match="duplicate"):
            ChecklistLoader().load_data(document(check, dict(check)))

    def test_missing_id(self):
        with pytest.raises(ChecklistLoadError, match="no id"):
            ChecklistLoader().load_data(document({"type": "FileExists", "target": "a"}))

    def test_negative_weight(self):
        with pytest.raises(ChecklistLoadError, match="invalid weight -1"):
            ChecklistLoader().load_data(document({"id": "C-1", "type": "FileExists", "weight": -1}))

    @pytest.mark.parametrize("weight", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_weight(self, weight):
        with pytest.raises(ChecklistLoadError, match="invalid weight"):
            ChecklistLoader().load_data(document({"id": "C-1", "type": "FileExists", "weight": weight}))

    @pytest.mark.parametrize("literal", [".nan", ".inf"])
    def test_non_finite_weight_in_yaml(self, make_checklist_file, literal):
        text = (
            "metadata:\n  projectType: demo\n"
            f"checks:\n  - id: C-1\n    type: FileExists\n    target: a.py\n    weight: {literal}\n"
        )
        with pytest.raises(ChecklistLoadError, match="invalid weight"):
            load_checklist(make_checklist_file(text))

    def test_non_numeric_weight(self):
        with pytest.raises(ChecklistLoadError, match="invalid weight"):
            ChecklistLoader().load_data(document({"id": "C-1", "type": "FileExists", "weight": "heavy"}))

    def test_inverted_threshold(self):
        doc = document()
        doc["interpretationRules"]["thresholds"] = [{"min": 0.9, "max": 0.1, "confidence": "x"}]
        with pytest.raises(ChecklistLoadError, match="exceeds"):
            ChecklistLoader().load_data(doc)

    def test_code_pattern_requires_subtype(self):
        with pytest.raises(ChecklistLoadError, match="analysisSubtype"):
            ChecklistLoader().load_data(document({"id": "C-1", "type": "CodePattern", "expectedBase": "X"}))

    def test_unknown_required_check_only_warns(self, caplog):
        doc = document()
        doc["interpretationRules"]["minimumChecksForConfidence"] = {"high": ["GHOST-9"]}
        ChecklistLoader().load_data(doc)
        assert "GHOST-9" in caplog.text


class TestUnknownTypes:
    def test_strict_mode_rejects_unknown_type(self):
        with pytest.raises(ChecklistLoadError, match="unknown type 'Telepathy'"):
            ChecklistLoader().load_data(document({"id": "C-1", "type": "Telepathy"}))

    def test_lenient_mode_keeps_raw_name(self):
        checklist = ChecklistLoader(strict=False).load_data(document({"id": "C-1", "type": "Telepathy"}))
        assert checklist.checks[0].type == "Telepathy"
        assert checklist.checks[0].type_name == "Telepathy"

    def test_strict_mode_rejects_unknown_subtype(self):
        with pytest.raises(ChecklistLoadError, match="analysis subtype"):
            ChecklistLoader().load_data(
                document({"id": "C-1", "type": "CodePattern", "analysisSubtype": "FieldCount"})
            )

    def test_lenient_unknown_type_fails_at_runtime(self, engine, make_facts):
        checklist = ChecklistLoader(strict=False).load_data(
            document({"id": "C-1", "type": "Telepathy"}, {"id": "C-2", "type": "FileExists", "target": "a.py"})
        )
        result = engine.evaluate(make_facts({"a.py": ""}), checklist)
        assert [r.passed for r in result.check_results] == [False, True]
        assert result.check_results[0].details == "No executor found for check type: Telepathy"
