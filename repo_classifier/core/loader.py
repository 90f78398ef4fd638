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
Check-list loader for YAML and JSON documents.

Document layout (camelCase keys)::

    metadata:
      projectType: web-service
      schemaVersion: "1.0"
      appliesTo: {toolchains: ["*"], platforms: ["python3*"]}
    interpretationRules:
      thresholds:
        - {min: 0.8, max: 1.0, interpretation: "...", confidence: high}
      minimumChecksForConfidence:
        high: [WEB-001]
    checks:
      - id: WEB-001
        type: DependencyReference
        target: fastapi
        alternativeTargets: [flask, django]
        weight: 3

In strict mode (the default) an unknown check type or analysis subtype is a
load error. In lenient mode the raw name is kept and the engine reports the
check as failed.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ChecklistLoadError
from .models import (
    AnalysisSubtype,
    Check,
    ChecklistMetadata,
    CheckList,
    CheckType,
    InterpretationRules,
    Threshold,
)

logger = logging.getLogger(__name__)

# Keys whose values are merged, in this order, into Check.expected_values
EXPECTED_VALUE_KEYS = (
    "expectedValue",
    "expectedValues",
    "expectedAttributes",
    "expectedBase",
    "expectedBases",
    "expectedTypes",
)


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


def _dedupe(values: list[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return tuple(seen)


class ChecklistLoader:
    """Parses check-list documents into immutable :class:`CheckList` objects."""

    def __init__(self, strict: bool = True):
        self.strict = strict

    def load(self, path: str | Path) -> CheckList:
        """
        Load a check list from a YAML or JSON file.

        Args:
            path: Check-list document

        Returns:
            Parsed CheckList

        Raises:
            ChecklistLoadError: If the file is missing, unparsable or invalid
        """
        path = Path(path)
        if not path.is_file():
            raise ChecklistLoadError(f"Check list not found: {path}")
        try:
            with open(path, encoding="utf-8") as fh:
                if path.suffix.lower() == ".json":
                    raw = json.load(fh)
                else:
                    raw = yaml.safe_load(fh)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ChecklistLoadError(f"Failed to parse {path}: {e}") from e
        return self.load_data(raw, source=str(path))

    def load_data(self, raw: Any, source: str | None = None) -> CheckList:
        """Build a CheckList from an already-parsed document."""
        where = source or "<data>"
        if not isinstance(raw, dict):
            raise ChecklistLoadError(f"{where}: document must be a mapping")

        metadata = self._parse_metadata(raw.get("metadata"), where)
        checks = self._parse_checks(raw.get("checks"), where)
        rules = self._parse_rules(raw.get("interpretationRules"), where)

        known_ids = {check.id for check in checks}
        for tier, required in rules.minimum_checks_for_confidence.items():
            unknown = [cid for cid in required if cid not in known_ids]
            if unknown:
                logger.warning("%s: tier '%s' requires undeclared checks %s", where, tier, ", ".join(unknown))

        return CheckList(metadata=metadata, interpretation_rules=rules, checks=checks, source_path=source)

    def _parse_metadata(self, raw: Any, where: str) -> ChecklistMetadata:
        if not isinstance(raw, dict) or not raw.get("projectType"):
            raise ChecklistLoadError(f"{where}: metadata.projectType is required")
        applies_to = raw.get("appliesTo") or {}
        if not isinstance(applies_to, dict):
            raise ChecklistLoadError(f"{where}: metadata.appliesTo must be a mapping")
        return ChecklistMetadata(
            project_type=str(raw["projectType"]),
            schema_version=str(raw.get("schemaVersion", "1.0")),
            description=str(raw.get("description", "")),
            last_updated=str(raw.get("lastUpdated", "")),
            applies_to_toolchains=tuple(_as_list(applies_to.get("toolchains"))),
            applies_to_platforms=tuple(_as_list(applies_to.get("platforms"))),
        )

    def _parse_checks(self, raw: Any, where: str) -> tuple[Check, ...]:
        if raw is None:
            return ()
        if not isinstance(raw, list):
            raise ChecklistLoadError(f"{where}: checks must be a list")

        checks: list[Check] = []
        seen: set[str] = set()
        for index, entry in enumerate(raw):
            if not isinstance(entry, dict):
                raise ChecklistLoadError(f"{where}: check #{index + 1} must be a mapping")
            check = self._parse_check(entry, index, where)
            if check.id in seen:
                raise ChecklistLoadError(f"{where}: duplicate check id '{check.id}'")
            seen.add(check.id)
            checks.append(check)
        return tuple(checks)

    def _parse_check(self, raw: dict[str, Any], index: int, where: str) -> Check:
        check_id = str(raw.get("id") or "").strip()
        if not check_id:
            raise ChecklistLoadError(f"{where}: check #{index + 1} has no id")

        type_name = str(raw.get("type") or "").strip()
        check_type: CheckType | str | None = CheckType.parse(type_name) if type_name else None
        if check_type is None:
            if self.strict:
                raise ChecklistLoadError(f"{where}: check '{check_id}' has unknown type '{type_name}'")
            logger.warning("%s: check '%s' has unknown type '%s'", where, check_id, type_name)
            check_type = type_name

        try:
            weight = float(raw.get("weight", 1.0))
        except (TypeError, ValueError) as e:
            raise ChecklistLoadError(f"{where}: check '{check_id}' has invalid weight") from e
        if not math.isfinite(weight) or weight < 0:
            raise ChecklistLoadError(f"{where}: check '{check_id}' has invalid weight {weight}")

        expected: list[str] = []
        for key in EXPECTED_VALUE_KEYS:
            expected.extend(_as_list(raw.get(key)))

        subtype: AnalysisSubtype | str | None = None
        subtype_name = raw.get("analysisSubtype") or raw.get("analysisType")
        if subtype_name:
            subtype = AnalysisSubtype.parse(str(subtype_name))
            if subtype is None:
                if self.strict:
                    raise ChecklistLoadError(
                        f"{where}: check '{check_id}' has unknown analysis subtype '{subtype_name}'"
                    )
                subtype = str(subtype_name)
        elif check_type is CheckType.CODE_PATTERN and self.strict:
            raise ChecklistLoadError(f"{where}: code-pattern check '{check_id}' needs analysisSubtype")

        return Check(
            id=check_id,
            type=check_type,
            target=str(raw.get("target") or ""),
            category=str(raw.get("category") or ""),
            expected_values=_dedupe(expected),
            pattern=str(raw["pattern"]) if raw.get("pattern") else None,
            alternative_targets=tuple(_as_list(raw.get("alternativeTargets"))),
            analysis_subtype=subtype,
            weight=weight,
            description=str(raw.get("description") or ""),
            platform_filter=tuple(_as_list(raw.get("platformFilter"))),
        )

    def _parse_rules(self, raw: Any, where: str) -> InterpretationRules:
        if raw is None:
            return InterpretationRules()
        if not isinstance(raw, dict):
            raise ChecklistLoadError(f"{where}: interpretationRules must be a mapping")

        thresholds: list[Threshold] = []
        for entry in raw.get("thresholds") or []:
            if not isinstance(entry, dict):
                raise ChecklistLoadError(f"{where}: threshold entries must be mappings")
            try:
                low = float(entry.get("min", 0.0))
                high = float(entry.get("max", 1.0))
            except (TypeError, ValueError) as e:
                raise ChecklistLoadError(f"{where}: threshold bounds must be numbers") from e
            if low > high:
                raise ChecklistLoadError(f"{where}: threshold min {low} exceeds max {high}")
            thresholds.append(
                Threshold(
                    min=low,
                    max=high,
                    interpretation=str(entry.get("interpretation", "")),
                    confidence_label=str(entry.get("confidence") or entry.get("confidenceLabel") or ""),
                )
            )

        minimum = raw.get("minimumChecksForConfidence") or {}
        if not isinstance(minimum, dict):
            raise ChecklistLoadError(f"{where}: minimumChecksForConfidence must be a mapping")
        return InterpretationRules(
            thresholds=tuple(thresholds),
            minimum_checks_for_confidence={str(k): tuple(_as_list(v)) for k, v in minimum.items()},
        )


def load_checklist(path: str | Path, strict: bool = True) -> CheckList:
    """Convenience function to load a single check list."""
    return ChecklistLoader(strict=strict).load(path)
