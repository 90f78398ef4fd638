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
Confidence aggregation and threshold interpretation.

Thresholds are evaluated in declaration order and the first range containing
the confidence wins, even when a later range also contains it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..config.constants import RepoClassifierConstants
from .models import CheckResult, InterpretationRules, Threshold

HIGH_TIER_LABEL = "high"
HIGH_TIER_DEMOTION = "medium-high"


@dataclass(frozen=True)
class Interpretation:
    text: str
    label: str
    missing_checks: tuple[str, ...] = ()
    threshold: Threshold | None = None


def compute_confidence(results: Iterable[CheckResult]) -> float:
    """Passed weight over executed weight, 0 when nothing carries weight."""
    total = 0.0
    passed = 0.0
    for result in results:
        total += result.weight
        if result.passed:
            passed += result.weight
    if total <= 0:
        return 0.0
    return min(1.0, max(0.0, passed / total))


def find_threshold(confidence: float, thresholds: Iterable[Threshold]) -> Threshold | None:
    for threshold in thresholds:
        if threshold.contains(confidence):
            return threshold
    return None


def _required_checks(rules: InterpretationRules, label: str) -> tuple[str, ...]:
    required = rules.minimum_checks_for_confidence.get(label)
    if required is not None:
        return tuple(required)
    for tier, ids in rules.minimum_checks_for_confidence.items():
        if tier.casefold() == label.casefold():
            return tuple(ids)
    return ()


def demoted_label(threshold: Threshold, thresholds: Iterable[Threshold]) -> str:
    """Label of the next-lower declared tier (by ``min``)."""
    lower: Threshold | None = None
    for candidate in thresholds:
        if candidate.confidence_label.casefold() == threshold.confidence_label.casefold():
            continue
        if candidate.min >= threshold.min:
            continue
        if lower is None or candidate.min > lower.min:
            lower = candidate
    if lower is not None:
        return lower.confidence_label
    if threshold.confidence_label.casefold() == HIGH_TIER_LABEL:
        return HIGH_TIER_DEMOTION
    return threshold.confidence_label


def interpret(confidence: float, results: Iterable[CheckResult], rules: InterpretationRules) -> Interpretation:
    """
    Map a confidence value to an interpretation, applying tier gating.

    Args:
        confidence: Value in [0, 1]
        results: Check results of the evaluation
        rules: Thresholds and per-tier required checks

    Returns:
        Interpretation text, label and any missing required checks
    """
    threshold = find_threshold(confidence, rules.thresholds)
    if threshold is None:
        return Interpretation(
            text=RepoClassifierConstants.UNDETERMINED_INTERPRETATION,
            label=RepoClassifierConstants.UNDETERMINED_LABEL,
        )

    required = _required_checks(rules, threshold.confidence_label)
    if not required:
        return Interpretation(threshold.interpretation, threshold.confidence_label, threshold=threshold)

    passed_ids = {r.check_id for r in results if r.passed}
    missing = tuple(check_id for check_id in required if check_id not in passed_ids)
    if not missing:
        return Interpretation(threshold.interpretation, threshold.confidence_label, threshold=threshold)

    return Interpretation(
        text=f"{threshold.interpretation} (missing critical checks: {', '.join(missing)})",
        label=demoted_label(threshold, rules.thresholds),
        missing_checks=missing,
        threshold=threshold,
    )
