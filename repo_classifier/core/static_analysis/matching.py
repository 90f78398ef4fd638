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
Name predicates used by every structural query.
"""

from __future__ import annotations

from collections.abc import Iterable

ANNOTATION_SUFFIX = "Attribute"


def annotation_matches(actual: str, expected: str, suffix: str = ANNOTATION_SUFFIX) -> bool:
    """Return True when annotation ``actual`` names ``expected``.

    ``Sample`` matches ``Sample``, ``SampleAttribute``, ``ns.mod.Sample`` and
    ``ns.mod.SampleAttribute`` (case-insensitive), but not ``SampleMapping``
    or ``MySample``. An empty expectation never matches.
    """
    if not actual or not expected:
        return False
    a = actual.strip().casefold()
    e = expected.strip().casefold()
    if not e:
        return False
    candidates = (e, e + suffix.casefold()) if suffix else (e,)
    for candidate in candidates:
        if a == candidate or a.endswith("." + candidate):
            return True
    return False


def any_annotation_matches(actual: Iterable[str], expected: Iterable[str], suffix: str = ANNOTATION_SUFFIX) -> bool:
    expected = list(expected)
    return any(annotation_matches(a, e, suffix) for a in actual for e in expected)


def type_name_matches(actual: str, expected: str) -> bool:
    """Base-type match: equal, or ``actual`` is ``expected`` dot-qualified."""
    if not actual or not expected:
        return False
    a = actual.strip().casefold()
    e = expected.strip().casefold()
    return a == e or a.endswith("." + e)


def return_type_matches(actual: str | None, expected: str) -> bool:
    """Substring match so generic wrappers (``list[Item]``) still count."""
    if not actual or not expected:
        return False
    return expected.strip().casefold() in actual.casefold()
