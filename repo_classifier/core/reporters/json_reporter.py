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
JSON format reporter for detection results.
"""

import json

from ...core.models import DetectionResult, Report


class JSONReporter:
    """Generates JSON format reports."""

    def __init__(self, pretty: bool = True):
        self.pretty = pretty

    def generate_report(self, data: DetectionResult | list[DetectionResult] | Report) -> str:
        """
        Generate JSON report.

        Args:
            data: One result, the results for one project, or a Report

        Returns:
            JSON string
        """
        if isinstance(data, (DetectionResult, Report)):
            payload = data.to_dict()
        else:
            payload = {"results": [result.to_dict() for result in data]}
        if self.pretty:
            return json.dumps(payload, indent=2, default=str)
        return json.dumps(payload, separators=(",", ":"), default=str)
