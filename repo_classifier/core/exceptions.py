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

"""Repo Classifier exceptions.

Only failures upstream of check execution are raised as exceptions. A
defective check never raises out of the engine; it becomes a failed
``CheckResult`` instead. All exceptions inherit from RepoClassifierError
for easy catching.

Example:
    >>> from repo_classifier.core.project_loader import load_project
    >>> from repo_classifier.core.exceptions import ProjectLoadError
    >>>
    >>> try:
    ...     facts = load_project("path/to/project")
    ... except ProjectLoadError as e:
    ...     print(f"Failed to load project: {e}")
"""


class RepoClassifierError(Exception):
    """Base exception for all Repo Classifier errors."""

    pass


class ChecklistLoadError(RepoClassifierError):
    """Raised when a check-list document cannot be loaded.

    This can indicate:
    - Unparsable YAML or JSON
    - Missing required fields (metadata, check ids)
    - Unknown check type or analysis subtype (strict mode)
    - Negative weights or duplicate check ids
    """

    pass


class ProjectLoadError(RepoClassifierError):
    """Raised when project facts cannot be collected.

    This typically indicates:
    - Missing project manifest (pyproject.toml / requirements.txt)
    - Unparsable manifest
    - Project path does not exist
    """

    pass


class RegistryError(RepoClassifierError):
    """Raised when the executor registry does not cover every check type."""

    pass
