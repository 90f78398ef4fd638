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
Constants for Repo Classifier.
"""

from pathlib import Path

try:
    from .._version import __version__ as PACKAGE_VERSION
except Exception:  # pragma: no cover
    PACKAGE_VERSION = "0.0.0-dev"


class RepoClassifierConstants:
    """Constants used throughout the classifier."""

    VERSION = PACKAGE_VERSION

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    PACKAGE_ROOT = Path(__file__).parent.parent

    # Resource paths
    DATA_DIR = PACKAGE_ROOT / "data"
    CHECKLISTS_DIR = DATA_DIR / "checklists"

    # Default values
    DEFAULT_MAX_FILE_SIZE_KB = 500
    DEFAULT_PARSE_TIMEOUT = 10.0
    DEFAULT_MAX_WORKERS = 1
    DEFAULT_SOURCE_EXTENSIONS = (".py",)
    DEFAULT_ANNOTATION_SUFFIX = "Attribute"

    # Directories never walked when listing project files
    EXCLUDED_DIRECTORIES = (
        ".git",
        ".hg",
        ".svn",
        ".venv",
        "venv",
        "env",
        "__pycache__",
        "node_modules",
        "build",
        "dist",
        ".tox",
        ".nox",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        ".idea",
        ".vscode",
        ".eggs",
    )

    # Manifests that make a directory a project
    MANIFEST_FILES = ("pyproject.toml", "requirements.txt")

    # Check-list document extensions
    CHECKLIST_EXTENSIONS = (".yaml", ".yml", ".json")

    # Interpretation fallbacks
    UNDETERMINED_INTERPRETATION = "Unable to determine"
    UNDETERMINED_LABEL = "unknown"
