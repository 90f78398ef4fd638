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
Configuration class for Repo Classifier.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .constants import RepoClassifierConstants

logger = logging.getLogger(__name__)

ENV_PREFIX = "REPO_CLASSIFIER_"


def _env_bool(name: str) -> bool | None:
    value = os.getenv(ENV_PREFIX + name, "").strip().lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return None


def _env_number(name: str, cast):
    value = os.getenv(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    try:
        return cast(value)
    except ValueError:
        logger.warning("Ignoring invalid %s%s=%r", ENV_PREFIX, name, value)
        return None


@dataclass
class Config:
    """
    Run-wide settings for check execution.

    Values left at their defaults are overridden by ``REPO_CLASSIFIER_*``
    environment variables.
    """

    # File reading
    max_file_size_kb: int = RepoClassifierConstants.DEFAULT_MAX_FILE_SIZE_KB
    excluded_directories: tuple[str, ...] = RepoClassifierConstants.EXCLUDED_DIRECTORIES

    # Structural analysis
    parse_timeout_seconds: float = RepoClassifierConstants.DEFAULT_PARSE_TIMEOUT
    source_extensions: tuple[str, ...] = RepoClassifierConstants.DEFAULT_SOURCE_EXTENSIONS
    annotation_suffix: str = RepoClassifierConstants.DEFAULT_ANNOTATION_SUFFIX

    # Execution
    max_workers: int = RepoClassifierConstants.DEFAULT_MAX_WORKERS
    case_insensitive_paths: bool = True

    # Check lists
    checklist_dir: Path = field(default_factory=lambda: RepoClassifierConstants.CHECKLISTS_DIR)
    strict_checklists: bool = True

    def __post_init__(self):
        """Load configuration from environment variables if not provided."""

        if self.max_file_size_kb == RepoClassifierConstants.DEFAULT_MAX_FILE_SIZE_KB:
            if (env_size := _env_number("MAX_FILE_SIZE_KB", int)) is not None:
                self.max_file_size_kb = env_size

        if self.parse_timeout_seconds == RepoClassifierConstants.DEFAULT_PARSE_TIMEOUT:
            if (env_timeout := _env_number("PARSE_TIMEOUT", float)) is not None:
                self.parse_timeout_seconds = env_timeout

        if self.max_workers == RepoClassifierConstants.DEFAULT_MAX_WORKERS:
            if (env_workers := _env_number("MAX_WORKERS", int)) is not None:
                self.max_workers = max(1, env_workers)

        if self.case_insensitive_paths and _env_bool("CASE_INSENSITIVE_PATHS") is False:
            self.case_insensitive_paths = False

        if self.strict_checklists and _env_bool("STRICT_CHECKLISTS") is False:
            self.strict_checklists = False

        if self.checklist_dir == RepoClassifierConstants.CHECKLISTS_DIR:
            if env_dir := os.getenv(ENV_PREFIX + "CHECKLIST_DIR"):
                self.checklist_dir = Path(env_dir)

        if env_extensions := os.getenv(ENV_PREFIX + "SOURCE_EXTENSIONS"):
            if self.source_extensions == RepoClassifierConstants.DEFAULT_SOURCE_EXTENSIONS:
                self.source_extensions = tuple(e.strip() for e in env_extensions.split(",") if e.strip())

        self.checklist_dir = Path(self.checklist_dir)

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_kb * 1024

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Config instance with values from environment
        """
        return cls()

    @classmethod
    def from_file(cls, config_file: Path) -> "Config":
        """
        Load configuration from a .env file.

        Variables already set in the environment take precedence.

        Args:
            config_file: Path to .env file

        Returns:
            Config instance
        """
        if Path(config_file).exists():
            load_dotenv(config_file, override=False)
        else:
            logger.warning("Config file %s not found, using environment only", config_file)
        return cls.from_env()
