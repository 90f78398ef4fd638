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
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from dotenv import load_dotenv

from repo_classifier.config.config import Config
from repo_classifier.core.engine import DetectionEngine
from repo_classifier.core.models import (
    Check,
    ChecklistMetadata,
    CheckList,
    CheckType,
    DependencyReference,
    InterpretationRules,
    ProjectFacts,
    Threshold,
)
from repo_classifier.core.project_loader import InMemoryFileReader

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

project_root = Path(__file__).parent.parent
env_file = project_root / ".env"

if env_file.exists():
    load_dotenv(env_file)


DEFAULT_THRESHOLDS = (
    Threshold(0.75, 1.0, "Strong match", "high"),
    Threshold(0.5, 0.75, "Partial match", "medium"),
    Threshold(0.0, 0.5, "Weak match", "low"),
)


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_facts():
    """Factory fixture for in-memory :class:`ProjectFacts`.

    Usage::

        facts = make_facts(
            {"app/main.py": "class Api(HandlerBase): ..."},
            toolchain="hatchling.build",
            platforms=["python3.12"],
            dependencies=["fastapi", ("uvicorn", ">=0.30")],
        )
    """

    def _make(
        files: dict[str, str] | None = None,
        toolchain: str = "",
        platforms: list[str] | tuple[str, ...] = (),
        dependencies: list[str | tuple[str, str]] | tuple = (),
        name: str = "sample",
        max_size_bytes: int | None = None,
    ) -> ProjectFacts:
        files = files or {}
        deps = []
        for dep in dependencies:
            if isinstance(dep, tuple):
                deps.append(DependencyReference(dep[0], dep[1]))
            else:
                deps.append(DependencyReference(dep))
        return ProjectFacts(
            name=name,
            path=f"/virtual/{name}",
            reader=InMemoryFileReader(files, max_size_bytes),
            toolchain=toolchain,
            platforms=tuple(platforms),
            dependencies=tuple(deps),
            files=tuple(sorted(files)),
        )

    return _make


@pytest.fixture
def make_project(tmp_path: Path):
    """Factory fixture writing a project tree to disk.

    Usage::

        project_dir = make_project({
            "pyproject.toml": "[project]\\nname = 'demo'\\n",
            "demo/__main__.py": "print('hi')",
        })
    """
    _counter = [0]

    def _make(files: dict[str, str | bytes], name: str | None = None) -> Path:
        _counter[0] += 1
        project_dir = tmp_path / (name or f"project-{_counter[0]}")
        project_dir.mkdir(parents=True, exist_ok=True)
        for rel_path, content in files.items():
            fp = project_dir / rel_path
            fp.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                fp.write_bytes(content)
            else:
                fp.write_text(content, encoding="utf-8")
        return project_dir

    return _make


@pytest.fixture
def make_check():
    """Factory fixture for :class:`Check` objects with sensible defaults."""
    _counter = [0]

    def _make(check_type: CheckType | str = CheckType.FILE_EXISTS, **kwargs) -> Check:
        _counter[0] += 1
        kwargs.setdefault("id", f"CHK-{_counter[0]:03d}")
        for key in ("expected_values", "alternative_targets", "platform_filter"):
            if key in kwargs and isinstance(kwargs[key], list):
                kwargs[key] = tuple(kwargs[key])
        return Check(type=check_type, **kwargs)

    return _make


@pytest.fixture
def make_checklist():
    """Factory fixture for :class:`CheckList` objects.

    Thresholds are ``(min, max, interpretation, label)`` tuples; the default
    is high >= 0.75, medium >= 0.5, low below.
    """

    def _make(
        checks: list[Check],
        thresholds: list[tuple[float, float, str, str]] | None = None,
        minimum_checks: dict[str, list[str]] | None = None,
        project_type: str = "test-type",
    ) -> CheckList:
        rules = InterpretationRules(
            thresholds=tuple(Threshold(*t) for t in thresholds) if thresholds is not None else DEFAULT_THRESHOLDS,
            minimum_checks_for_confidence={k: tuple(v) for k, v in (minimum_checks or {}).items()},
        )
        return CheckList(
            metadata=ChecklistMetadata(project_type=project_type),
            interpretation_rules=rules,
            checks=tuple(checks),
        )

    return _make


@pytest.fixture
def make_checklist_file(tmp_path: Path):
    """Factory fixture writing a check-list document (dict or YAML text)."""
    _counter = [0]

    def _make(document: dict | str, suffix: str = ".yaml", directory: Path | None = None) -> Path:
        _counter[0] += 1
        target_dir = directory or tmp_path / "checklists"
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / f"checklist-{_counter[0]}{suffix}"
        if isinstance(document, str):
            path.write_text(document, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")
        return path

    return _make


@pytest.fixture
def engine() -> DetectionEngine:
    """Sequential engine with default executors."""
    return DetectionEngine(config=Config(parse_timeout_seconds=5.0, max_workers=1))
