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
Project loader: collects manifest facts and the file list of a Python project.

Facts come from ``pyproject.toml`` when present:

- toolchain: ``[build-system].build-backend``
- platforms: ``Programming Language :: Python :: X.Y`` classifiers as
  ``pythonX.Y``, or the ``requires-python`` lower bound when no such
  classifier exists
- dependencies: ``[project].dependencies``, optional dependencies and
  ``[tool.poetry]`` dependency tables
- project references: local path dependencies (``name @ file:../lib``,
  poetry or uv ``path = "../lib"`` entries, ``-e ../lib`` requirement lines)

A project with only ``requirements.txt`` gets dependencies and no toolchain.
"""

from __future__ import annotations

import logging
import os
import re
import tomllib
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

from ..config.config import Config
from ..config.constants import RepoClassifierConstants
from .exceptions import ProjectLoadError
from .models import DependencyReference, ProjectFacts
from .outcomes import FailureReason, ReadResult
from .patterns import normalize_path

logger = logging.getLogger(__name__)

_REQUIREMENT_RE = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)\s*(?:\[[^\]]*\])?\s*(.*)$")
_CLASSIFIER_RE = re.compile(r"^Programming Language :: Python :: (\d+\.\d+)\s*$")
_REQUIRES_PYTHON_RE = re.compile(r">=?\s*(\d+\.\d+)")


def parse_requirement(line: str) -> DependencyReference | None:
    """Parse one PEP 508 requirement (``name[extra] >=1.0; marker``)."""
    text = line.split("#", 1)[0].strip()
    if not text or text.startswith("-"):
        return None
    match = _REQUIREMENT_RE.match(text)
    if not match:
        return None
    version = match.group(2).split(";", 1)[0].strip()
    if version.startswith("@"):
        version = ""
    return DependencyReference(name=match.group(1), version=version)


def parse_requirements_text(text: str) -> list[DependencyReference]:
    deps = []
    for line in text.splitlines():
        dep = parse_requirement(line)
        if dep is not None:
            deps.append(dep)
    return deps


def _platforms_from_project(project: Mapping[str, Any]) -> list[str]:
    platforms = []
    for classifier in project.get("classifiers") or []:
        match = _CLASSIFIER_RE.match(str(classifier))
        if match:
            platforms.append(f"python{match.group(1)}")
    if not platforms:
        requires = str(project.get("requires-python") or "")
        match = _REQUIRES_PYTHON_RE.search(requires)
        if match:
            platforms.append(f"python{match.group(1)}")
    return platforms


def _dependencies_from_pyproject(data: Mapping[str, Any]) -> list[DependencyReference]:
    project = data.get("project") or {}
    deps: list[DependencyReference] = []
    for line in project.get("dependencies") or []:
        dep = parse_requirement(str(line))
        if dep is not None:
            deps.append(dep)
    for group in (project.get("optional-dependencies") or {}).values():
        for line in group or []:
            dep = parse_requirement(str(line))
            if dep is not None:
                deps.append(dep)

    poetry = (data.get("tool") or {}).get("poetry") or {}
    tables = [poetry.get("dependencies") or {}, poetry.get("dev-dependencies") or {}]
    for group in (poetry.get("group") or {}).values():
        tables.append((group or {}).get("dependencies") or {})
    for table in tables:
        for name, spec in table.items():
            if name.lower() == "python":
                continue
            if isinstance(spec, str):
                version = spec
            elif isinstance(spec, dict):
                version = str(spec.get("version", ""))
            else:
                version = ""
            deps.append(DependencyReference(name=name, version=version))
    return deps


_DIRECT_REFERENCE_RE = re.compile(r"^\s*[A-Za-z0-9][A-Za-z0-9._-]*\s*(?:\[[^\]]*\])?\s*@\s*(\S+)")
_EDITABLE_RE = re.compile(r"^(?:-e|--editable)(?:\s+|=)(\S+)")
# hatch context formatting for paths relative to the project root
_ROOT_URI = "{root:uri}"


def _path_from_location(location: str) -> str | None:
    """Local filesystem path of a requirement location, or None for remote ones."""
    location = location.split("#", 1)[0].strip().rstrip(";")
    if not location:
        return None
    if location.startswith(_ROOT_URI):
        path = location[len(_ROOT_URI):].lstrip("/") or "."
    elif location.lower().startswith("file:"):
        parsed = urlparse(location)
        if parsed.netloc not in ("", "localhost"):
            return None
        path = unquote(parsed.path)
    elif "://" in location:
        return None
    else:
        path = location
    path = path.replace("\\", "/").rstrip("/")
    return path or "/"


def parse_local_reference(line: str) -> str | None:
    """
    Local path a requirement line points at.

    Recognizes ``name @ file:../lib`` direct references, editable installs
    (``-e ../lib``) and bare relative or absolute paths in requirements files.
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None
    match = _DIRECT_REFERENCE_RE.match(text)
    if match:
        return _path_from_location(match.group(1))
    match = _EDITABLE_RE.match(text)
    if match:
        return _path_from_location(match.group(1))
    if text.startswith(("./", "../", "/", ".\\", "..\\")) or text.lower().startswith("file:"):
        return _path_from_location(text.split()[0])
    return None


def parse_references_text(text: str) -> list[str]:
    return [ref for ref in (parse_local_reference(line) for line in text.splitlines()) if ref]


def _references_from_pyproject(data: Mapping[str, Any]) -> list[str]:
    project = data.get("project") or {}
    lines = [str(line) for line in project.get("dependencies") or []]
    for group in (project.get("optional-dependencies") or {}).values():
        lines.extend(str(line) for line in group or [])
    refs = [ref for ref in (parse_local_reference(line) for line in lines) if ref]

    tool = data.get("tool") or {}
    poetry = tool.get("poetry") or {}
    tables = [poetry.get("dependencies") or {}, poetry.get("dev-dependencies") or {}]
    for group in (poetry.get("group") or {}).values():
        tables.append((group or {}).get("dependencies") or {})
    tables.append((tool.get("uv") or {}).get("sources") or {})
    for table in tables:
        for spec in table.values():
            for entry in spec if isinstance(spec, list) else [spec]:
                if isinstance(entry, dict) and entry.get("path"):
                    refs.append(str(entry["path"]).replace("\\", "/").rstrip("/") or "/")
    return refs


def _unique(deps: Iterable[DependencyReference]) -> tuple[DependencyReference, ...]:
    seen: dict[str, DependencyReference] = {}
    for dep in deps:
        seen.setdefault(dep.name.lower(), dep)
    return tuple(seen.values())


def list_project_files(root: Path, excluded_directories: Iterable[str]) -> list[str]:
    """Relative, forward-slash paths of every file below ``root``, sorted."""
    excluded = {d.lower() for d in excluded_directories}
    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d.lower() not in excluded and not d.endswith(".egg-info")]
        rel_dir = Path(dirpath).relative_to(root)
        for filename in filenames:
            files.append(normalize_path((rel_dir / filename).as_posix()))
    return sorted(files)


class FileSystemReader:
    """Reads project files from disk; files over the size cutoff read as empty."""

    def __init__(self, root: str | Path, max_size_bytes: int):
        self.root = Path(root)
        self.max_size_bytes = max_size_bytes

    def read(self, relative_path: str) -> ReadResult:
        path = self.root / relative_path
        try:
            size = path.stat().st_size
            if size > self.max_size_bytes:
                logger.debug("Skipping %s: %d bytes exceeds limit", relative_path, size)
                return ReadResult(path=relative_path, reason=FailureReason.FILE_TOO_LARGE)
            return ReadResult(path=relative_path, content=path.read_text(encoding="utf-8", errors="replace"))
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            return ReadResult(path=relative_path, reason=FailureReason.READ_ERROR)


class InMemoryFileReader:
    """Serves file contents from a mapping, with the same size cutoff."""

    def __init__(self, contents: Mapping[str, str], max_size_bytes: int | None = None):
        self.contents = {normalize_path(k): v for k, v in contents.items()}
        self.max_size_bytes = max_size_bytes

    def read(self, relative_path: str) -> ReadResult:
        content = self.contents.get(normalize_path(relative_path))
        if content is None:
            return ReadResult(path=relative_path, reason=FailureReason.READ_ERROR)
        if self.max_size_bytes is not None and len(content.encode("utf-8")) > self.max_size_bytes:
            return ReadResult(path=relative_path, reason=FailureReason.FILE_TOO_LARGE)
        return ReadResult(path=relative_path, content=content)


class ProjectLoader:
    """Builds :class:`ProjectFacts` for a project directory."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config()

    def load_project(self, project_dir: str | Path) -> ProjectFacts:
        """
        Collect manifest facts and the file list.

        Args:
            project_dir: Directory holding pyproject.toml or requirements.txt

        Returns:
            ProjectFacts backed by a FileSystemReader

        Raises:
            ProjectLoadError: If the directory or its manifest is missing or
                the manifest cannot be parsed
        """
        root = Path(project_dir)
        if not root.is_dir():
            raise ProjectLoadError(f"Project directory does not exist: {root}")

        pyproject = root / "pyproject.toml"
        requirements = root / "requirements.txt"
        name = root.resolve().name
        toolchain = ""
        platforms: list[str] = []
        deps: list[DependencyReference] = []
        refs: list[str] = []

        if pyproject.is_file():
            manifest = pyproject
            try:
                with open(pyproject, "rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as e:
                raise ProjectLoadError(f"Failed to parse {pyproject}: {e}") from e
            project = data.get("project") or {}
            poetry = (data.get("tool") or {}).get("poetry") or {}
            name = str(project.get("name") or poetry.get("name") or name)
            toolchain = str((data.get("build-system") or {}).get("build-backend") or "")
            platforms = _platforms_from_project(project)
            deps = _dependencies_from_pyproject(data)
            refs = _references_from_pyproject(data)
        elif requirements.is_file():
            manifest = requirements
        else:
            raise ProjectLoadError(f"No pyproject.toml or requirements.txt in {root}")

        if requirements.is_file():
            text = self._read_requirements(requirements)
            deps.extend(parse_requirements_text(text))
            refs.extend(parse_references_text(text))

        files = list_project_files(root, self.config.excluded_directories)
        logger.debug(
            "Loaded %s: toolchain=%s platforms=%s dependencies=%d references=%d files=%d",
            name,
            toolchain or "(none)",
            platforms,
            len(deps),
            len(refs),
            len(files),
        )
        return ProjectFacts(
            name=name,
            path=str(root),
            reader=FileSystemReader(root, self.config.max_file_size_bytes),
            toolchain=toolchain,
            platforms=tuple(platforms),
            dependencies=_unique(deps),
            files=tuple(files),
            manifest_path=manifest.name,
            project_references=tuple(dict.fromkeys(refs)),
        )

    @staticmethod
    def _read_requirements(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ProjectLoadError(f"Failed to read {path}: {e}") from e


def load_project(project_dir: str | Path, config: Config | None = None) -> ProjectFacts:
    """Convenience function to load a single project."""
    return ProjectLoader(config).load_project(project_dir)


def discover_projects(
    repo_dir: str | Path,
    exclude_keywords: Iterable[str] | None = None,
    excluded_directories: Iterable[str] = RepoClassifierConstants.EXCLUDED_DIRECTORIES,
) -> list[Path]:
    """
    Find every directory holding a project manifest.

    Args:
        repo_dir: Repository root
        exclude_keywords: Skip projects whose relative path contains any of
            these (case-insensitive)
        excluded_directories: Directory names never descended into

    Returns:
        Project directories, sorted
    """
    root = Path(repo_dir)
    keywords = [k.strip().lower() for k in exclude_keywords or [] if k and k.strip()]
    excluded = {d.lower() for d in excluded_directories}
    projects: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d.lower() not in excluded and not d.endswith(".egg-info")]
        if not any(m in filenames for m in RepoClassifierConstants.MANIFEST_FILES):
            continue
        rel = Path(dirpath).relative_to(root).as_posix().lower()
        if any(k in rel for k in keywords):
            logger.debug("Excluding %s", dirpath)
            continue
        projects.append(Path(dirpath))
    return sorted(projects)


def resolve_references(facts: ProjectFacts, known_projects: Mapping[Path, str]) -> list[str]:
    """
    Resolve a project's path references against the discovered projects.

    Args:
        facts: Loaded project
        known_projects: Resolved project directory -> report key

    Returns:
        Report keys of referenced projects; references outside the known set
        are returned as resolved paths
    """
    base = Path(facts.path)
    resolved: list[str] = []
    for ref in facts.project_references:
        target = (base / ref).resolve()
        key = known_projects.get(target, str(target))
        if key not in resolved:
            resolved.append(key)
    return resolved
