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
Repo Classifier - weighted check engine that detects a project's type.
"""

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0+unknown"

__author__ = "Cisco Systems, Inc."


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Keeps ``python -m repo_classifier.cli.cli`` from importing the whole
    engine (and the YAML loader) before argument parsing.
    """
    _lazy_map = {
        "Config": (".config.config", "Config"),
        "RepoClassifierConstants": (".config.constants", "RepoClassifierConstants"),
        "Check": (".core.models", "Check"),
        "CheckList": (".core.models", "CheckList"),
        "CheckResult": (".core.models", "CheckResult"),
        "CheckType": (".core.models", "CheckType"),
        "DetectionResult": (".core.models", "DetectionResult"),
        "ProjectFacts": (".core.models", "ProjectFacts"),
        "Report": (".core.models", "Report"),
        "DetectionEngine": (".core.engine", "DetectionEngine"),
        "detect_project": (".core.engine", "detect_project"),
        "detect_repository": (".core.engine", "detect_repository"),
        "ChecklistLoader": (".core.loader", "ChecklistLoader"),
        "load_checklist": (".core.loader", "load_checklist"),
        "ChecklistProvider": (".core.checklist_provider", "ChecklistProvider"),
        "ProjectLoader": (".core.project_loader", "ProjectLoader"),
        "load_project": (".core.project_loader", "load_project"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        # Cache on the module so __getattr__ is only called once per symbol
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "DetectionEngine",
    "detect_project",
    "detect_repository",
    "Check",
    "CheckList",
    "CheckResult",
    "CheckType",
    "DetectionResult",
    "ProjectFacts",
    "Report",
    "ChecklistLoader",
    "load_checklist",
    "ChecklistProvider",
    "ProjectLoader",
    "load_project",
    "Config",
    "RepoClassifierConstants",
]
