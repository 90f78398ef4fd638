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
Command-line interface for Repo Classifier.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from ..config.config import Config
from ..config.constants import RepoClassifierConstants
from ..core.checklist_provider import ChecklistProvider
from ..core.engine import DetectionEngine
from ..core.exceptions import ChecklistLoadError, ProjectLoadError
from ..core.loader import ChecklistLoader
from ..core.models import DetectionResult, Report
from ..core.reporters.json_reporter import JSONReporter
from ..core.reporters.markdown_reporter import MarkdownReporter

logger = logging.getLogger("repo_classifier.cli")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def _make_status_printer(args: argparse.Namespace) -> Callable[[str], None]:
    """Return a printer that sends to stderr when JSON output is active."""
    is_json = getattr(args, "format", "summary") == "json"

    def _print(msg: str) -> None:
        print(msg, file=sys.stderr if is_json else sys.stdout)

    return _print


def _build_config(args: argparse.Namespace) -> Config:
    env_file = getattr(args, "env_file", None)
    config = Config.from_file(Path(env_file)) if env_file else Config.from_env()
    if getattr(args, "checklists", None):
        config.checklist_dir = Path(args.checklists)
    if getattr(args, "workers", None) is not None:
        config.max_workers = max(1, args.workers)
    if getattr(args, "parse_timeout", None) is not None:
        config.parse_timeout_seconds = args.parse_timeout
    if getattr(args, "max_file_size_kb", None) is not None:
        config.max_file_size_kb = args.max_file_size_kb
    if getattr(args, "case_sensitive", False):
        config.case_insensitive_paths = False
    if getattr(args, "lenient", False):
        config.strict_checklists = False
    return config


def _split_excludes(values: list[str] | None) -> list[str]:
    keywords: list[str] = []
    for value in values or []:
        keywords.extend(part.strip() for part in value.split(";") if part.strip())
    return keywords


def _filter_results(args: argparse.Namespace, results: list[DetectionResult]) -> list[DetectionResult]:
    threshold = getattr(args, "min_confidence", None)
    if threshold is None:
        return results
    return [r for r in results if r.confidence >= threshold]


def _format_output(args: argparse.Namespace, data: list[DetectionResult] | Report) -> str:
    """Generate the formatted output string for a project's results / report."""
    fmt = getattr(args, "format", "summary")
    if fmt == "json":
        return JSONReporter(pretty=not args.compact).generate_report(data)
    if fmt == "markdown":
        return MarkdownReporter(detailed=args.detailed).generate_report(data)
    if isinstance(data, Report):
        return _generate_repository_summary(data)
    return _generate_summary(data)


def _write_output(args: argparse.Namespace, output: str) -> None:
    """Write *output* to a file or stdout."""
    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(output)
        print(f"Report saved to: {args.output}", file=sys.stderr)
    else:
        print(output)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def detect_command(args: argparse.Namespace) -> int:
    """Handle the ``detect`` command for a single project."""
    project_dir = Path(args.project_directory)
    if not project_dir.exists():
        print(f"Error: Directory does not exist: {project_dir}", file=sys.stderr)
        return 1

    config = _build_config(args)
    status = _make_status_printer(args)
    engine = DetectionEngine(config=config)
    provider = ChecklistProvider(config.checklist_dir, strict=config.strict_checklists)
    try:
        results = engine.detect_project(project_dir, provider)
    except ProjectLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for path, message in provider.errors.items():
        status(f"[WARN] Skipped check list {path}: {message}")

    _write_output(args, _format_output(args, _filter_results(args, results)))
    return 0


def scan_all_command(args: argparse.Namespace) -> int:
    """Handle the ``scan-all`` command for every project in a repository."""
    repo_dir = Path(args.repo_directory)
    if not repo_dir.exists():
        print(f"Error: Directory does not exist: {repo_dir}", file=sys.stderr)
        return 1

    config = _build_config(args)
    engine = DetectionEngine(config=config)
    provider = ChecklistProvider(config.checklist_dir, strict=config.strict_checklists)
    report = engine.detect_repository(
        repo_dir, _split_excludes(args.exclude), provider, entry_points_only=args.entry_points_only
    )

    if args.min_confidence is not None:
        report.results = [r for r in report.results if r.confidence >= args.min_confidence]

    _write_output(args, _format_output(args, report))
    return 0


def list_checklists_command(args: argparse.Namespace) -> int:
    """Handle the ``list-checklists`` command."""
    config = _build_config(args)
    provider = ChecklistProvider(config.checklist_dir, strict=config.strict_checklists)
    checklists = provider.load_all()
    print(f"Check lists in {provider.root}:\n")
    for checklist in checklists:
        meta = checklist.metadata
        total_weight = sum(check.weight for check in checklist.checks)
        print(f"  {meta.project_type}")
        print(f"    {meta.description}")
        print(f"    checks: {len(checklist.checks)}, total weight: {total_weight:g}, schema: {meta.schema_version}")
        if meta.applies_to_toolchains or meta.applies_to_platforms:
            print(
                f"    applies to: toolchains={list(meta.applies_to_toolchains) or ['*']} "
                f"platforms={list(meta.applies_to_platforms) or ['*']}"
            )
        print()
    for path, message in provider.errors.items():
        print(f"[FAIL] {path}: {message}", file=sys.stderr)
    return 1 if provider.errors else 0


def validate_checklists_command(args: argparse.Namespace) -> int:
    """Handle the ``validate-checklists`` command."""
    target = Path(args.path) if args.path else RepoClassifierConstants.CHECKLISTS_DIR
    provider = ChecklistProvider(target, strict=True)
    paths = provider.discover()
    if not paths:
        print(f"[FAIL] No check lists found under {target}", file=sys.stderr)
        return 1

    loader = ChecklistLoader(strict=True)
    failures = 0
    for path in paths:
        try:
            checklist = loader.load(path)
        except ChecklistLoadError as e:
            failures += 1
            print(f"[FAIL] {e}", file=sys.stderr)
            continue
        print(f"[OK] {path.name}: {checklist.project_type} ({len(checklist.checks)} checks)")
    return 1 if failures else 0


def _generate_summary(results: list[DetectionResult]) -> str:
    if not results:
        return "No applicable check lists matched this project."

    best = results[0]
    lines = [
        "=" * 60,
        f"Project: {best.project_name}",
        "=" * 60,
        f"Best Match: {best.project_type}",
        f"Confidence: {best.confidence:.2%} ({best.confidence_label})",
        f"Interpretation: {best.interpretation}",
        "",
        "All Check Lists:",
    ]
    for result in results:
        lines.append(
            f"  {result.project_type:<24s} {result.confidence:6.1%}  "
            f"{len(result.passed_checks)}/{len(result.check_results)} checks  {result.confidence_label}"
        )
    if best.failed_checks:
        lines.append("")
        lines.append(f"Failed checks ({best.project_type}):")
        for check in best.failed_checks:
            lines.append(f"  [FAIL] {check.check_id}: {check.details}")
    return "\n".join(lines)


def _generate_repository_summary(report: Report) -> str:
    entry_points = report.entry_points
    lines = [
        "=" * 60,
        "Repository Detection Report",
        "=" * 60,
        f"Projects: {len(report.projects)}",
        f"Entry Points: {len(entry_points)}",
        f"Load Errors: {len(report.errors)}",
        "",
    ]
    for project in report.projects:
        marker = "*" if project in entry_points else " "
        if project in report.errors:
            lines.append(f"  [FAIL] {project}: {report.errors[project]}")
            continue
        if project in report.skipped:
            lines.append(f"{marker} {report.relative_path(project)}: not evaluated (referenced by another project)")
            continue
        best = report.best_match(project)
        if best is None:
            lines.append(f"{marker} {report.relative_path(project)}: no match")
        else:
            lines.append(
                f"{marker} {best.project_name}: {best.project_type} {best.confidence:.1%} ({best.confidence_label})"
            )
    counts = report.type_counts
    if counts:
        lines.append("")
        lines.append("Project Types:")
        for project_type, count in counts.most_common():
            lines.append(f"  {project_type}: {count}")
    if any(report.references.values()):
        lines.append("")
        lines.append("Project References:")
        for project, refs in report.references.items():
            targets = ", ".join(report.relative_path(ref) for ref in refs) or "(none)"
            lines.append(f"  {report.relative_path(project)} -> {targets}")
    lines.append("")
    lines.append("* entry point: no other project references it")
    return "\n".join(lines)


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    """Add flags shared between ``detect`` and ``scan-all``."""
    parser.add_argument(
        "--format",
        choices=["summary", "json", "markdown"],
        default="summary",
        help="Output format (default: summary)",
    )
    parser.add_argument("--output", "-o", help="Output file path")
    parser.add_argument("--detailed", action="store_true", help="Include per-check tables (Markdown output only)")
    parser.add_argument("--compact", action="store_true", help="Compact JSON output")
    parser.add_argument(
        "--min-confidence", type=float, metavar="RATIO", help="Only report results at or above this confidence"
    )
    parser.add_argument("--workers", type=int, metavar="N", help="Evaluate up to N checks concurrently")
    parser.add_argument("--parse-timeout", type=float, metavar="SECONDS", help="Per-file parse timeout")
    parser.add_argument("--max-file-size-kb", type=int, metavar="KB", help="Larger files read as empty")
    parser.add_argument("--case-sensitive", action="store_true", help="Compare file paths case-sensitively")
    parser.add_argument(
        "--lenient", action="store_true", help="Load check lists with unknown check types instead of rejecting them"
    )
    _add_config_flags(parser)


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--checklists", metavar="DIR", help="Check-list directory (default: built-in)")
    parser.add_argument("--env-file", metavar="PATH", help="Load REPO_CLASSIFIER_* settings from a .env file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Repo Classifier - detect a project's type with weighted checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  repo-classifier detect /path/to/project
  repo-classifier detect /path/to/project --format json --verbose
  repo-classifier detect /path/to/project --checklists ./my-checklists
  repo-classifier scan-all /path/to/repo --exclude "tests;examples"
  repo-classifier scan-all /path/to/repo --entry-points-only --format markdown
  repo-classifier list-checklists
  repo-classifier validate-checklists ./my-checklists
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {RepoClassifierConstants.VERSION}")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # -- detect ------------------------------------------------------------
    detect_p = subparsers.add_parser("detect", help="Classify a single project")
    detect_p.add_argument("project_directory", help="Directory holding pyproject.toml or requirements.txt")
    _add_common_flags(detect_p)

    # -- scan-all ----------------------------------------------------------
    scan_all_p = subparsers.add_parser("scan-all", help="Classify every project in a repository")
    scan_all_p.add_argument("repo_directory", help="Repository root")
    scan_all_p.add_argument(
        "--exclude",
        action="append",
        metavar="KEYWORDS",
        help="Semicolon-separated keywords; projects whose path contains one are skipped",
    )
    scan_all_p.add_argument(
        "--entry-points-only",
        action="store_true",
        help="Evaluate only projects that no other project references through a local path dependency",
    )
    _add_common_flags(scan_all_p)

    # -- list-checklists ---------------------------------------------------
    lc_p = subparsers.add_parser("list-checklists", help="List available check lists")
    _add_config_flags(lc_p)

    # -- validate-checklists -----------------------------------------------
    vc_p = subparsers.add_parser("validate-checklists", help="Validate check-list documents")
    vc_p.add_argument("path", nargs="?", help="Check-list file or directory (default: built-in)")
    vc_p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    # -- dispatch ----------------------------------------------------------
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    _configure_logging(args)

    dispatch = {
        "detect": detect_command,
        "scan-all": scan_all_command,
        "list-checklists": list_checklists_command,
        "validate-checklists": validate_checklists_command,
    }
    handler = dispatch.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
