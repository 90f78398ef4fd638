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
Tests for the file-existence and file-content executors.
"""

from __future__ import annotations

from repo_classifier.core.executors.file_content import FileContentExecutor
from repo_classifier.core.executors.file_exists import FileExistsExecutor
from repo_classifier.core.models import CheckType
from repo_classifier.core.outcomes import FailureReason, ReadResult


class TestFileExistsExecutor:
    def test_exact_target_at_root(self, make_facts, make_check):
        facts = make_facts({"Program.ext": ""})
        outcome = FileExistsExecutor().execute(make_check(target="Program.ext"), facts)
        assert outcome.passed
        assert outcome.matched == "Program.ext"

    def test_missing_target_fails(self, make_facts, make_check):
        facts = make_facts({"src/app.py": ""})
        outcome = FileExistsExecutor().execute(make_check(target="manage.py"), facts)
        assert not outcome.passed
        assert outcome.reason is FailureReason.NO_MATCHING_FILES

    def test_alternative_target(self, make_facts, make_check):
        facts = make_facts({"asgi.py": ""})
        check = make_check(target="manage.py", alternative_targets=["wsgi.py", "asgi.py"])
        outcome = FileExistsExecutor().execute(check, facts)
        assert outcome.passed
        assert "asgi.py" in outcome.detail

    def test_directory_and_glob_targets(self, make_facts, make_check):
        facts = make_facts({"templates/base/index.html": "", "pkg/tasks.py": ""})
        executor = FileExistsExecutor()
        assert executor.execute(make_check(target="templates/"), facts).passed
        assert executor.execute(make_check(target="**/tasks.py"), facts).passed
        assert not executor.execute(make_check(target="static/"), facts).passed

    def test_empty_file_list(self, make_facts, make_check):
        outcome = FileExistsExecutor().execute(make_check(target="**/*"), make_facts({}))
        assert not outcome.passed

    def test_content_is_never_read(self, make_facts, make_check):
        class ExplodingReader:
            def read(self, relative_path: str) -> ReadResult:
                raise AssertionError("file-existence checks must not read files")

        facts = make_facts({"main.py": "x"})
        facts.reader = ExplodingReader()
        assert FileExistsExecutor().execute(make_check(target="main.py"), facts).passed


class TestFileContentExecutor:
    def test_regex_is_case_insensitive_and_multiline(self, make_facts, make_check):
        facts = make_facts({"Dockerfile": "FROM python:3.12\nexpose 8000\n"})
        check = make_check(CheckType.FILE_CONTENT, target="Dockerfile", pattern=r"^EXPOSE\s+\d+")
        assert FileContentExecutor().execute(check, facts).passed

    def test_regex_without_match(self, make_facts, make_check):
        facts = make_facts({"Dockerfile": "FROM python:3.12\n"})
        check = make_check(CheckType.FILE_CONTENT, target="Dockerfile", pattern=r"EXPOSE")
        outcome = FileContentExecutor().execute(check, facts)
        assert not outcome.passed
        assert outcome.reason is FailureReason.NO_MATCH

    def test_literal_expected_value(self, make_facts, make_check):
        facts = make_facts({"setup.cfg": "[options.entry_points]\nCONSOLE_SCRIPTS =\n"})
        check = make_check(CheckType.FILE_CONTENT, target="setup.cfg", expected_values=["console_scripts"])
        assert FileContentExecutor().execute(check, facts).passed

    def test_pattern_takes_priority_over_literal(self, make_facts, make_check):
        facts = make_facts({"notes.txt": "literal only"})
        check = make_check(
            CheckType.FILE_CONTENT, target="notes.txt", pattern=r"^absent$", expected_values=["literal"]
        )
        assert not FileContentExecutor().execute(check, facts).passed

    def test_no_search_criteria_is_a_configuration_defect(self, make_facts, make_check):
        facts = make_facts({"notes.txt": "anything"})
        outcome = FileContentExecutor().execute(make_check(CheckType.FILE_CONTENT, target="notes.txt"), facts)
        assert not outcome.passed
        assert outcome.reason is FailureReason.NO_SEARCH_CRITERIA
        assert outcome.reason.is_configuration_defect

    def test_invalid_regex(self, make_facts, make_check):
        facts = make_facts({"notes.txt": "anything"})
        check = make_check(CheckType.FILE_CONTENT, target="notes.txt", pattern="(unclosed")
        outcome = FileContentExecutor().execute(check, facts)
        assert outcome.reason is FailureReason.INVALID_PATTERN

    def test_first_matching_file_stops_scan(self, make_facts, make_check):
        reads: list[str] = []
        facts = make_facts({"a/one.py": "needle", "a/two.py": "needle"})
        inner = facts.reader

        class RecordingReader:
            def read(self, relative_path: str) -> ReadResult:
                reads.append(relative_path)
                return inner.read(relative_path)

        facts.reader = RecordingReader()
        check = make_check(CheckType.FILE_CONTENT, target="a/*.py", expected_values=["needle"])
        outcome = FileContentExecutor().execute(check, facts)
        assert outcome.passed
        assert reads == ["a/one.py"]

    def test_oversized_file_reads_as_empty(self, make_facts, make_check):
        facts = make_facts({"big.txt": "needle" + "x" * 2048}, max_size_bytes=1024)
        check = make_check(CheckType.FILE_CONTENT, target="big.txt", expected_values=["needle"])
        outcome = FileContentExecutor().execute(check, facts)
        assert not outcome.passed
        assert outcome.reason is FailureReason.NO_MATCH

    def test_read_error_is_not_fatal(self, make_facts, make_check):
        facts = make_facts({"a.txt": "needle", "b.txt": "needle"})
        inner = facts.reader

        class FlakyReader:
            def read(self, relative_path: str) -> ReadResult:
                if relative_path == "a.txt":
                    raise OSError("permission denied")
                return inner.read(relative_path)

        facts.reader = FlakyReader()
        check = make_check(CheckType.FILE_CONTENT, target="*.txt", expected_values=["needle"])
        outcome = FileContentExecutor().execute(check, facts)
        assert outcome.passed
        assert outcome.matched == "b.txt"

    def test_alternatives_tried_in_order(self, make_facts, make_check):
        facts = make_facts({"compose.yaml": "ports:\n  - 80:80\n", "Dockerfile": "FROM scratch"})
        check = make_check(
            CheckType.FILE_CONTENT,
            target="Dockerfile",
            alternative_targets=["docker-compose.yml", "compose.yaml"],
            pattern=r"^\s*ports\s*:",
        )
        outcome = FileContentExecutor().execute(check, facts)
        assert outcome.passed
        assert outcome.matched == "compose.yaml"

    def test_missing_files_fail_cleanly(self, make_facts, make_check):
        check = make_check(CheckType.FILE_CONTENT, target="Dockerfile", pattern="EXPOSE")
        outcome = FileContentExecutor().execute(check, make_facts({}))
        assert outcome.reason is FailureReason.NO_MATCHING_FILES
