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
Tests for the Python declaration parser.
"""

import textwrap

import pytest

from repo_classifier.core.static_analysis.parser.python_parser import (
    DeclarationKind,
    PythonSyntaxParser,
)

SOURCE = textwrap.dedent(
    '''
    from typing import Annotated, Generic, TypeVar

    import framework
    from fastapi import Depends, FastAPI, Query
    from pydantic import BaseModel, Field

    T = TypeVar("T")
    app = FastAPI()


    @framework.register
    class Handler(framework.handlers.HandlerBase, Generic[T]):
        name: str = Field(default="x")
        limit: Annotated[int, Query(ge=1)] = 10
        cache = dict()

        @property
        def label(self) -> str:
            return self.name

        @staticmethod
        async def build(payload: dict) -> "list[Handler]":
            return []


    @app.get("/items")
    def list_items(q: Annotated[str, Query()] = "", db=Depends(get_db), *, page: int = 1) -> dict:
        def helper():
            pass
        return {}


    def outer():
        class Inner(BaseModel):
            pass
        return Inner
    '''
)


@pytest.fixture(scope="module")
def tree():
    return PythonSyntaxParser().parse(SOURCE)


class TestTypes:
    def test_class_bases_are_dotted_and_unsubscripted(self, tree):
        handler = next(d for d in tree.types if d.name == "Handler")
        assert handler.base_types == ["framework.handlers.HandlerBase", "Generic"]
        assert handler.annotations == ["framework.register"]

    def test_nested_class_inside_function_is_found(self, tree):
        inner = next(d for d in tree.types if d.name == "Inner")
        assert inner.base_types == ["BaseModel"]


class TestMethods:
    def test_decorated_function(self, tree):
        list_items = next(d for d in tree.methods if d.name == "list_items")
        assert list_items.annotations == ["app.get"]
        assert list_items.return_type == "dict"

    def test_async_method_return_type_text(self, tree):
        build = next(d for d in tree.methods if d.name == "build")
        assert build.annotations == ["staticmethod"]
        assert "list[Handler]" in build.return_type
        assert build.owner == "Handler"

    def test_nested_function_is_a_method_declaration(self, tree):
        assert any(d.name == "helper" for d in tree.methods)


class TestProperties:
    def test_property_decorator(self, tree):
        label = next(d for d in tree.properties if d.name == "label")
        assert label.annotations == []
        assert label.return_type == "str"
        assert all(d.name != "label" for d in tree.methods)

    def test_annotated_attribute_metadata(self, tree):
        limit = next(d for d in tree.properties if d.name == "limit")
        assert limit.annotations == ["Query"]

    def test_attribute_value_call(self, tree):
        name = next(d for d in tree.properties if d.name == "name")
        assert name.annotations == ["Field"]
        cache = next(d for d in tree.properties if d.name == "cache")
        assert cache.annotations == ["dict"]


class TestParameters:
    def test_annotated_parameter(self, tree):
        q = next(d for d in tree.parameters if d.name == "q")
        assert q.annotations == ["Query"]
        assert q.owner == "list_items"

    def test_default_call_parameter(self, tree):
        db = next(d for d in tree.parameters if d.name == "db")
        assert db.annotations == ["Depends"]

    def test_keyword_only_parameter(self, tree):
        page = next(d for d in tree.parameters if d.name == "page")
        assert page.annotations == []
        assert page.return_type == "int"

    def test_self_is_a_parameter(self, tree):
        assert any(d.name == "self" and d.owner == "label" for d in tree.parameters)


class TestParseFailures:
    def test_syntax_error_raises(self):
        with pytest.raises(SyntaxError):
            PythonSyntaxParser().parse("class Broken(:\n    pass")

    def test_empty_source(self):
        tree = PythonSyntaxParser().parse("")
        assert tree.declarations == []

    def test_kind_helpers(self, tree):
        kinds = {d.kind for d in tree.declarations}
        assert kinds == set(DeclarationKind)
