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
Python AST parser producing a declaration index for structural checks.

Mapping from Python constructs to declaration kinds:

- type: ``class`` statement. Bases are dotted names with subscripts dropped
  (``Generic[T]`` -> ``Generic``); annotations are the class decorators.
- method: ``def`` / ``async def``. Annotations are decorators, return type
  is the source text of the return annotation.
- property: ``@property`` / ``@cached_property`` methods and class-level
  attributes. Annotations are the remaining decorators, ``Annotated[...]``
  metadata and the called name of the assigned value (``Field(...)``).
- parameter: every function argument. Annotations are ``Annotated[...]``
  metadata and the called name of the default (``Depends(...)``).
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

PROPERTY_DECORATORS = frozenset({"property", "cached_property", "functools.cached_property"})


class DeclarationKind(str, Enum):
    TYPE = "type"
    METHOD = "method"
    PROPERTY = "property"
    PARAMETER = "parameter"


@dataclass
class Declaration:
    """A named declaration and the names attached to it."""

    kind: DeclarationKind
    name: str
    line_number: int
    base_types: list[str] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)
    return_type: str | None = None
    owner: str | None = None


@dataclass
class SyntaxTree:
    """Declarations of one source file, in source order."""

    declarations: list[Declaration] = field(default_factory=list)

    def of_kind(self, kind: DeclarationKind) -> list[Declaration]:
        return [d for d in self.declarations if d.kind == kind]

    @property
    def types(self) -> list[Declaration]:
        return self.of_kind(DeclarationKind.TYPE)

    @property
    def methods(self) -> list[Declaration]:
        return self.of_kind(DeclarationKind.METHOD)

    @property
    def properties(self) -> list[Declaration]:
        return self.of_kind(DeclarationKind.PROPERTY)

    @property
    def parameters(self) -> list[Declaration]:
        return self.of_kind(DeclarationKind.PARAMETER)


class SyntaxParser(Protocol):
    """Builds a :class:`SyntaxTree` from source text.

    Implementations raise ``SyntaxError`` (or ``ValueError``) on input they
    cannot parse; callers treat that as "no match" for the file.
    """

    def parse(self, source_code: str) -> SyntaxTree: ...


def dotted_name(node: ast.AST | None) -> str | None:
    """Dotted name of a Name/Attribute chain; calls and subscripts unwrap."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        prefix = dotted_name(node.value)
        return f"{prefix}.{node.attr}" if prefix else node.attr
    if isinstance(node, ast.Call):
        return dotted_name(node.func)
    if isinstance(node, ast.Subscript):
        return dotted_name(node.value)
    return None


def _annotated_metadata(annotation: ast.AST | None) -> list[str]:
    """Names inside ``Annotated[T, meta, ...]`` after the first element."""
    if not isinstance(annotation, ast.Subscript):
        return []
    base = dotted_name(annotation.value) or ""
    if base.rsplit(".", 1)[-1] != "Annotated":
        return []
    if not isinstance(annotation.slice, ast.Tuple):
        return []
    names = []
    for element in annotation.slice.elts[1:]:
        name = dotted_name(element)
        if name:
            names.append(name)
    return names


def _value_call_name(value: ast.AST | None) -> list[str]:
    if isinstance(value, ast.Call):
        name = dotted_name(value.func)
        if name:
            return [name]
    return []


class _DeclarationCollector(ast.NodeVisitor):
    def __init__(self):
        self.declarations: list[Declaration] = []
        self._scope: list[tuple[str, str]] = []

    @property
    def _class_owner(self) -> str | None:
        if self._scope and self._scope[-1][0] == "class":
            return self._scope[-1][1]
        return None

    def visit_ClassDef(self, node: ast.ClassDef):
        bases = [name for name in (dotted_name(b) for b in node.bases) if name]
        decorators = [name for name in (dotted_name(d) for d in node.decorator_list) if name]
        self.declarations.append(
            Declaration(
                kind=DeclarationKind.TYPE,
                name=node.name,
                line_number=node.lineno,
                base_types=bases,
                annotations=decorators,
                owner=self._class_owner,
            )
        )
        self._scope.append(("class", node.name))
        for child in node.body:
            if isinstance(child, ast.AnnAssign) and isinstance(child.target, ast.Name):
                self._add_attribute(child.target.id, child.lineno, child.annotation, child.value, node.name)
            elif isinstance(child, ast.Assign) and isinstance(child.value, ast.Call):
                for target in child.targets:
                    if isinstance(target, ast.Name):
                        self._add_attribute(target.id, child.lineno, None, child.value, node.name)
            else:
                self.visit(child)
        self._scope.pop()

    def _add_attribute(self, name: str, line: int, annotation: ast.AST | None, value: ast.AST | None, owner: str):
        self.declarations.append(
            Declaration(
                kind=DeclarationKind.PROPERTY,
                name=name,
                line_number=line,
                annotations=_annotated_metadata(annotation) + _value_call_name(value),
                return_type=ast.unparse(annotation) if annotation is not None else None,
                owner=owner,
            )
        )
        # Lambdas and comprehensions in the value may hold nested classes
        if value is not None:
            self.generic_visit(value)

    def visit_FunctionDef(self, node: ast.FunctionDef | ast.AsyncFunctionDef):
        decorators = [name for name in (dotted_name(d) for d in node.decorator_list) if name]
        owner = self._class_owner
        is_property = owner is not None and any(d in PROPERTY_DECORATORS for d in decorators)
        returns = ast.unparse(node.returns) if node.returns is not None else None
        self.declarations.append(
            Declaration(
                kind=DeclarationKind.PROPERTY if is_property else DeclarationKind.METHOD,
                name=node.name,
                line_number=node.lineno,
                annotations=[d for d in decorators if d not in PROPERTY_DECORATORS] if is_property else decorators,
                return_type=returns,
                owner=owner,
            )
        )
        self._add_parameters(node)
        self._scope.append(("function", node.name))
        for child in node.body:
            self.visit(child)
        self._scope.pop()

    visit_AsyncFunctionDef = visit_FunctionDef

    def _add_parameters(self, node: ast.FunctionDef | ast.AsyncFunctionDef):
        args = node.args
        positional = [*args.posonlyargs, *args.args]
        defaults: list[ast.AST | None] = [None] * (len(positional) - len(args.defaults)) + list(args.defaults)
        pairs: list[tuple[ast.arg, ast.AST | None]] = list(zip(positional, defaults))
        pairs.extend(zip(args.kwonlyargs, args.kw_defaults))
        if args.vararg is not None:
            pairs.append((args.vararg, None))
        if args.kwarg is not None:
            pairs.append((args.kwarg, None))
        for arg, default in pairs:
            self.declarations.append(
                Declaration(
                    kind=DeclarationKind.PARAMETER,
                    name=arg.arg,
                    line_number=arg.lineno,
                    annotations=_annotated_metadata(arg.annotation) + _value_call_name(default),
                    return_type=ast.unparse(arg.annotation) if arg.annotation is not None else None,
                    owner=node.name,
                )
            )


class PythonSyntaxParser:
    """Parse Python source into a :class:`SyntaxTree`."""

    def parse(self, source_code: str) -> SyntaxTree:
        """
        Parse source code and collect declarations.

        Args:
            source_code: Python source text

        Returns:
            SyntaxTree with type, method, property and parameter declarations

        Raises:
            SyntaxError: If the source is not valid Python
            ValueError: If the source contains null bytes
        """
        tree = ast.parse(source_code)
        collector = _DeclarationCollector()
        collector.visit(tree)
        logger.debug("Parsed %d declarations", len(collector.declarations))
        return SyntaxTree(collector.declarations)
