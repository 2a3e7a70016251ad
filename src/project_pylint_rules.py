"""Custom pylint rules for annotation style and fluent builder chaining."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from astroid import nodes
from pylint.checkers import BaseChecker
from pylint.lint import PyLinter


_MESSAGE_PREFER_OPTIONAL = "prefer-optional"
_MESSAGE_PREFER_UNION = "prefer-union"
_MESSAGE_FLUENT_RETURN_SELF = "fluent-return-self"
_FLUENT_PREFIX = "with_"
_BUILDER_SUFFIX = "Builder"


class ProjectRulesChecker(BaseChecker):
    """Project-specific AST checks."""

    name = "project-rules"

    msgs = {
        "C9501": (
            "Use Optional[T] instead of T | None in annotations",
            _MESSAGE_PREFER_OPTIONAL,
            "Project style requires Optional[T] for nullable annotations.",
        ),
        "C9502": (
            "Use Union[X, Y] instead of X | Y in annotations",
            _MESSAGE_PREFER_UNION,
            "Project style spells unions with typing.Union, including type aliases.",
        ),
        "E9504": (
            "Fluent method %r must return self",
            _MESSAGE_FLUENT_RETURN_SELF,
            "Builder with_* methods are chained, so every path must return the builder.",
        ),
    }

    def visit_annassign(self, node: nodes.AnnAssign) -> None:
        """Validate annotation style for annotated assignments."""
        self._check_annotation(node.annotation)

    def visit_arguments(self, node: nodes.Arguments) -> None:
        """Validate annotation style for function arguments."""
        for annotation in self._iter_argument_annotations(node):
            self._check_annotation(annotation)

    def visit_functiondef(self, node: nodes.FunctionDef) -> None:
        """Validate return annotation style and fluent builder returns."""
        if node.returns is not None:
            self._check_annotation(node.returns)
        if self._is_fluent_method(node) and not self._returns_self_everywhere(node):
            self.add_message(_MESSAGE_FLUENT_RETURN_SELF, node=node, args=(node.name,))

    def visit_typealias(self, node: nodes.TypeAlias) -> None:
        """Validate annotation style for ``type`` alias statements."""
        self._check_annotation(node.value)

    def _check_annotation(self, annotation: nodes.NodeNG) -> None:
        for union in self._iter_pipe_unions(annotation):
            if any(_is_none_literal(member) for member in _union_members(union)):
                self.add_message(_MESSAGE_PREFER_OPTIONAL, node=union)
            else:
                self.add_message(_MESSAGE_PREFER_UNION, node=union)

    @staticmethod
    def _iter_argument_annotations(arguments: nodes.Arguments) -> Iterable[nodes.NodeNG]:
        for annotation in arguments.posonlyargs_annotations:
            if annotation is not None:
                yield annotation
        for annotation in arguments.annotations:
            if annotation is not None:
                yield annotation
        for annotation in arguments.kwonlyargs_annotations:
            if annotation is not None:
                yield annotation
        if arguments.varargannotation is not None:
            yield arguments.varargannotation
        if arguments.kwargannotation is not None:
            yield arguments.kwargannotation

    @staticmethod
    def _iter_pipe_unions(annotation: nodes.NodeNG) -> Iterable[nodes.BinOp]:
        for candidate in annotation.nodes_of_class(nodes.BinOp):
            if candidate.op != "|":
                continue
            # Report each chain once, at its outermost operator.
            parent = candidate.parent
            if isinstance(parent, nodes.BinOp) and parent.op == "|":
                continue
            yield candidate

    @staticmethod
    def _is_fluent_method(node: nodes.FunctionDef) -> bool:
        if not node.name.startswith(_FLUENT_PREFIX):
            return False
        parent = node.parent
        return isinstance(parent, nodes.ClassDef) and parent.name.endswith(_BUILDER_SUFFIX)

    @staticmethod
    def _returns_self_everywhere(node: nodes.FunctionDef) -> bool:
        returns = [
            candidate
            for candidate in node.nodes_of_class(nodes.Return, skip_klass=nodes.FunctionDef)
            if candidate.scope() is node
        ]
        if not returns:
            return False
        return all(_is_self_chain(candidate.value) for candidate in returns)


def _is_self_chain(value: Optional[nodes.NodeNG]) -> bool:
    if isinstance(value, nodes.Name):
        return value.name == "self"
    if isinstance(value, nodes.Call) and isinstance(value.func, nodes.Attribute):
        receiver = value.func.expr
        return (
            isinstance(receiver, nodes.Name)
            and receiver.name == "self"
            and value.func.attrname.startswith(_FLUENT_PREFIX)
        )
    return False


def _union_members(node: nodes.NodeNG) -> Iterable[nodes.NodeNG]:
    if isinstance(node, nodes.BinOp) and node.op == "|":
        yield from _union_members(node.left)
        yield from _union_members(node.right)
    else:
        yield node


def _is_none_literal(node: nodes.NodeNG) -> bool:
    return isinstance(node, nodes.Const) and node.value is None


def register(linter: PyLinter) -> None:
    """Register checker."""
    linter.register_checker(ProjectRulesChecker(linter))
