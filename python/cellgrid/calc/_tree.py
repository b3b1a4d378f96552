"""Expression tree nodes and the ExpressionTree wrapper."""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Union


def _divide(left: float, right: float) -> float:
    # Python raises on float division by zero; IEEE-754 does not.
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


_OPERATIONS = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
}

OPERATORS = frozenset(_OPERATIONS)


@dataclass(frozen=True)
class ConstantNode:
    """A literal number."""

    value: float

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        return self.value


@dataclass(frozen=True)
class VariableNode:
    """A bare name; unbound names evaluate to ``0``."""

    name: str

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        return bindings.get(self.name, 0.0)


@dataclass(frozen=True)
class OperatorNode:
    """A binary arithmetic operator applied to two owned children."""

    op: str
    left: Node
    right: Node

    def __post_init__(self) -> None:
        if self.op not in _OPERATIONS:
            raise ValueError(f"Invalid operator: {self.op!r}")

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        return _OPERATIONS[self.op](
            self.left.evaluate(bindings), self.right.evaluate(bindings),
        )


Node = Union[ConstantNode, VariableNode, OperatorNode]


def _walk(node: Node) -> Iterator[Node]:
    yield node
    if isinstance(node, OperatorNode):
        yield from _walk(node.left)
        yield from _walk(node.right)


class ExpressionTree:
    """A parsed arithmetic expression.

    Usage::

        tree = ExpressionTree.from_text("A+B*C")
        tree.evaluate({"A": 2, "B": 3, "C": 4})   # 14.0
    """

    __slots__ = ("root",)

    def __init__(self, root: Node) -> None:
        self.root = root

    @classmethod
    def from_text(cls, text: str) -> ExpressionTree:
        from cellgrid.calc._parser import parse

        return parse(text)

    def evaluate(self, bindings: Mapping[str, float] | None = None) -> float:
        return float(self.root.evaluate(bindings or {}))

    def variables(self) -> list[str]:
        """Variable names in order of first appearance."""
        names: list[str] = []
        seen: set[str] = set()
        for node in _walk(self.root):
            if isinstance(node, VariableNode) and node.name not in seen:
                names.append(node.name)
                seen.add(node.name)
        return names

    def __repr__(self) -> str:
        return f"<ExpressionTree {self.root!r}>"
