"""Formula parser: regex-based reference extraction + recursive descent."""

from __future__ import annotations

import re

from cellgrid.calc._tree import (
    ConstantNode,
    ExpressionTree,
    Node,
    OperatorNode,
    VariableNode,
)

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# Cell ref: one uppercase column letter followed by the row number.  Matched
# anywhere in the formula text, so "AB12" yields "B12".
_CELL_REF_RE = re.compile(r"[A-Z]\d+")

# Decimal literal as the primary scanner sees it (no sign, no exponent sign).
_NUMBER_RE = re.compile(r"^(?:\d+\.?\d*|\.\d+)(?:[eE]\d+)?$")

_WHITESPACE_RE = re.compile(r"\s+")


class FormulaSyntaxError(ValueError):
    """Raised when formula text cannot be parsed."""


# ---------------------------------------------------------------------------
# Reference extraction
# ---------------------------------------------------------------------------


def cell_references(formula: str) -> list[str]:
    """Extract cell-name tokens (``A1``, ``C12``) from *formula*.

    Order of appearance is kept and duplicates are not removed.
    """
    return _CELL_REF_RE.findall(formula)


def references_cell(formula: str, name: str) -> bool:
    """``True`` when *formula* mentions the cell called *name*."""
    return name in cell_references(formula)


# ---------------------------------------------------------------------------
# Recursive descent
# ---------------------------------------------------------------------------


def _is_identifier(part: str) -> bool:
    return bool(part) and part[0].isalpha() and part.isalnum()


class FormulaParser:
    """Builds an :class:`ExpressionTree` from arithmetic text.

    Grammar (left-associative)::

        expr   := term (('+'|'-') term)*
        term   := factor (('*'|'/') factor)*
        factor := NUMBER | IDENTIFIER | '(' expr ')'

    All whitespace is removed up front, so ``"A 1"`` reads as ``"A1"``.
    """

    __slots__ = ("_text", "_pos")

    def __init__(self) -> None:
        self._text = ""
        self._pos = 0

    def parse(self, text: str) -> ExpressionTree:
        self._text = _WHITESPACE_RE.sub("", text)
        self._pos = 0
        root = self._expr()
        if self._pos < len(self._text):
            raise FormulaSyntaxError(
                f"Unexpected character {self._peek()!r} at position {self._pos}"
            )
        return ExpressionTree(root)

    def _peek(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def _expr(self) -> Node:
        left = self._term()
        while self._peek() in ("+", "-"):
            op = self._peek()
            self._pos += 1
            left = OperatorNode(op, left, self._term())
        return left

    def _term(self) -> Node:
        left = self._factor()
        while self._peek() in ("*", "/"):
            op = self._peek()
            self._pos += 1
            left = OperatorNode(op, left, self._factor())
        return left

    def _factor(self) -> Node:
        if self._pos >= len(self._text):
            raise FormulaSyntaxError("Unexpected end of expression.")

        if self._peek() == "(":
            self._pos += 1
            node = self._expr()
            if self._peek() != ")":
                raise FormulaSyntaxError("Missing closing parenthesis.")
            self._pos += 1
            return node

        start = self._pos
        while self._pos < len(self._text) and (
            self._text[self._pos].isalnum() or self._text[self._pos] == "."
        ):
            self._pos += 1
        return self._make_node(self._text[start:self._pos])

    @staticmethod
    def _make_node(part: str) -> Node:
        if _NUMBER_RE.match(part):
            return ConstantNode(float(part))
        if _is_identifier(part):
            return VariableNode(part)
        raise FormulaSyntaxError(f"Invalid expression part: {part!r}")


def parse(text: str) -> ExpressionTree:
    """Parse *text* (no leading ``=``) into an expression tree."""
    return FormulaParser().parse(text)
