"""SheetEvaluator: recomputes cell values and propagates changes.

A text edit recomputes the edited cell, then a breadth-first sweep recomputes
every cell whose formula names a cell recomputed earlier in the same sweep.
Problems are stored as the cell's value (see :class:`ErrorKind`) and never
escape into the sweep.
"""

from __future__ import annotations

import logging
import math
import re
from collections import deque
from typing import TYPE_CHECKING

from cellgrid.calc._graph import DependencyGraph
from cellgrid.calc._parser import cell_references, parse, references_cell
from cellgrid.calc._protocol import (
    CIRCULAR_REFERENCE_VALUE,
    CellDelta,
    ErrorKind,
    FormulaResult,
    RecalcResult,
)

if TYPE_CHECKING:
    from cellgrid._cell import Cell
    from cellgrid._spreadsheet import Spreadsheet

logger = logging.getLogger(__name__)


# Signed decimal as stored in a cell value ("15", "-2.5", "1e+20").
_NUMERIC_VALUE_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")

# Non-finite results as format_number writes them.
_NON_FINITE_VALUES = {
    "Infinity": math.inf,
    "-Infinity": -math.inf,
    "NaN": math.nan,
}


def _to_number(value: str) -> float:
    """Numeric reading of a cell value; empty or non-numeric is ``0``."""
    value = value.strip()
    if value in _NON_FINITE_VALUES:
        return _NON_FINITE_VALUES[value]
    if _NUMERIC_VALUE_RE.match(value):
        return float(value)
    return 0.0


class SheetEvaluator:
    """Evaluates the formula cells of one spreadsheet.

    Usage::

        evaluator = SheetEvaluator(sheet)
        result = evaluator.recalculate(sheet.get_cell(0, 0))
        result.changed_refs   # ["A1", "B1", ...]
    """

    def __init__(self, sheet: Spreadsheet) -> None:
        self._sheet = sheet
        self._graph = DependencyGraph(sheet)
        # names of cells mid-evaluation, for reentrant recalculation
        self._evaluating: set[str] = set()
        # cell and its value before the current edit touched it
        self._changes: dict[str, tuple[Cell, str]] | None = None

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    @property
    def evaluating(self) -> frozenset[str]:
        return frozenset(self._evaluating)

    def recalculate(self, cell: Cell) -> RecalcResult:
        """Recompute *cell* and every transitive dependent."""
        outer = self._changes
        changes: dict[str, tuple[Cell, str]] = {}
        self._changes = changes
        try:
            self.update_cell_value(cell)
            recomputed = self.update_dependents(cell)
        finally:
            self._changes = outer

        if outer is not None:
            # nested edit (a listener wrote a cell mid-sweep)
            for ref, entry in changes.items():
                outer.setdefault(ref, entry)

        deltas = tuple(
            CellDelta(cell_ref=ref, old_value=old, new_value=c.value, text=c.text)
            for ref, (c, old) in changes.items()
            if old != c.value
        )
        return RecalcResult(
            changed_cell=cell.name,
            deltas=deltas,
            recomputed_cells=len(recomputed),
        )

    def update_cell_value(self, cell: Cell) -> str:
        """Recompute one cell from its text and store the value."""
        if cell.is_formula:
            new_value = self.evaluate_formula(cell).display
        else:
            new_value = cell.text

        if self._changes is not None:
            self._changes.setdefault(cell.name, (cell, cell.value))
        cell._set_value(new_value)  # noqa: SLF001
        return new_value

    def evaluate_formula(self, cell: Cell) -> FormulaResult:
        """Evaluate *cell*'s formula without storing anything.

        Checks, in order: self-reference, reentry into a cell already being
        evaluated, a reference cycle reachable from *cell*, then parses and
        evaluates.
        """
        formula = cell.text[1:]
        name = cell.name

        if references_cell(formula, name):
            logger.debug("Self-reference in %s: %r", name, cell.text)
            return FormulaResult.fail(ErrorKind.SELF_REFERENCE)

        if name in self._evaluating:
            logger.debug("Reentrant evaluation of %s", name)
            return FormulaResult.fail(ErrorKind.CIRCULAR_REFERENCE)

        self._evaluating.add(name)
        try:
            if self._graph.has_circular_reference(cell):
                logger.debug("Circular reference reachable from %s", name)
                return FormulaResult.fail(ErrorKind.CIRCULAR_REFERENCE)
            return self._evaluate_expression(name, formula)
        finally:
            self._evaluating.discard(name)

    def _evaluate_expression(self, name: str, formula: str) -> FormulaResult:
        try:
            tree = parse(formula)
            bindings: dict[str, float] = {}
            for ref in cell_references(formula):
                target = self._graph.resolve(ref)
                if target is None:
                    return FormulaResult.fail(ErrorKind.INVALID_REFERENCE, ref)
                bindings[ref] = _to_number(target.value)
            return FormulaResult.ok(tree.evaluate(bindings))
        except Exception as exc:  # noqa: BLE001
            logger.debug("Cannot evaluate formula %r in %s: %s", formula, name, exc)
            return FormulaResult.fail(ErrorKind.EVALUATION, str(exc))

    def update_dependents(self, changed: Cell) -> list[Cell]:
        """Breadth-first sweep outward from *changed*.

        Each dependent is recomputed every time one of its inputs is dequeued
        but enqueued at most once per sweep.
        """
        queued: set[str] = set()
        recomputed: list[Cell] = []
        queue: deque[Cell] = deque([changed])

        while queue:
            cell = queue.popleft()
            for dep in self._graph.dependents(cell):
                self.update_cell_value(dep)
                recomputed.append(dep)
                if dep.name not in queued:
                    queued.add(dep.name)
                    queue.append(dep)

        if recomputed:
            logger.debug(
                "Sweep from %s recomputed %d cell(s)", changed.name, len(recomputed),
            )
        return recomputed

    def evaluate_all(self) -> dict[str, str]:
        """Recompute every formula cell in row-major order.

        Cells already showing a circular-reference error are left alone.
        Returns ``{"A1": value}`` for each cell recomputed.
        """
        self._evaluating.clear()
        results: dict[str, str] = {}
        for cell in self._graph.formula_cells():
            if cell.value == CIRCULAR_REFERENCE_VALUE:
                continue
            results[cell.name] = self.update_cell_value(cell)
        return results
