"""Formula result type and recalculation result dataclasses."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Cell-level error categories stored as a cell's computed value."""

    SELF_REFERENCE = "Self-reference detected"
    CIRCULAR_REFERENCE = "Circular reference detected"
    INVALID_REFERENCE = "Invalid cell reference"
    EVALUATION = "Error"


CIRCULAR_REFERENCE_VALUE = ErrorKind.CIRCULAR_REFERENCE.value


def format_number(number: float) -> str:
    """Canonical display form of a computed number.

    ``15.0`` -> ``'15'``, ``2.5`` -> ``'2.5'``, ``inf`` -> ``'Infinity'``.
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer() and abs(number) < 1e16:
        return str(int(number))
    return repr(number)


@dataclass(frozen=True)
class FormulaResult:
    """Outcome of evaluating one formula: a number or a tagged error."""

    number: float | None = None
    error: ErrorKind | None = None
    detail: str = ""

    @classmethod
    def ok(cls, number: float) -> FormulaResult:
        return cls(number=number)

    @classmethod
    def fail(cls, error: ErrorKind, detail: str = "") -> FormulaResult:
        return cls(error=error, detail=detail)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def display(self) -> str:
        """String stored as the cell's value."""
        if self.error is None:
            return format_number(self.number if self.number is not None else 0.0)
        if self.error is ErrorKind.INVALID_REFERENCE:
            return f"{self.error.value} '{self.detail}'"
        if self.error is ErrorKind.EVALUATION:
            return f"{self.error.value}: {self.detail}"
        return self.error.value


@dataclass(frozen=True)
class CellDelta:
    """A single cell's value change from recalculation."""

    cell_ref: str  # "B3"
    old_value: str
    new_value: str
    text: str = ""  # the text that produced new_value


@dataclass(frozen=True)
class RecalcResult:
    """Result of one top-level recalculation (the edit plus its sweep)."""

    changed_cell: str
    deltas: tuple[CellDelta, ...]
    recomputed_cells: int = 0  # dependents recomputed by the sweep

    @property
    def changed_refs(self) -> list[str]:
        return [d.cell_ref for d in self.deltas]
