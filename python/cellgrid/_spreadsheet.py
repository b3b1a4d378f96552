"""Spreadsheet: fixed grid of cells with recalculation and undo/redo."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from cellgrid._cell import DEFAULT_BACKGROUND, Cell
from cellgrid._history import Command, UndoRedoHistory
from cellgrid._utils import MAX_COLUMNS, a1_to_rowcol
from cellgrid.calc._evaluator import SheetEvaluator
from cellgrid.calc._protocol import RecalcResult

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 50
DEFAULT_COLUMNS = MAX_COLUMNS

CellListener = Callable[[Cell, str], None]
CellFactory = Callable[["Spreadsheet", int, int], Cell]


@dataclass(frozen=True)
class CellRecord:
    """Persisted shape of one cell: address, ARGB color, raw text."""

    name: str  # "B3"
    background_color: int
    text: str


class Spreadsheet:
    """A grid of ``rows x columns`` cells.

    Usage::

        sheet = Spreadsheet(10, 10)
        sheet["A1"].text = "5"
        sheet["B1"].text = "=A1+10"
        sheet["B1"].value          # '15'

    Setting a cell's text recomputes it and all of its dependents before the
    assignment returns.  Listeners registered with :meth:`subscribe` are
    called as ``listener(cell, property_name)`` for every ``"text"``,
    ``"value"`` and ``"background_color"`` change.
    """

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        columns: int = DEFAULT_COLUMNS,
        cell_factory: CellFactory | None = None,
    ) -> None:
        if rows < 1:
            raise ValueError(f"rows must be positive, got {rows}")
        if not 1 <= columns <= MAX_COLUMNS:
            raise ValueError(f"columns must be between 1 and {MAX_COLUMNS}, got {columns}")
        self._rows = rows
        self._columns = columns
        self._listeners: list[CellListener] = []
        self._history = UndoRedoHistory()
        self._evaluator = SheetEvaluator(self)
        self.last_recalc: RecalcResult | None = None
        factory = cell_factory or Cell
        self._cells: list[list[Cell]] = [
            [factory(self, r, c) for c in range(columns)] for r in range(rows)
        ]

    @property
    def row_count(self) -> int:
        return self._rows

    @property
    def column_count(self) -> int:
        return self._columns

    @property
    def evaluator(self) -> SheetEvaluator:
        return self._evaluator

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def get_cell(self, row: int, column: int) -> Cell | None:
        """Cell at 0-based ``(row, column)``, or None when out of bounds."""
        if not (0 <= row < self._rows and 0 <= column < self._columns):
            return None
        return self._cells[row][column]

    def __getitem__(self, key: str) -> Cell:
        """``sheet['B3']`` -> Cell."""
        try:
            row, col = a1_to_rowcol(key)
        except ValueError:
            raise KeyError(f"Invalid cell address {key!r}") from None
        cell = self.get_cell(row, col)
        if cell is None:
            raise KeyError(f"Cell {key!r} is outside the grid")
        return cell

    def iter_cells(self) -> Iterator[Cell]:
        """All cells in row-major order."""
        for row in self._cells:
            yield from row

    def records(self) -> list[CellRecord]:
        """Records for cells with text or a non-default color."""
        return [
            CellRecord(cell.name, cell.background_color, cell.text)
            for cell in self.iter_cells()
            if cell.text or cell.background_color != DEFAULT_BACKGROUND
        ]

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: CellListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: CellListener) -> None:
        self._listeners.remove(listener)

    def _notify(self, cell: Cell, prop: str) -> None:
        for listener in list(self._listeners):
            listener(cell, prop)

    def _cell_text_changed(self, cell: Cell) -> None:
        self._notify(cell, "text")
        self.last_recalc = self._evaluator.recalculate(cell)

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    def add_undo(self, command: Command) -> None:
        self._history.add_undo(command)

    def undo(self) -> None:
        self._history.undo()

    def redo(self) -> None:
        self._history.redo()

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def undo_description(self) -> str:
        return self._history.undo_description

    @property
    def redo_description(self) -> str:
        return self._history.redo_description

    def clear_undo_redo(self) -> None:
        self._history.clear()

    # ------------------------------------------------------------------
    # Bulk operations (used around a load)
    # ------------------------------------------------------------------

    def clear_all(self) -> None:
        """Reset every cell's text to empty and color to white."""
        for cell in self.iter_cells():
            cell.text = ""
            cell.background_color = DEFAULT_BACKGROUND
        logger.debug("Cleared %dx%d grid", self._rows, self._columns)

    def evaluate_all_formulas(self) -> dict[str, str]:
        """Recompute every formula cell, skipping known circular ones."""
        return self._evaluator.evaluate_all()

    def __repr__(self) -> str:
        return f"<Spreadsheet {self._rows}x{self._columns}>"
