"""Reference walking over a spreadsheet grid: resolution, cycles, dependents.

No reverse-dependency index is kept.  Dependents are found by scanning the
grid, which keeps every query consistent with the current cell texts.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from cellgrid._utils import a1_to_rowcol
from cellgrid.calc._parser import cell_references, references_cell

if TYPE_CHECKING:
    from cellgrid._cell import Cell
    from cellgrid._spreadsheet import Spreadsheet


class DependencyGraph:
    """Answers dependency questions about the cells of one spreadsheet.

    All cell references use the plain "A1" form.
    """

    __slots__ = ("_sheet",)

    def __init__(self, sheet: Spreadsheet) -> None:
        self._sheet = sheet

    def resolve(self, ref: str) -> Cell | None:
        """Cell named by *ref*, or None when malformed or outside the grid."""
        try:
            row, col = a1_to_rowcol(ref)
        except ValueError:
            return None
        return self._sheet.get_cell(row, col)

    @staticmethod
    def references(cell: Cell) -> list[str]:
        """Cell-name tokens in *cell*'s formula (empty for plain text)."""
        if not cell.is_formula:
            return []
        return cell_references(cell.text[1:])

    @staticmethod
    def depends_on(cell: Cell, dependency: Cell) -> bool:
        return cell.is_formula and references_cell(cell.text, dependency.name)

    def has_circular_reference(self, cell: Cell) -> bool:
        """Depth-first search for a reference chain that loops back.

        Only names on the current branch count as a loop, so two branches
        meeting at a shared ancestor (a diamond) are not a cycle.  Cells whose
        references were fully explored are not walked again.
        Unresolvable references are ignored here.
        """
        on_path: set[str] = {cell.name}
        done: set[str] = set()
        stack: list[tuple[Cell, Iterator[str]]] = [
            (cell, iter(self.references(cell))),
        ]

        while stack:
            current, refs = stack[-1]
            for ref in refs:
                target = self.resolve(ref)
                if target is None or target.name in done:
                    continue
                if target.name in on_path:
                    return True
                on_path.add(target.name)
                stack.append((target, iter(self.references(target))))
                break
            else:
                stack.pop()
                on_path.discard(current.name)
                done.add(current.name)
        return False

    def dependents(self, cell: Cell) -> list[Cell]:
        """Formula cells that reference *cell*, in row-major order."""
        return [c for c in self._sheet.iter_cells() if self.depends_on(c, cell)]

    def formula_cells(self) -> list[Cell]:
        return [c for c in self._sheet.iter_cells() if c.is_formula]
