"""Reversible edit commands and the undo/redo history."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cellgrid._cell import Cell

logger = logging.getLogger(__name__)


@runtime_checkable
class Command(Protocol):
    """A reversible edit."""

    @property
    def description(self) -> str:
        ...

    def execute(self) -> None:
        """Apply the edit."""
        ...

    def undo(self) -> None:
        """Revert the edit."""
        ...


class ChangeTextCommand:
    """Set a cell's text; undo restores the previous text.

    Both directions go through ``Cell.text`` so dependents are recalculated.
    """

    __slots__ = ("cell", "old_text", "new_text", "_description")

    def __init__(self, cell: Cell, old_text: str, new_text: str) -> None:
        if cell is None:
            raise ValueError("cell is required")
        self.cell = cell
        self.old_text = old_text
        self.new_text = new_text
        self._description = f"Change cell {cell.name} value"

    @property
    def description(self) -> str:
        return self._description

    def execute(self) -> None:
        self.cell.text = self.new_text

    def undo(self) -> None:
        self.cell.text = self.old_text


class ChangeColorCommand:
    """Set a cell's background color; never triggers recalculation."""

    __slots__ = ("cell", "old_color", "new_color", "_description")

    def __init__(self, cell: Cell, old_color: int, new_color: int) -> None:
        if cell is None:
            raise ValueError("cell is required")
        self.cell = cell
        self.old_color = old_color
        self.new_color = new_color
        self._description = f"Change cell {cell.name} color"

    @property
    def description(self) -> str:
        return self._description

    def execute(self) -> None:
        logger.debug(
            "Executing color change: %08X -> %08X", self.old_color, self.new_color,
        )
        self.cell.background_color = self.new_color

    def undo(self) -> None:
        logger.debug(
            "Undoing color change: %08X -> %08X", self.new_color, self.old_color,
        )
        self.cell.background_color = self.old_color


class UndoRedoHistory:
    """Two stacks of commands.  Adding a command invalidates redo."""

    __slots__ = ("_undo", "_redo")

    def __init__(self) -> None:
        self._undo: list[Command] = []
        self._redo: list[Command] = []

    def add_undo(self, command: Command) -> None:
        self._undo.append(command)
        self._redo.clear()

    def undo(self) -> None:
        if not self._undo:
            return
        command = self._undo.pop()
        command.undo()
        self._redo.append(command)

    def redo(self) -> None:
        if not self._redo:
            return
        command = self._redo.pop()
        command.execute()
        self._undo.append(command)

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_description(self) -> str:
        return self._undo[-1].description if self._undo else ""

    @property
    def redo_description(self) -> str:
        return self._redo[-1].description if self._redo else ""

    def __len__(self) -> int:
        return len(self._undo)
