"""Cell: one addressable slot of a Spreadsheet."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cellgrid._utils import rowcol_to_a1

if TYPE_CHECKING:
    from cellgrid._spreadsheet import Spreadsheet

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND = 0xFFFFFFFF  # opaque white, ARGB


class Cell:
    """A grid cell holding raw text, its computed value and a background color.

    ``text`` is what the user typed; assigning it makes the owning spreadsheet
    recompute ``value`` and every dependent cell before returning.  ``value``
    is read-only from the outside.
    """

    __slots__ = ("_sheet", "_row", "_col", "_text", "_value", "_background_color")

    def __init__(self, sheet: Spreadsheet, row: int, col: int) -> None:
        self._sheet = sheet
        self._row = row
        self._col = col
        self._text = ""
        self._value = ""
        self._background_color = DEFAULT_BACKGROUND

    @property
    def row(self) -> int:
        return self._row

    @property
    def column(self) -> int:
        return self._col

    @property
    def name(self) -> str:
        """A1-style address, e.g. ``'B3'``."""
        return rowcol_to_a1(self._row, self._col)

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"Cell text must be str, got {type(text).__name__}")
        if text == self._text:
            return
        self._text = text
        self._sheet._cell_text_changed(self)  # noqa: SLF001

    @property
    def value(self) -> str:
        return self._value

    def _set_value(self, value: str) -> None:
        """Store a computed value. Only the evaluator calls this."""
        if value == self._value:
            return
        self._value = value
        self._sheet._notify(self, "value")  # noqa: SLF001

    @property
    def background_color(self) -> int:
        return self._background_color

    @background_color.setter
    def background_color(self, color: int) -> None:
        if not isinstance(color, int) or isinstance(color, bool):
            raise TypeError(
                f"Background color must be int, got {type(color).__name__}"
            )
        if not 0 <= color <= 0xFFFFFFFF:
            raise ValueError(f"Background color out of range: {color:#x}")
        if color == self._background_color:
            return
        self._background_color = color
        logger.debug("%s background color -> %08X", self.name, color)
        self._sheet._notify(self, "background_color")  # noqa: SLF001

    @property
    def is_formula(self) -> bool:
        return self._text.startswith("=")

    def __repr__(self) -> str:
        return f"<Cell {self.name} text={self._text!r} value={self._value!r}>"
