"""cellgrid — in-memory spreadsheet engine with formulas, recalculation and undo.

Usage::

    from cellgrid import Spreadsheet, ChangeTextCommand

    sheet = Spreadsheet(10, 10)
    sheet["A1"].text = "5"
    sheet["B1"].text = "=A1+10"
    print(sheet["B1"].value)        # 15

    cell = sheet["A1"]
    cmd = ChangeTextCommand(cell, cell.text, "7")
    sheet.add_undo(cmd)
    cmd.execute()                   # B1 -> 17
    sheet.undo()                    # B1 -> 15
"""

from cellgrid._cell import DEFAULT_BACKGROUND, Cell
from cellgrid._history import ChangeColorCommand, ChangeTextCommand, Command, UndoRedoHistory
from cellgrid._spreadsheet import DEFAULT_COLUMNS, DEFAULT_ROWS, CellRecord, Spreadsheet
from cellgrid._xml import SpreadsheetLoadError, load_spreadsheet, save_spreadsheet

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DEFAULT_BACKGROUND",
    "DEFAULT_COLUMNS",
    "DEFAULT_ROWS",
    "Cell",
    "CellRecord",
    "ChangeColorCommand",
    "ChangeTextCommand",
    "Command",
    "Spreadsheet",
    "SpreadsheetLoadError",
    "UndoRedoHistory",
    "load_spreadsheet",
    "save_spreadsheet",
]
