"""Tests for undo/redo commands and history."""

from __future__ import annotations

import pytest

from cellgrid import (
    ChangeColorCommand,
    ChangeTextCommand,
    Command,
    Spreadsheet,
    UndoRedoHistory,
)


def _edit_text(sheet: Spreadsheet, ref: str, new_text: str) -> ChangeTextCommand:
    """Record and apply a text edit the way a UI would."""
    cell = sheet[ref]
    cmd = ChangeTextCommand(cell, cell.text, new_text)
    sheet.add_undo(cmd)
    cmd.execute()
    return cmd


class TestCommands:
    def test_text_command(self) -> None:
        sheet = Spreadsheet(3, 3)
        cmd = ChangeTextCommand(sheet["A1"], "", "hello")
        cmd.execute()
        assert sheet["A1"].text == "hello"
        cmd.undo()
        assert sheet["A1"].text == ""

    def test_color_command(self) -> None:
        sheet = Spreadsheet(3, 3)
        cmd = ChangeColorCommand(sheet["B2"], 0xFFFFFFFF, 0xFFFF0000)
        cmd.execute()
        assert sheet["B2"].background_color == 0xFFFF0000
        cmd.undo()
        assert sheet["B2"].background_color == 0xFFFFFFFF

    def test_descriptions(self) -> None:
        sheet = Spreadsheet(5, 5)
        assert ChangeTextCommand(sheet["C4"], "", "x").description == "Change cell C4 value"
        assert ChangeColorCommand(sheet["C4"], 0, 1).description == "Change cell C4 color"

    def test_cell_required(self) -> None:
        with pytest.raises(ValueError):
            ChangeTextCommand(None, "", "x")  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            ChangeColorCommand(None, 0, 1)  # type: ignore[arg-type]

    def test_protocol(self) -> None:
        sheet = Spreadsheet(2, 2)
        assert isinstance(ChangeTextCommand(sheet["A1"], "", "x"), Command)
        assert isinstance(ChangeColorCommand(sheet["A1"], 0, 1), Command)


class TestHistory:
    def test_empty(self) -> None:
        h = UndoRedoHistory()
        assert not h.can_undo
        assert not h.can_redo
        assert h.undo_description == ""
        assert h.redo_description == ""
        h.undo()
        h.redo()

    def test_undo_restores_value(self) -> None:
        sheet = Spreadsheet(3, 3)
        sheet["A1"].text = "3"
        _edit_text(sheet, "A1", "9")
        sheet.undo()
        assert sheet["A1"].text == "3"
        assert sheet["A1"].value == "3"
        assert sheet.can_redo
        assert sheet.redo_description == "Change cell A1 value"

    def test_redo(self) -> None:
        sheet = Spreadsheet(3, 3)
        _edit_text(sheet, "A1", "9")
        sheet.undo()
        sheet.redo()
        assert sheet["A1"].value == "9"
        assert sheet.can_undo
        assert not sheet.can_redo

    def test_new_command_clears_redo(self) -> None:
        sheet = Spreadsheet(3, 3)
        _edit_text(sheet, "A1", "1")
        sheet.undo()
        assert sheet.can_redo
        _edit_text(sheet, "B1", "2")
        assert not sheet.can_redo
        sheet.redo()
        assert sheet["A1"].text == ""

    def test_undo_retriggers_dependents(self) -> None:
        sheet = Spreadsheet(3, 3)
        sheet["B1"].text = "=A1*2"
        _edit_text(sheet, "A1", "4")
        assert sheet["B1"].value == "8"
        sheet.undo()
        assert sheet["B1"].value == "0"
        sheet.redo()
        assert sheet["B1"].value == "8"

    def test_undo_of_formula_cell(self) -> None:
        sheet = Spreadsheet(3, 3)
        sheet["A1"].text = "2"
        _edit_text(sheet, "B1", "=A1+1")
        sheet["C1"].text = "=B1*10"
        assert sheet["C1"].value == "30"
        sheet.undo()
        assert sheet["B1"].value == ""
        assert sheet["C1"].value == "0"

    def test_color_undo_redo(self) -> None:
        sheet = Spreadsheet(3, 3)
        cell = sheet["A1"]
        cmd = ChangeColorCommand(cell, cell.background_color, 0xFF00FF00)
        sheet.add_undo(cmd)
        cmd.execute()
        assert sheet.undo_description == "Change cell A1 color"
        sheet.undo()
        assert cell.background_color == 0xFFFFFFFF
        sheet.redo()
        assert cell.background_color == 0xFF00FF00

    def test_lifo_order(self) -> None:
        sheet = Spreadsheet(3, 3)
        _edit_text(sheet, "A1", "1")
        _edit_text(sheet, "A1", "2")
        _edit_text(sheet, "B1", "x")
        assert sheet.undo_description == "Change cell B1 value"
        sheet.undo()
        sheet.undo()
        assert sheet["A1"].text == "1"
        assert sheet["B1"].text == ""

    def test_clear_undo_redo(self) -> None:
        sheet = Spreadsheet(3, 3)
        _edit_text(sheet, "A1", "1")
        _edit_text(sheet, "A1", "2")
        sheet.undo()
        sheet.clear_undo_redo()
        assert not sheet.can_undo
        assert not sheet.can_redo

    def test_len(self) -> None:
        h = UndoRedoHistory()
        sheet = Spreadsheet(2, 2)
        h.add_undo(ChangeTextCommand(sheet["A1"], "", "x"))
        h.add_undo(ChangeTextCommand(sheet["A1"], "x", "y"))
        assert len(h) == 2
