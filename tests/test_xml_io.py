"""Integration tests for XML save/load around the recalculation engine."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from cellgrid import (
    ChangeTextCommand,
    Spreadsheet,
    SpreadsheetLoadError,
    load_spreadsheet,
    save_spreadsheet,
)
from cellgrid._xml import from_xml, to_xml

CIRCULAR = "Circular reference detected"


def _build_sheet() -> Spreadsheet:
    """A1=5, B1=A1+10 on green, C3 colored only."""
    sheet = Spreadsheet(10, 10)
    sheet["A1"].text = "5"
    sheet["B1"].text = "=A1+10"
    sheet["B1"].background_color = 0xFF00FF00
    sheet["C3"].background_color = 0xFF123456
    return sheet


class TestSave:
    def test_only_non_default_cells(self) -> None:
        xml = to_xml(_build_sheet())
        assert xml.count("<cell ") == 3
        assert '<cell name="B1"><bgcolor>FF00FF00</bgcolor><text>=A1+10</text></cell>' in xml
        assert '<cell name="C3"><bgcolor>FF123456</bgcolor><text /></cell>' in xml

    def test_empty_sheet(self) -> None:
        assert to_xml(Spreadsheet(2, 2)) == "<spreadsheet />"


class TestRoundtrip:
    def test_file_roundtrip(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.xml"
        save_spreadsheet(_build_sheet(), path)

        loaded = Spreadsheet(10, 10)
        load_spreadsheet(loaded, path)
        assert loaded["A1"].value == "5"
        assert loaded["B1"].value == "15"
        assert loaded["B1"].background_color == 0xFF00FF00
        assert loaded["C3"].background_color == 0xFF123456
        assert loaded.records() == _build_sheet().records()

    def test_stream_roundtrip(self) -> None:
        buf = io.BytesIO()
        save_spreadsheet(_build_sheet(), buf)
        buf.seek(0)
        loaded = Spreadsheet(10, 10)
        load_spreadsheet(loaded, buf)
        assert loaded["B1"].value == "15"

    def test_load_resets_state(self) -> None:
        sheet = Spreadsheet(10, 10)
        sheet["D4"].text = "stale"
        cmd = ChangeTextCommand(sheet["D5"], "", "x")
        sheet.add_undo(cmd)
        cmd.execute()

        from_xml(sheet, to_xml(_build_sheet()))
        assert sheet["D4"].text == ""
        assert sheet["D5"].text == ""
        assert not sheet.can_undo
        assert sheet["B1"].value == "15"

    def test_forward_reference_resolved(self) -> None:
        """A1 reads B1, which appears later in the document."""
        doc = (
            "<spreadsheet>"
            '<cell name="A1"><bgcolor>FFFFFFFF</bgcolor><text>=B1*2</text></cell>'
            '<cell name="B1"><bgcolor>FFFFFFFF</bgcolor><text>21</text></cell>'
            "</spreadsheet>"
        )
        sheet = Spreadsheet(5, 5)
        from_xml(sheet, doc)
        assert sheet["A1"].value == "42"

    def test_cycle_survives_load(self) -> None:
        doc = (
            "<spreadsheet>"
            '<cell name="A1"><text>=B1</text></cell>'
            '<cell name="B1"><text>=A1</text></cell>'
            "</spreadsheet>"
        )
        sheet = Spreadsheet(5, 5)
        from_xml(sheet, doc)
        assert sheet["A1"].value == CIRCULAR
        assert sheet["B1"].value == CIRCULAR
        assert sheet["A1"].background_color == 0xFFFFFFFF


class TestMalformed:
    def test_not_xml(self) -> None:
        with pytest.raises(SpreadsheetLoadError, match="Malformed"):
            from_xml(Spreadsheet(5, 5), "<spreadsheet><cell")

    def test_wrong_root(self) -> None:
        with pytest.raises(SpreadsheetLoadError, match="Expected <spreadsheet>"):
            from_xml(Spreadsheet(5, 5), "<workbook />")

    def test_cell_outside_grid(self) -> None:
        with pytest.raises(SpreadsheetLoadError, match="outside the grid"):
            from_xml(Spreadsheet(5, 5), '<spreadsheet><cell name="Z9" /></spreadsheet>')

    def test_missing_name(self) -> None:
        with pytest.raises(SpreadsheetLoadError, match="name attribute"):
            from_xml(Spreadsheet(5, 5), "<spreadsheet><cell /></spreadsheet>")

    def test_bad_color(self) -> None:
        doc = '<spreadsheet><cell name="A1"><bgcolor>notahex</bgcolor></cell></spreadsheet>'
        with pytest.raises(SpreadsheetLoadError, match="Invalid background color"):
            from_xml(Spreadsheet(5, 5), doc)

    def test_sheet_untouched_on_failure(self) -> None:
        sheet = Spreadsheet(5, 5)
        sheet["A1"].text = "keep"
        with pytest.raises(SpreadsheetLoadError):
            from_xml(sheet, '<spreadsheet><cell name="A1" /><cell name="Q1" /></spreadsheet>')
        assert sheet["A1"].text == "keep"

    def test_file_not_xml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.xml"
        path.write_text("not xml at all", encoding="utf-8")
        with pytest.raises(SpreadsheetLoadError):
            load_spreadsheet(Spreadsheet(5, 5), path)
