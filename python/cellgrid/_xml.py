"""XML persistence for a Spreadsheet.

Document shape::

    <spreadsheet>
      <cell name="B3">
        <bgcolor>FF00FF00</bgcolor>
        <text>=A1+1</text>
      </cell>
    </spreadsheet>

Only cells with text or a non-default background color are written.
"""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from typing import IO, TYPE_CHECKING, Union

from cellgrid._cell import DEFAULT_BACKGROUND
from cellgrid._spreadsheet import CellRecord

if TYPE_CHECKING:
    from cellgrid._spreadsheet import Spreadsheet

logger = logging.getLogger(__name__)

PathOrFile = Union[str, "os.PathLike[str]", IO[bytes]]


class SpreadsheetLoadError(ValueError):
    """Raised when a persisted document cannot be loaded."""


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------


def to_element(sheet: Spreadsheet) -> ET.Element:
    root = ET.Element("spreadsheet")
    for record in sheet.records():
        cell_elem = ET.SubElement(root, "cell", name=record.name)
        ET.SubElement(cell_elem, "bgcolor").text = f"{record.background_color:08X}"
        ET.SubElement(cell_elem, "text").text = record.text
    return root


def to_xml(sheet: Spreadsheet) -> str:
    return ET.tostring(to_element(sheet), encoding="unicode")


def save_spreadsheet(sheet: Spreadsheet, target: PathOrFile) -> None:
    """Write *sheet* to a path or binary file object."""
    root = to_element(sheet)
    ET.indent(root)
    tree = ET.ElementTree(root)
    if isinstance(target, (str, os.PathLike)):
        target = os.fspath(target)
    tree.write(target, encoding="utf-8", xml_declaration=True)
    logger.debug("Saved %d cell record(s)", len(root))


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def _parse_color(name: str, raw: str) -> int:
    try:
        color = int(raw.strip(), 16)
    except ValueError:
        raise SpreadsheetLoadError(
            f"Invalid background color {raw!r} for cell {name}"
        ) from None
    if not 0 <= color <= 0xFFFFFFFF:
        raise SpreadsheetLoadError(f"Background color out of range for cell {name}")
    return color


def _read_records(root: ET.Element, sheet: Spreadsheet) -> list[CellRecord]:
    if root.tag != "spreadsheet":
        raise SpreadsheetLoadError(f"Expected <spreadsheet> root, got <{root.tag}>")

    records: list[CellRecord] = []
    for cell_elem in root.findall("cell"):
        name = cell_elem.get("name")
        if not name:
            raise SpreadsheetLoadError("<cell> element without a name attribute")
        try:
            sheet[name]
        except KeyError as exc:
            raise SpreadsheetLoadError(str(exc.args[0])) from None

        color_elem = cell_elem.find("bgcolor")
        color = DEFAULT_BACKGROUND
        if color_elem is not None:
            color = _parse_color(name, color_elem.text or "")

        text_elem = cell_elem.find("text")
        text = (text_elem.text or "") if text_elem is not None else ""

        records.append(CellRecord(name, color, text))
    return records


def _apply(sheet: Spreadsheet, records: list[CellRecord]) -> None:
    sheet.clear_all()
    sheet.clear_undo_redo()
    for record in records:
        cell = sheet[record.name]
        cell.background_color = record.background_color
        cell.text = record.text
    sheet.evaluate_all_formulas()
    logger.debug("Loaded %d cell record(s)", len(records))


def from_xml(sheet: Spreadsheet, xml_string: str) -> None:
    """Replace *sheet*'s contents with the document in *xml_string*."""
    try:
        root = ET.fromstring(xml_string)
    except ET.ParseError as exc:
        raise SpreadsheetLoadError(f"Malformed spreadsheet document: {exc}") from exc
    _apply(sheet, _read_records(root, sheet))


def load_spreadsheet(sheet: Spreadsheet, source: PathOrFile) -> None:
    """Replace *sheet*'s contents with the document at *source*.

    The whole document is validated before the sheet is touched.
    """
    if isinstance(source, (str, os.PathLike)):
        source = os.fspath(source)
    try:
        root = ET.parse(source).getroot()
    except ET.ParseError as exc:
        raise SpreadsheetLoadError(f"Malformed spreadsheet document: {exc}") from exc
    _apply(sheet, _read_records(root, sheet))
