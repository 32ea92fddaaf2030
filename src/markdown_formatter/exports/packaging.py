"""Binary office packages built from the document tree and table grid.

``package_docx`` turns a :class:`DocumentTree` into a Word document with
python-docx; ``package_xlsx`` turns a row grid into a one-sheet workbook
with openpyxl. Both return the package bytes and never touch the disk.
"""

from __future__ import annotations

import re
from io import BytesIO
from typing import Any, Dict, Optional, Sequence, Tuple

from docx import Document
from docx.document import Document as DocxDocument
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor, Twips
from docx.table import Table as DocxTable
from docx.text.paragraph import Paragraph as DocxParagraph
from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from markdown_formatter.rendering.document_tree import (
    DocumentTree,
    ParagraphNode,
    ParagraphRole,
    TableNode,
    TextRun,
)

from .errors import RenderBackendError

__all__ = [
    "BODY_FONT",
    "BODY_SIZE",
    "SHEET_TITLE",
    "package_docx",
    "package_xlsx",
]

BODY_FONT = "Calibri"
BODY_SIZE = 12
SHEET_TITLE = "Document"

_XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

_BULLET_STYLES = ("List Bullet", "List Bullet 2", "List Bullet 3")
_NUMBER_STYLES = ("List Number", "List Number 2", "List Number 3")

# Elements that must follow <w:tblBorders> inside <w:tblPr>.
_TBL_BORDERS_SUCCESSORS = (
    "w:shd",
    "w:tblLayout",
    "w:tblCellMar",
    "w:tblLook",
    "w:tblCaption",
    "w:tblDescription",
    "w:tblPrChange",
)


def package_docx(tree: DocumentTree, *, title: Optional[str] = None) -> bytes:
    """Serialise ``tree`` as a ``.docx`` package.

    Only the python-docx save step is reported as
    :class:`RenderBackendError`; errors raised while walking the tree
    propagate unchanged.
    """

    document = Document()
    _apply_page_setup(document)
    if title:
        document.add_heading(_clean(title), level=0)
    numbering = _NumberingMap(document)
    for node in tree.nodes:
        if isinstance(node, TableNode):
            _add_table(document, node)
        else:
            _add_paragraph(document, node, numbering)
    return _save("DOCX", document)


def package_xlsx(rows: Sequence[Sequence[str]]) -> bytes:
    """Serialise ``rows`` into a workbook with a single ``Document`` sheet."""

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE
    for row in rows:
        sheet.append([ILLEGAL_CHARACTERS_RE.sub("", cell) for cell in row])
    return _save("XLSX", workbook)


def _save(kind: str, package: Any) -> bytes:
    buffer = BytesIO()
    try:
        package.save(buffer)
    except (OSError, ValueError, KeyError) as exc:
        raise RenderBackendError(f"{kind} packaging failed: {exc}") from exc
    return buffer.getvalue()


class _NumberingMap:
    """Map numbering references onto Word ``numId`` values.

    The first reference reuses each list style's own numbering definition.
    Every later reference gets a fresh ``<w:num>`` over the same abstract
    definition with its first level restarted at 1.
    """

    def __init__(self, document: DocxDocument) -> None:
        self._document = document
        self._first: Optional[str] = None
        self._ids: Dict[Tuple[str, str], int] = {}

    def num_id(self, reference: str, style_name: str) -> Optional[int]:
        if self._first is None:
            self._first = reference
        if reference == self._first:
            return None
        key = (reference, style_name)
        if key not in self._ids:
            created = self._restart(style_name)
            if created is None:
                return None
            self._ids[key] = created
        return self._ids[key]

    def _restart(self, style_name: str) -> Optional[int]:
        style_pr = self._document.styles[style_name].element.pPr
        if style_pr is None or style_pr.numPr is None:
            return None
        if style_pr.numPr.numId is None:
            return None
        numbering = self._document.part.numbering_part.element
        base = numbering.num_having_numId(style_pr.numPr.numId.val)
        num = numbering.add_num(base.abstractNumId.val)
        num.add_lvlOverride(ilvl=0).add_startOverride(1)
        return num.numId


def _apply_page_setup(document: DocxDocument) -> None:
    normal = document.styles["Normal"]
    normal.font.name = BODY_FONT
    normal.font.size = Pt(BODY_SIZE)
    for section in document.sections:
        section.top_margin = Inches(1)
        section.bottom_margin = Inches(1)
        section.left_margin = Inches(1)
        section.right_margin = Inches(1)


def _add_paragraph(
    document: DocxDocument, node: ParagraphNode, numbering: _NumberingMap
) -> DocxParagraph:
    style = _style_for(node)
    paragraph = document.add_paragraph(style=style)
    p_pr = paragraph._p.get_or_add_pPr()
    if node.role is ParagraphRole.NUMBERED and node.numbering is not None:
        num_id = numbering.num_id(node.numbering.reference, style)
        if num_id is not None:
            num_pr = p_pr.get_or_add_numPr()
            num_pr.get_or_add_numId().val = num_id
            num_pr.get_or_add_ilvl().val = 0
    if node.border_bottom:
        p_pr.append(_bottom_border(node.border_bottom))
    if node.shading:
        p_pr.append(_shading(node.shading))

    fmt = paragraph.paragraph_format
    if node.spacing_before:
        fmt.space_before = Twips(node.spacing_before)
    if node.spacing_after:
        fmt.space_after = Twips(node.spacing_after)
    if node.indent_left and node.role is ParagraphRole.QUOTE:
        fmt.left_indent = Twips(node.indent_left)

    for run in node.runs:
        _add_run(paragraph, run)
    return paragraph


def _style_for(node: ParagraphNode) -> Optional[str]:
    if node.role is ParagraphRole.HEADING and node.heading_level:
        return f"Heading {node.heading_level}"
    if node.role is ParagraphRole.BULLET:
        return _BULLET_STYLES[min(node.list_level, len(_BULLET_STYLES) - 1)]
    if node.role is ParagraphRole.NUMBERED:
        return _NUMBER_STYLES[min(node.list_level, len(_NUMBER_STYLES) - 1)]
    return None


def _add_run(paragraph: DocxParagraph, node: TextRun) -> None:
    if node.line_break:
        paragraph.add_run().add_break()
        return
    run = paragraph.add_run(_clean(node.text))
    if node.shading:
        run._r.get_or_add_rPr().append(_shading(node.shading))
    run.bold = node.bold or None
    run.italic = node.italic or None
    if node.strike:
        run.font.strike = True
    if node.font:
        run.font.name = node.font
    if node.size:
        run.font.size = Pt(node.size / 2)
    if node.color:
        run.font.color.rgb = RGBColor.from_string(node.color)


def _add_table(document: DocxDocument, node: TableNode) -> DocxTable:
    columns = node.column_count
    table = document.add_table(rows=len(node.rows), cols=columns)
    _set_table_borders(table, node.border_color)
    for row_index, row in enumerate(node.rows):
        cells = table.rows[row_index].cells
        for column, cell_node in enumerate(row[:columns]):
            cell = cells[column]
            if cell_node.shading:
                cell._tc.get_or_add_tcPr().append(_shading(cell_node.shading))
            paragraph = cell.paragraphs[0]
            for run in cell_node.runs:
                _add_run(paragraph, run)
    return table


def _set_table_borders(table: DocxTable, color: str) -> None:
    borders = OxmlElement("w:tblBorders")
    for edge in ("top", "left", "bottom", "right", "insideH", "insideV"):
        borders.append(_border(edge, color))
    table._tbl.tblPr.insert_element_before(borders, *_TBL_BORDERS_SUCCESSORS)


def _bottom_border(color: str):
    borders = OxmlElement("w:pBdr")
    borders.append(_border("bottom", color, size="6", space="1"))
    return borders


def _border(edge: str, color: str, *, size: str = "4", space: str = "0"):
    element = OxmlElement(f"w:{edge}")
    element.set(qn("w:val"), "single")
    element.set(qn("w:sz"), size)
    element.set(qn("w:space"), space)
    element.set(qn("w:color"), color)
    return element


def _shading(fill: str):
    element = OxmlElement("w:shd")
    element.set(qn("w:val"), "clear")
    element.set(qn("w:color"), "auto")
    element.set(qn("w:fill"), fill)
    return element


def _clean(text: str) -> str:
    return _XML_ILLEGAL_RE.sub("", text)
