"""Render a layout Document to Word bytes with python-docx."""

from __future__ import annotations

import io
import logging

import docx
from docx.document import Document as DocxDocument
from docx.enum.section import WD_ORIENT, WD_SECTION
from docx.enum.table import WD_CELL_VERTICAL_ALIGNMENT, WD_ROW_HEIGHT_RULE
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_LINE_SPACING
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, Twips
from docx.table import _Cell

from ghgforms.models.layout import (
    A4_HEIGHT,
    A4_WIDTH,
    Border,
    Borders,
    Cell,
    CellMargins,
    Document,
    FontSpec,
    PageSetup,
    Paragraph,
    Row,
    Run,
    Spacing,
    Table,
)

logger = logging.getLogger(__name__)

ALIGNMENTS = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
}

V_ALIGNMENTS = {
    "top": WD_CELL_VERTICAL_ALIGNMENT.TOP,
    "center": WD_CELL_VERTICAL_ALIGNMENT.CENTER,
    "bottom": WD_CELL_VERTICAL_ALIGNMENT.BOTTOM,
}

HEIGHT_RULES = {
    "auto": WD_ROW_HEIGHT_RULE.AUTO,
    "exact": WD_ROW_HEIGHT_RULE.EXACTLY,
    "atLeast": WD_ROW_HEIGHT_RULE.AT_LEAST,
}

# Child order of the WordprocessingML property elements we touch
TBL_PR_ORDER = (
    "w:tblStyle", "w:tblpPr", "w:tblOverlap", "w:bidiVisual", "w:tblStyleRowBandSize",
    "w:tblStyleColBandSize", "w:tblW", "w:jc", "w:tblCellSpacing", "w:tblInd",
    "w:tblBorders", "w:shd", "w:tblLayout", "w:tblCellMar", "w:tblLook",
)
TC_PR_ORDER = (
    "w:cnfStyle", "w:tcW", "w:gridSpan", "w:hMerge", "w:vMerge", "w:tcBorders", "w:shd",
    "w:noWrap", "w:tcMar", "w:textDirection", "w:tcFitText", "w:vAlign", "w:hideMark",
)
TR_PR_ORDER = (
    "w:cnfStyle", "w:divId", "w:gridBefore", "w:gridAfter", "w:wBefore", "w:wAfter",
    "w:cantSplit", "w:trHeight", "w:tblHeader", "w:tblCellSpacing", "w:jc", "w:hidden",
)
R_PR_ORDER = (
    "w:rStyle", "w:rFonts", "w:b", "w:bCs", "w:i", "w:iCs", "w:caps", "w:smallCaps",
    "w:strike", "w:dstrike", "w:outline", "w:shadow", "w:emboss", "w:imprint",
    "w:noProof", "w:snapToGrid", "w:vanish", "w:webHidden", "w:color", "w:spacing",
    "w:w", "w:kern", "w:position", "w:sz", "w:szCs", "w:highlight", "w:u",
)


def render(document: Document) -> bytes:
    """Render ``document`` to DOCX bytes."""
    out = docx.Document()
    _apply_defaults(out, document.font, document.font_size, document.spacing)

    for index, section in enumerate(document.sections):
        if index == 0:
            docx_section = out.sections[0]
        else:
            docx_section = out.add_section(WD_SECTION.NEW_PAGE)
        _setup_page(docx_section, section.page)
        _render_header_footer(docx_section.header, section.header)
        _render_header_footer(docx_section.footer, section.footer)
        _render_blocks(out, section.blocks)

    buffer = io.BytesIO()
    out.save(buffer)
    logger.debug("Rendered %d section(s): %s", len(document.sections), document.section_names)
    return buffer.getvalue()


# --- Document setup ---


def _apply_defaults(out: DocxDocument, font: FontSpec, size: float, spacing: Spacing) -> None:
    style = out.styles["Normal"]
    style.font.name = font.ascii
    style.font.size = Pt(size)
    rfonts = style.element.get_or_add_rPr().get_or_add_rFonts()
    rfonts.set(qn("w:ascii"), font.ascii)
    rfonts.set(qn("w:hAnsi"), font.ascii)
    rfonts.set(qn("w:cs"), font.ascii)
    rfonts.set(qn("w:eastAsia"), font.east_asia)
    rfonts.set(qn("w:hint"), "eastAsia")
    _apply_spacing(style.paragraph_format, spacing)


def _setup_page(docx_section, page: PageSetup) -> None:
    if page.orientation == "landscape":
        docx_section.orientation = WD_ORIENT.LANDSCAPE
        docx_section.page_width = Twips(A4_HEIGHT)
        docx_section.page_height = Twips(A4_WIDTH)
    else:
        docx_section.orientation = WD_ORIENT.PORTRAIT
        docx_section.page_width = Twips(A4_WIDTH)
        docx_section.page_height = Twips(A4_HEIGHT)
    docx_section.top_margin = Twips(page.top)
    docx_section.bottom_margin = Twips(page.bottom)
    docx_section.left_margin = Twips(page.left)
    docx_section.right_margin = Twips(page.right)
    docx_section.header_distance = Twips(page.header)
    docx_section.footer_distance = Twips(page.footer)


def _render_header_footer(part, blocks: list) -> None:
    part.is_linked_to_previous = False
    if not blocks:
        return
    placeholder = part.paragraphs[0] if part.paragraphs else None
    if placeholder is not None and not isinstance(blocks[0], Paragraph):
        placeholder._element.getparent().remove(placeholder._element)
        placeholder = None
    _render_blocks(part, blocks, placeholder)
    # A story must end with a paragraph
    if isinstance(blocks[-1], Table):
        part.add_paragraph()


# --- Blocks ---


def _render_blocks(container, blocks: list, placeholder=None):
    """Append ``blocks`` to ``container``; returns ``placeholder`` if it went unused."""
    for block in blocks:
        if isinstance(block, Paragraph):
            if placeholder is not None:
                docx_paragraph, placeholder = placeholder, None
            else:
                docx_paragraph = container.add_paragraph()
            _fill_paragraph(docx_paragraph, block)
        elif isinstance(block, Table):
            _render_table(container, block)
        else:
            raise TypeError(f"Unsupported block: {type(block).__name__}")
    return placeholder


def _fill_paragraph(docx_paragraph, paragraph: Paragraph) -> None:
    docx_paragraph.alignment = ALIGNMENTS[paragraph.align]
    fmt = docx_paragraph.paragraph_format
    if paragraph.spacing is not None:
        _apply_spacing(fmt, paragraph.spacing)
    if paragraph.indent is not None:
        if paragraph.indent.left is not None:
            fmt.left_indent = Twips(paragraph.indent.left)
    if paragraph.page_break_before:
        fmt.page_break_before = True
    for run in paragraph.runs:
        _add_run(docx_paragraph, run)


def _apply_spacing(fmt, spacing: Spacing) -> None:
    if spacing.before is not None:
        fmt.space_before = Twips(spacing.before)
    if spacing.after is not None:
        fmt.space_after = Twips(spacing.after)
    if spacing.line is None:
        return
    if spacing.rule == "auto":
        fmt.line_spacing = spacing.line / 240
    else:
        fmt.line_spacing = Twips(spacing.line)
        fmt.line_spacing_rule = (
            WD_LINE_SPACING.EXACTLY if spacing.rule == "exact" else WD_LINE_SPACING.AT_LEAST
        )


def _add_run(docx_paragraph, run: Run) -> None:
    docx_run = docx_paragraph.add_run() if run.field else docx_paragraph.add_run(run.text)
    font = docx_run.font
    font.size = Pt(run.size)
    if run.bold:
        font.bold = True
    if run.underline:
        font.underline = True
    if run.subscript:
        font.subscript = True
    if run.position:
        position = OxmlElement("w:position")
        position.set(qn("w:val"), str(int(run.position * 2)))
        _insert_ordered(docx_run._r.get_or_add_rPr(), position, R_PR_ORDER)
    if run.field:
        _append_field(docx_run._r, run.field)


def _append_field(r, instruction: str) -> None:
    begin = OxmlElement("w:fldChar")
    begin.set(qn("w:fldCharType"), "begin")
    instr = OxmlElement("w:instrText")
    instr.set(qn("xml:space"), "preserve")
    instr.text = f" {instruction} "
    end = OxmlElement("w:fldChar")
    end.set(qn("w:fldCharType"), "end")
    r.append(begin)
    r.append(instr)
    r.append(end)


# --- Tables ---


def place_cells(table: Table) -> list[tuple[int, int, Cell]]:
    """Resolve each cell's (row, grid column), skipping slots covered by row spans."""
    occupied: set[tuple[int, int]] = set()
    placed = []
    width = len(table.columns)
    for r, row in enumerate(table.rows):
        c = 0
        for cell in row.cells:
            while (r, c) in occupied:
                c += 1
            if c + cell.col_span > width:
                raise ValueError(f"Row {r} overflows the {width}-column grid")
            placed.append((r, c, cell))
            for dr in range(cell.row_span):
                for dc in range(cell.col_span):
                    occupied.add((r + dr, c + dc))
            c += cell.col_span
    return placed


def _add_table(container, rows: int, cols: int, width: int):
    if isinstance(container, (DocxDocument, _Cell)):
        return container.add_table(rows, cols)
    return container.add_table(rows, cols, Twips(width))


def _render_table(container, table: Table) -> None:
    placed = place_cells(table)
    docx_table = _add_table(container, len(table.rows), len(table.columns), table.width)
    tbl = docx_table._tbl

    if table.fixed_layout:
        docx_table.autofit = False
    tbl_pr = tbl.tblPr
    tbl_w = OxmlElement("w:tblW")
    tbl_w.set(qn("w:w"), str(table.width))
    tbl_w.set(qn("w:type"), "dxa")
    _insert_ordered(tbl_pr, tbl_w, TBL_PR_ORDER)
    if table.borders is not None:
        _insert_ordered(tbl_pr, _borders_element("w:tblBorders", table.borders), TBL_PR_ORDER)
    for i, col_width in enumerate(table.columns):
        docx_table.columns[i].width = Twips(col_width)

    for r, c, cell in placed:
        if cell.row_span > 1 or cell.col_span > 1:
            origin = docx_table.cell(r, c)
            origin.merge(docx_table.cell(r + cell.row_span - 1, c + cell.col_span - 1))

    for row, docx_row in zip(table.rows, docx_table.rows):
        _apply_row(docx_row, row)
    trs = tbl.tr_lst
    for tr in trs:
        col = 0
        for tc in tr.tc_lst:
            tc.width = Twips(sum(table.columns[col:col + tc.grid_span]))
            col += tc.grid_span

    for r, c, cell in placed:
        # Continuation cells of a vertical merge carry their own borders and fill
        for dr in range(cell.row_span):
            tc = _tc_at(trs[r + dr], c)
            if tc is not None:
                _apply_cell_properties(tc, cell)
        docx_cell = docx_table.cell(r, c)
        if cell.v_align:
            docx_cell.vertical_alignment = V_ALIGNMENTS[cell.v_align]
        _render_cell(docx_cell, cell)


def _render_cell(docx_cell, cell: Cell) -> None:
    placeholder = docx_cell.paragraphs[0]
    leftover = _render_blocks(docx_cell, cell.blocks, placeholder)
    if leftover is not None and cell.blocks:
        # _Cell.add_table already appended the required trailing paragraph
        element = leftover._element
        element.getparent().remove(element)


def _apply_row(docx_row, row: Row) -> None:
    if row.height:
        docx_row.height = Twips(row.height)
        docx_row.height_rule = HEIGHT_RULES[row.height_rule]
    if row.repeat_header:
        header = OxmlElement("w:tblHeader")
        _insert_ordered(docx_row._tr.get_or_add_trPr(), header, TR_PR_ORDER)


def _tc_at(tr, grid_col: int):
    col = 0
    for tc in tr.tc_lst:
        if col == grid_col:
            return tc
        col += tc.grid_span
    return None


def _apply_cell_properties(tc, cell: Cell) -> None:
    tc_pr = tc.get_or_add_tcPr()
    if cell.borders is not None:
        _insert_ordered(tc_pr, _borders_element("w:tcBorders", cell.borders), TC_PR_ORDER)
    if cell.shading:
        shd = OxmlElement("w:shd")
        shd.set(qn("w:val"), "clear")
        shd.set(qn("w:color"), "auto")
        shd.set(qn("w:fill"), cell.shading)
        _insert_ordered(tc_pr, shd, TC_PR_ORDER)
    if cell.margins is not None:
        _insert_ordered(tc_pr, _margins_element(cell.margins), TC_PR_ORDER)


def _borders_element(tag: str, borders: Borders):
    element = OxmlElement(tag)
    sides = (
        ("w:top", borders.top),
        ("w:left", borders.left),
        ("w:bottom", borders.bottom),
        ("w:right", borders.right),
        ("w:insideH", borders.inside_h),
        ("w:insideV", borders.inside_v),
    )
    for side, line in sides:
        if line is not None:
            element.append(_border_element(side, line))
    return element


def _border_element(side: str, line: Border):
    edge = OxmlElement(side)
    edge.set(qn("w:val"), line.style)
    edge.set(qn("w:sz"), str(line.size))
    edge.set(qn("w:space"), "0")
    edge.set(qn("w:color"), line.color)
    return edge


def _margins_element(margins: CellMargins):
    element = OxmlElement("w:tcMar")
    for side, value in (
        ("w:top", margins.top),
        ("w:left", margins.left),
        ("w:bottom", margins.bottom),
        ("w:right", margins.right),
    ):
        edge = OxmlElement(side)
        edge.set(qn("w:w"), str(value))
        edge.set(qn("w:type"), "dxa")
        element.append(edge)
    return element


def _insert_ordered(parent, child, order: tuple[str, ...]) -> None:
    """Insert ``child`` into ``parent`` honouring the schema ``order``; replaces any same-tag child."""
    for existing in parent.findall(child.tag):
        parent.remove(existing)
    position = order.index(_prefixed(child.tag))
    later = {qn(tag) for tag in order[position + 1:]}
    for index, existing in enumerate(parent):
        if existing.tag in later:
            parent.insert(index, child)
            return
    parent.append(child)


def _prefixed(tag: str) -> str:
    # Clark notation "{ns}local" back to "w:local"
    return "w:" + tag.split("}", 1)[1]
