"""Layout helpers shared by the G-3022, G-3026 and G-3027 builders."""

from __future__ import annotations

from ghgforms.generators.formatting import CHECKBOX_TICKED, checkbox_glyph, text_run
from ghgforms.models.layout import (
    Align,
    Block,
    Border,
    Borders,
    Cell,
    Indent,
    Paragraph,
    Row,
    Run,
    Spacing,
    Table,
)

COMPANY_NAME = "旭威認證股份有限公司 查驗機構"
FORM_VERSION = "1141017 版"
CRITERIA = "ISO 14064-1(2018 年版)/CNS 14064-1(2021 年版)"

# Default paragraph spacing inside tables and headers
DEFAULT_SPACING = Spacing(before=20, after=20, line=240)

NO_BORDER = Border(style="none", size=0, color="auto")
NIL_BORDER = Border(style="nil", size=0, color="auto")
BORDERLESS = Borders.all(NO_BORDER)

txt = text_run


def border(size: int) -> Border:
    return Border(style="single", size=size)


def checkbox(checked: bool, style: tuple[str, str] = CHECKBOX_TICKED, size: float = 12) -> Run:
    return Run(text=checkbox_glyph(checked, style), size=size)


def para(
    runs: Run | list[Run] | list[Run | list[Run]],
    align: Align = "left",
    spacing: Spacing | None = DEFAULT_SPACING,
    indent: Indent | None = None,
) -> Paragraph:
    """Build a paragraph, flattening nested run lists."""
    if isinstance(runs, Run):
        runs = [runs]
    flat: list[Run] = []
    for item in runs:
        if isinstance(item, list):
            flat.extend(item)
        else:
            flat.append(item)
    return Paragraph(runs=flat, align=align, spacing=spacing, indent=indent)


def text_para(text: str | None, align: Align = "left", spacing: Spacing | None = DEFAULT_SPACING, **run_opts) -> Paragraph:
    return para([txt(text, **run_opts)], align, spacing)


def cell(*blocks: Block, **options) -> Cell:
    return Cell(blocks=list(blocks), **options)


def split_evenly(total: int, parts: int) -> list[int]:
    """Column widths summing to ``total``; the remainder goes to the last column."""
    base = total // parts
    return [base] * (parts - 1) + [total - base * (parts - 1)]


def company_line(spacing: Spacing | None = DEFAULT_SPACING) -> Paragraph:
    return para([txt(COMPANY_NAME, size=18, bold=True)], "center", spacing)


def footer_table(form_code: str, width: int, spacing: Spacing | None = DEFAULT_SPACING) -> Table:
    """Borderless version / page-count / form-code strip."""
    page_count = para(
        [
            Run(field="PAGE", size=10),
            txt(" / ", size=10),
            Run(field="NUMPAGES", size=10),
        ],
        "center",
        spacing,
    )
    return Table(
        columns=split_evenly(width, 3),
        borders=BORDERLESS,
        rows=[
            Row(
                cells=[
                    cell(text_para(FORM_VERSION, "left", spacing, size=10)),
                    cell(page_count),
                    cell(text_para(form_code, "right", spacing, size=10)),
                ]
            )
        ],
    )
