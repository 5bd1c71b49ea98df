"""G-3026 builder — S1/S2 verification observation report.

Sections: document basis plus a re-rendering of the G-3022 checklist
(portrait), the grouped observation checklist (portrait), and two
landscape appendices for sampling results and emission factors.
"""

from __future__ import annotations

from dataclasses import dataclass

from ghgforms.generators import docx_renderer
from ghgforms.generators.common import NO_BORDER, border, checkbox, company_line, footer_table, para, txt
from ghgforms.generators.formatting import (
    G3026_STATUS_GLYPHS,
    G3026_SUMMARY_STATUS_GLYPHS,
    RocDate,
    group_checklist,
    split_co2e,
    status_glyph,
    to_roc_date,
)
from ghgforms.models.common import ChecklistItem, ReportCode, Stage
from ghgforms.models.g3022 import G3022Model
from ghgforms.models.g3026 import G3026Model
from ghgforms.models.layout import (
    Borders,
    Cell,
    CellMargins,
    Document,
    PageSetup,
    Paragraph,
    Row,
    Section,
    Spacing,
    Table,
)

TABLE_WIDTH = 10093

PORTRAIT = PageSetup(top=1134, bottom=1134, left=851, right=851, header=425, footer=425)
LANDSCAPE = PageSetup(orientation="landscape", top=1134, bottom=1134, left=851, right=851, header=425, footer=425)

STRICT_SPACING = Spacing(before=0, after=0, line=360, rule="atLeast")
TITLE_SPACING = Spacing(before=240, after=240)

THICK = border(18)
THIN = border(12)

CELL_MARGINS = CellMargins(50, 50, 50, 50)

SHADING_GRAY = "BFBFBF"
SHADING_LIGHT_GRAY = "D9D9D9"

SUMMARY_COLUMNS = [5046, 2523, 2524]
CHECKLIST_COLUMNS = [500, 3000, 2500, 2800, 1200]
SAMPLING_COLUMNS = [700, 3000, 2500, 3000, 2500, 1500, 1936]
FACTOR_COLUMNS = [700, 3500, 3500, 5000, 2436]

# Fixed observation groups; each title renders one character per line
CHECKLIST_GROUPS = (
    ("1", ("1.", "組", "織", "邊", "界")),
    ("2", ("2.", "報", "告", "邊", "界")),
    ("3", ("3.", "量", "化", "方", "法")),
    ("4", ("4.", "基", "準", "年", "排", "放", "量")),
    ("5", ("5.", "數", "據", "品", "質", "管", "理")),
)

SECTION_SUMMARY = "summary"
SECTION_CHECKLIST = "checklist"
SECTION_SAMPLING = "sampling"
SECTION_FACTORS = "factors"


@dataclass(frozen=True)
class SummaryLine:
    item: ChecklistItem
    mark: str
    is_last: bool


@dataclass(frozen=True)
class GroupView:
    key: str
    title_chars: tuple[str, ...]
    items: tuple[ChecklistItem, ...]
    marks: tuple[str, ...]


@dataclass(frozen=True)
class G3026View:
    check_date: RocDate
    summary: tuple[SummaryLine, ...]
    groups: tuple[GroupView, ...]


def derive(model: G3026Model, g3022: G3022Model | None = None) -> G3026View:
    summary: list[SummaryLine] = []
    if g3022 is not None:
        last = len(g3022.checklist) - 1
        summary = [
            SummaryLine(item, status_glyph(item.status, G3026_SUMMARY_STATUS_GLYPHS), i == last)
            for i, item in enumerate(g3022.checklist)
        ]

    by_key = {group.key: group for group in group_checklist(model.checklist)}
    groups = []
    for key, title_chars in CHECKLIST_GROUPS:
        group = by_key.get(key)
        if group is None:
            continue
        # The root item leads its group as a shaded row
        items = (group.header, *group.children) if group.header is not None else group.children
        if not items:
            continue
        groups.append(
            GroupView(
                key=key,
                title_chars=title_chars,
                items=items,
                marks=tuple(status_glyph(item.status, G3026_STATUS_GLYPHS) for item in items),
            )
        )
    return G3026View(
        check_date=to_roc_date(model.basic_info.check_date),
        summary=tuple(summary),
        groups=tuple(groups),
    )


def build_document(model: G3026Model, g3022: G3022Model | None = None) -> Document:
    view = derive(model, g3022)
    header = _header(model)
    footer = [footer_table(ReportCode.G3026.value, TABLE_WIDTH, STRICT_SPACING)]
    sections = [
        Section(SECTION_SUMMARY, PORTRAIT, header, footer, _summary_blocks(model, view)),
        Section(SECTION_CHECKLIST, PORTRAIT, header, footer, _checklist_blocks(model, view)),
        Section(SECTION_SAMPLING, LANDSCAPE, header, footer, _sampling_blocks(model)),
        Section(SECTION_FACTORS, LANDSCAPE, header, footer, _factor_blocks(model)),
    ]
    return Document(sections=sections, font_size=12, spacing=STRICT_SPACING)


def build(model: G3026Model, g3022: G3022Model | None = None) -> bytes:
    return docx_renderer.render(build_document(model, g3022))


def _p(runs, align="left", spacing=STRICT_SPACING) -> Paragraph:
    return para(runs, align, spacing)


def _t(text: str | None, align="left", **opts) -> Paragraph:
    return _p([txt(text, **opts)], align)


def _box(top=THIN, bottom=THIN, left=THIN, right=THIN) -> Borders:
    return Borders.box(top, bottom, left, right)


def _header(model: G3026Model) -> list[Paragraph]:
    stage = model.basic_info.stage
    return [
        company_line(STRICT_SPACING),
        _p(
            [
                checkbox(stage == Stage.S1, size=16),
                txt("S1", size=16),
                txt("  "),
                checkbox(stage == Stage.S2, size=16),
                txt("S2", size=16),
                txt(" 查驗觀察報告", size=16),
            ],
            "center",
        ),
        _t(f"案件編號：{model.basic_info.case_number}", underline=True),
    ]


# --- Section 1 ---


def _summary_blocks(model: G3026Model, view: G3026View) -> list:
    info = model.basic_info
    date = view.check_date

    def raised(text: str, underline: bool = False):
        return txt(text, size=14, underline=underline, position=14)

    def basis_row(text: str, margins: CellMargins) -> Row:
        return Row(cells=[Cell([_t(text)], margins=margins)])

    def doc_row(label: str, value: str, margins: CellMargins) -> Row:
        return Row(cells=[Cell([_p([checkbox(bool(value)), txt(label), txt(value or "")])], margins=margins)])

    body_margins = CellMargins(top=50, bottom=50, left=100, right=100)
    basis = Table(
        columns=[TABLE_WIDTH],
        borders=Borders(top=THICK, bottom=THICK, left=THICK, right=THICK, inside_h=NO_BORDER, inside_v=NO_BORDER),
        rows=[
            Row(
                height=600,
                cells=[
                    Cell(
                        [
                            _p(
                                [
                                    raised("查驗年度：中華民國 "),
                                    raised(f" {info.year} ", underline=True),
                                    raised(" 年    查驗日期：中華民國 "),
                                    raised(f" {date.y} ", underline=True),
                                    raised(" 年 "),
                                    raised(f" {date.m} ", underline=True),
                                    raised(" 月 "),
                                    raised(f" {date.d} ", underline=True),
                                    raised(" 日"),
                                ]
                            )
                        ],
                        margins=CellMargins(top=100, bottom=50, left=100, right=100),
                    )
                ],
            ),
            basis_row("本次查驗活動報告係依據下列標準與文件據以查核，並依廠商現況，以抽樣原則執行：", body_margins),
            basis_row("查驗依據 : ISO 14064-1(2018 年版)/CNS 14064-1(2021 年版)", body_margins),
            doc_row(" 溫室氣體報告（編號／版次／發行日期）：", info.report_info, body_margins),
            doc_row(" 盤查清冊（編號／版次／發行日期）: ", info.inventory_info, body_margins),
            doc_row(" 溫室氣體資訊管理程序（版次或公布日期）：", info.power_factor_info, body_margins),
            doc_row(" 其他：", info.other_info, CellMargins(top=50, bottom=100, left=100, right=100)),
        ],
    )

    rows = [
        Row(
            repeat_header=True,
            cells=[
                Cell(
                    [_t("ISO 14064-1:2018 規定項目", "center")],
                    shading=SHADING_GRAY,
                    borders=_box(THICK, THICK, THICK, THIN),
                    v_align="center",
                ),
                Cell(
                    [_t("符合項目以 O 註記\n不符合項目以 X 註記\n不適用以―註記", "center", size=10)],
                    shading=SHADING_GRAY,
                    borders=_box(THICK, THICK, THIN, THIN),
                    v_align="center",
                ),
                Cell(
                    [_t("備註", "center")],
                    shading=SHADING_GRAY,
                    borders=_box(THICK, THICK, THIN, THICK),
                    v_align="center",
                ),
            ],
        )
    ]
    for line in view.summary:
        bottom = THICK if line.is_last else THIN
        item = line.item
        if item.is_header:
            rows.append(
                Row(
                    cells=[
                        Cell(
                            [_t(f"{item.id} {item.name}", bold=True)],
                            col_span=3,
                            shading=SHADING_LIGHT_GRAY,
                            borders=_box(THIN, bottom, THICK, THICK),
                            margins=CELL_MARGINS,
                        )
                    ]
                )
            )
        else:
            rows.append(
                Row(
                    cells=[
                        Cell(
                            [_p(split_co2e(f"{item.id} {item.name}", size=12))],
                            borders=_box(THIN, bottom, THICK, THIN),
                            margins=CELL_MARGINS,
                        ),
                        Cell([_t(line.mark, "center")], borders=_box(THIN, bottom, THIN, THIN), margins=CELL_MARGINS),
                        Cell([], borders=_box(THIN, bottom, THIN, THICK), margins=CELL_MARGINS),
                    ]
                )
            )
    summary_table = Table(
        columns=SUMMARY_COLUMNS,
        borders=Borders(top=THICK, bottom=THICK, left=THICK, right=THICK, inside_h=THIN, inside_v=THIN),
        fixed_layout=True,
        rows=rows,
    )
    return [
        basis,
        para([txt("查驗項目一覽表", size=16, bold=True)], "center", TITLE_SPACING),
        summary_table,
    ]


# --- Section 2 ---


def _checklist_blocks(model: G3026Model, view: G3026View) -> list:
    rows = [
        Row(
            repeat_header=True,
            cells=[
                Cell(
                    [_t("查驗\n重點", "center")],
                    row_span=2,
                    shading=SHADING_GRAY,
                    borders=_box(THICK, THIN, THICK, THIN),
                    v_align="center",
                ),
                Cell(
                    [_t("查 證 內 容", "center")],
                    shading=SHADING_GRAY,
                    borders=_box(THICK, THIN, THIN, THIN),
                    v_align="center",
                ),
                Cell(
                    [
                        _t("查 驗 情 形", "center"),
                        _t("(符合項目以O註記，不符合項目以X註記，不適用以―註記)", "center", size=10),
                    ],
                    col_span=3,
                    shading=SHADING_GRAY,
                    borders=_box(THICK, THIN, THIN, THICK),
                    v_align="center",
                ),
            ],
        ),
        Row(
            repeat_header=True,
            cells=[
                Cell(
                    [_t(title, "center")],
                    shading=SHADING_GRAY,
                    borders=_box(THIN, THICK, THIN, THICK if last else THIN),
                    v_align="center",
                )
                for title, last in (("項目", False), ("查驗文件", False), ("現場觀察說明", False), ("符合\n與否", True))
            ],
        ),
    ]
    for group in view.groups:
        for index, (item, mark) in enumerate(zip(group.items, group.marks)):
            cells: list[Cell] = []
            if index == 0:
                cells.append(
                    Cell(
                        [_t(char, "center") for char in group.title_chars],
                        row_span=len(group.items),
                        shading=SHADING_LIGHT_GRAY,
                        borders=_box(THIN, THIN, THICK, THIN),
                        v_align="center",
                    )
                )
            shading = SHADING_LIGHT_GRAY if item.is_header else None
            cells += [
                Cell(
                    [_p(split_co2e(f"{item.id} {item.name}", size=10))],
                    shading=shading,
                    borders=_box(),
                    margins=CELL_MARGINS,
                ),
                Cell([_t(item.doc_ref or "")], shading=shading, borders=_box(), margins=CELL_MARGINS),
                Cell([_t(item.field_obs or "")], shading=shading, borders=_box(), margins=CELL_MARGINS),
                Cell([_t(mark, "center")], shading=shading, borders=_box(right=THICK), margins=CELL_MARGINS),
            ]
            rows.append(Row(cells=cells))

    rows += [
        Row(
            cells=[
                Cell(
                    [_t("其他觀察事項說明:")],
                    col_span=5,
                    shading=SHADING_GRAY,
                    borders=_box(THICK, THIN, THICK, THICK),
                )
            ]
        ),
        Row(
            height=1800,
            height_rule="exact",
            cells=[Cell([_t(model.other_observation or "")], col_span=5, borders=_box(THIN, THIN, THICK, THICK))],
        ),
        Row(
            height=1800,
            height_rule="exact",
            cells=[
                Cell(
                    [_p([txt("主導查驗員簽名："), txt(f" {model.lead_verifier_name or ''} ")])],
                    col_span=5,
                    borders=_box(THIN, THICK, THICK, THICK),
                    v_align="center",
                )
            ],
        ),
    ]
    return [
        para([txt("查驗檢核表", size=16)], "center", TITLE_SPACING),
        Table(
            columns=CHECKLIST_COLUMNS,
            borders=Borders.box(THICK, THICK, THICK, THICK),
            fixed_layout=True,
            rows=rows,
        ),
    ]


# --- Sections 3 and 4: appendices ---


def _appendix_table(columns: list[int], titles: list[str], records: list[list[str]]) -> Table:
    last = len(columns) - 1
    rows = [
        Row(
            repeat_header=True,
            cells=[
                Cell(
                    [_t(title, "center")],
                    shading=SHADING_GRAY,
                    borders=_box(THICK, THIN, THICK if i == 0 else THIN, THICK if i == last else THIN),
                )
                for i, title in enumerate(titles)
            ],
        )
    ]
    for number, values in enumerate(records, start=1):
        row_cells = [Cell([_t(str(number), "center")], borders=_box(left=THICK))]
        for i, value in enumerate(values, start=1):
            row_cells.append(Cell([_t(value)], borders=_box(right=THICK if i == last else THIN)))
        rows.append(Row(cells=row_cells))
    # Closing rule under the last record
    rows.append(
        Row(
            height_rule="auto",
            cells=[
                Cell(
                    [],
                    col_span=len(columns),
                    borders=Borders.box(THICK, NO_BORDER, NO_BORDER, NO_BORDER),
                )
            ],
        )
    )
    return Table(columns=columns, rows=rows)


def _sampling_blocks(model: G3026Model) -> list:
    records = [
        [
            s.area,
            s.value,
            s.source,
            f"{s.type}\n{s.ratio or ''}",
            s.ratio or "",
            s.remarks,
        ]
        for s in model.sampling_results
    ]
    titles = [
        "NO.",
        "區域/\n排放源",
        "抽樣活動數據\n數值/排放量\n(含單位)",
        "活動數據來源",
        "活動數據類型\n抽樣比例\n(抽樣數/母數)",
        "排放源佔總\n排放量比",
        "備註",
    ]
    return [
        para([txt("附件一 查驗取樣結果", size=16)], "left", TITLE_SPACING),
        _appendix_table(SAMPLING_COLUMNS, titles, records),
    ]


def _factor_blocks(model: G3026Model) -> list:
    records = [[f.item, f.source, f.description, f.remarks] for f in model.emission_factors]
    titles = ["NO.", "排放係數項目", "排放係數來源", "排放係數說明", "備註"]
    return [
        para([txt("附件二 排放係數確認", size=16)], "left", TITLE_SPACING),
        _appendix_table(FACTOR_COLUMNS, titles, records),
    ]
