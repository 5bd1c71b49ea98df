"""G-3022 builder — desk review / site interview summary report.

Three portrait sections: the main report (basic info, document
references, checklist, conclusion), the optional interview appendix and
the pending-items summary.
"""

from __future__ import annotations

from dataclasses import dataclass

from ghgforms.generators import docx_renderer
from ghgforms.generators.common import (
    BORDERLESS,
    CRITERIA,
    NO_BORDER,
    border,
    cell,
    checkbox,
    company_line,
    footer_table,
    para,
    split_evenly,
    text_para,
    txt,
)
from ghgforms.generators.formatting import (
    CHECKBOX_FILLED,
    G3022_STATUS_GLYPHS,
    RocDate,
    co2e_runs,
    emission_total,
    format_number,
    get_percent,
    scopes_text,
    status_glyph,
    to_roc_date,
)
from ghgforms.models.common import ChecklistItem, FinalConclusion, ReportCode
from ghgforms.models.g3022 import G3022Model
from ghgforms.models.layout import (
    Borders,
    Cell,
    Document,
    Indent,
    PageSetup,
    Paragraph,
    Row,
    Section,
    Spacing,
    Table,
)

PORTRAIT_WIDTH = 10205
PAGE = PageSetup(top=1134, bottom=1134, left=851, right=851, header=454, footer=454)

SHADING = "C5E0B3"
STD = border(4)
GRID = Borders.all(STD)

BASIC_LABEL_WIDTH = 2750
BASIC_ROW_HEIGHT = 600

CL_WIDTH_CLAUSE = 3500
CL_WIDTH_DOC = 4000
CL_WIDTH_RESULT = 2165
CL_WIDTH_ID = PORTRAIT_WIDTH - CL_WIDTH_CLAUSE - CL_WIDTH_DOC - CL_WIDTH_RESULT

MAIN_TITLE = "查驗書面審查-赴廠訪談總結報告(2018 年版)"
APPENDIX_TITLE = "書面審查/現場訪談報告"

CATEGORY_LABELS = ("類別一", "類別二", "類別三", "類別四", "類別五", "類別六")

SECTION_MAIN = "main"
SECTION_INTERVIEWS = "interviews"
SECTION_PENDING = "pending"

FIXED_LINE = Spacing(before=0, after=0, line=520, rule="exact")

REDUCED_DAYS_NOTE = (
    " 邊界及溫室氣體排放型態單純，如工廠或大樓為單一組織控制，邊界內未有涉及區域或樓層租借的狀況"
    "(即電力不須採用分配方式計算)、90 %以上溫室氣體排放量來自能源間接、無複雜之製程排放源…等情形。"
)
MEMO_CORRECTION_NOTE = "書面審查及/或訪談結果，尚有上述事項待釐清/補正，請於第一階段(S-1)前說明或提送補正資料。"
APPENDIX_NOTE = "註：本頁為附件，由查驗人員視實際需要調整頁數及行距。"


@dataclass(frozen=True)
class CategoryLine:
    label: str
    amount: str
    percent: str


@dataclass(frozen=True)
class G3022View:
    """Values derived from the model before layout."""

    review_date: RocDate
    visit_date: RocDate
    total: float
    total_text: str
    base_year_emissions: str
    categories: tuple[CategoryLine, ...]
    marks: tuple[str, ...]
    include_interviews: bool


def derive(model: G3022Model) -> G3022View:
    values = model.emissions.category_values()
    total = emission_total(values)
    return G3022View(
        review_date=to_roc_date(model.basic_info.review_date),
        visit_date=to_roc_date(model.basic_info.visit_date),
        total=total,
        total_text=format_number(total),
        base_year_emissions=format_number(model.basic_info.base_year_emissions),
        categories=tuple(
            CategoryLine(label, format_number(value), get_percent(value, total))
            for label, value in zip(CATEGORY_LABELS, values)
        ),
        marks=tuple(status_glyph(item.status, G3022_STATUS_GLYPHS) for item in model.checklist),
        include_interviews=bool(model.conclusion.interviews),
    )


def build_document(model: G3022Model) -> Document:
    view = derive(model)
    case = model.basic_info.case_number
    sections = [
        Section(
            name=SECTION_MAIN,
            page=PAGE,
            header=_header(MAIN_TITLE, case),
            footer=_footer(),
            blocks=_main_blocks(model, view),
        )
    ]
    if view.include_interviews:
        sections.append(
            Section(
                name=SECTION_INTERVIEWS,
                page=PAGE,
                header=_header(APPENDIX_TITLE, case),
                footer=_footer(),
                blocks=_interview_blocks(model, view),
            )
        )
    sections.append(
        Section(
            name=SECTION_PENDING,
            page=PAGE,
            header=_header(APPENDIX_TITLE, case),
            footer=_footer(),
            blocks=_pending_blocks(model, view),
        )
    )
    return Document(sections=sections, font_size=12, spacing=Spacing(before=40, after=40))


def build(model: G3022Model) -> bytes:
    return docx_renderer.render(build_document(model))


def _box(checked: bool):
    return checkbox(checked, CHECKBOX_FILLED)


# --- Header / footer ---


def _header(title: str, case_number: str) -> list[Paragraph]:
    return [
        company_line(),
        text_para(title, "center", size=18, bold=True),
        text_para(f"案件編號：{case_number}", bold=True),
    ]


def _footer() -> list:
    return [
        text_para("正本：旭威認證股份有限公司查驗機構存檔", size=10),
        footer_table(ReportCode.G3022.value, PORTRAIT_WIDTH),
    ]


# --- Section 1 ---


def _main_blocks(model: G3022Model, view: G3022View) -> list:
    info = model.basic_info
    review, visit = view.review_date, view.visit_date
    client_table = Table(
        columns=[PORTRAIT_WIDTH],
        borders=BORDERLESS,
        rows=[
            Row(cells=[cell(text_para(f"委託單位名稱：{info.client_name}"))]),
            Row(cells=[cell(text_para(f"委託單位地址：{info.client_address}"))]),
            Row(
                cells=[
                    cell(
                        para(
                            [
                                _box(True),
                                txt(f"書面審查日期： {review.y} 年 {review.m} 月 {review.d} 日      "),
                                _box(True),
                                txt(f"赴廠訪談日期： {visit.y} 年 {visit.m} 月 {visit.d} 日"),
                            ]
                        )
                    )
                ]
            ),
            Row(cells=[cell(text_para(" "))]),
        ],
    )
    return [
        text_para(f"查驗準則：{CRITERIA}", spacing=Spacing(before=200, after=200, line=240)),
        client_table,
        text_para("一、基本資料：", size=14, bold=True),
        _basic_info_table(model, view),
        Paragraph(page_break_before=True),
        text_para("二、相關文件與標準條文對照審查", size=14, bold=True),
        text_para(f"溫室氣體報告名稱/版次/日期： {info.report_name}", spacing=FIXED_LINE),
        text_para(f"溫室氣體盤查清冊名稱/版次/日期： {info.inventory_name}", spacing=FIXED_LINE),
        text_para(f"溫室氣體資訊管理程序名稱/版次/日期： {info.procedure_name}", spacing=FIXED_LINE),
        text_para(" "),
        _checklist_table(model.checklist, view.marks),
        Paragraph(),
        text_para("三、綜合結論", size=14, bold=True),
        _conclusion_table(model),
    ]


def _label(text: str, *extra: str, row_span: int = 1) -> Cell:
    blocks = [text_para(text)] + [text_para(t) for t in extra]
    return Cell(blocks=blocks, row_span=row_span, shading=SHADING, v_align="center")


def _value(*blocks) -> Cell:
    return cell(*blocks, v_align="center")


def _basic_info_table(model: G3022Model, view: G3022View) -> Table:
    info = model.basic_info
    emissions = model.emissions

    def row(*cells: Cell) -> Row:
        return Row(cells=list(cells), height=BASIC_ROW_HEIGHT)

    category_rows = [
        row(
            _value(
                para(
                    co2e_runs(
                        f"{line.label}：排放量 {line.amount} 公噸 ",
                        f"，佔總排放比例： {line.percent} %",
                    )
                )
            )
        )
        for line in view.categories
    ]
    return Table(
        columns=[BASIC_LABEL_WIDTH, PORTRAIT_WIDTH - BASIC_LABEL_WIDTH],
        borders=GRID,
        fixed_layout=True,
        rows=[
            row(
                _label("1.保證等級"),
                _value(
                    para([_box(bool(info.reasonable_scopes)), txt("合理等級："), txt(scopes_text(info.reasonable_scopes))]),
                    para([_box(bool(info.limited_scopes)), txt("有限等級："), txt(scopes_text(info.limited_scopes))]),
                ),
            ),
            row(_label("2.實質性門檻"), _value(text_para(f"依雙方協議訂為 {info.materiality}"))),
            row(
                _label("3.基準年及基準年溫室氣體排放資訊"),
                _value(
                    text_para(f"基準年設定為： {info.base_year} 年"),
                    para(co2e_runs(f"總排放量： {view.base_year_emissions} 公噸 ")),
                ),
            ),
            # Label spans the year/total row, six categories and uncertainty
            row(
                _label("4.申請查驗年度及查驗年度溫室氣體排放資訊", row_span=8),
                _value(
                    text_para(f"查驗年度： {info.verification_year} 年"),
                    para(co2e_runs(f"總排放量： {view.total_text} 公噸 ")),
                ),
            ),
            *category_rows,
            row(
                _value(
                    text_para(
                        f"盤查清冊之不確定性上、下限：上限 {emissions.uncertainty_upper} %，"
                        f"下限 {emissions.uncertainty_lower} %"
                    )
                )
            ),
            row(_label("5.溫室氣體報告", "預期使用者"), _value(text_para(info.intended_user))),
        ],
    )


def _checklist_table(checklist: list[ChecklistItem], marks: tuple[str, ...]) -> Table:
    header = Row(
        repeat_header=True,
        cells=[
            Cell([text_para("項目\n編號", "center")], shading=SHADING, v_align="center"),
            Cell([text_para("ISO 14064-1: 2018 條文項目", "center")], shading=SHADING, v_align="center"),
            Cell([text_para("相關文件編號\n及對照章/節/頁", "center")], shading=SHADING, v_align="center"),
            Cell(
                [
                    text_para("審 查 結 果", "center"),
                    text_para("(符合項目以○註記，\n待釐清項目以 X 註記，\n不適用以―註記)", "center", size=9),
                ],
                shading=SHADING,
                v_align="center",
            ),
        ],
    )
    rows = [header]
    for item, mark in zip(checklist, marks):
        if item.is_header:
            rows.append(
                Row(
                    cells=[
                        Cell([text_para(item.id, "center", bold=True)], shading=SHADING),
                        Cell([text_para(item.name, bold=True)], col_span=3, shading=SHADING),
                    ]
                )
            )
        else:
            rows.append(
                Row(
                    cells=[
                        cell(text_para(item.id, "center")),
                        cell(text_para(item.name)),
                        cell(text_para(item.doc_ref)),
                        cell(text_para(mark, "center"), v_align="center"),
                    ]
                )
            )
    return Table(
        columns=[CL_WIDTH_ID, CL_WIDTH_CLAUSE, CL_WIDTH_DOC, CL_WIDTH_RESULT],
        borders=GRID,
        fixed_layout=True,
        rows=rows,
    )


def _conclusion_table(model: G3022Model) -> Table:
    c = model.conclusion
    conflict = c.conflict_of_interest == "Yes"
    return Table(
        columns=[PORTRAIT_WIDTH],
        borders=GRID,
        rows=[
            Row(
                cells=[
                    Cell(
                        [text_para("(一)書面審查及/或訪談結果，對於查驗過程中是否可能與本機構之組織或個人存在潛在利益衝突")],
                        shading=SHADING,
                    )
                ]
            ),
            Row(
                cells=[
                    cell(
                        para(
                            [
                                _box(not conflict),
                                txt("否；"),
                                _box(conflict),
                                txt("是，說明如後："),
                                txt(c.conflict_detail if conflict else "________________________"),
                            ]
                        )
                    )
                ]
            ),
            Row(cells=[Cell([text_para("(二)經書面審查及/或訪談結果，綜合結論如下：")], shading=SHADING)]),
            Row(
                height=2000,
                cells=[
                    cell(
                        para(
                            [
                                _box(c.summary == FinalConclusion.PASS),
                                txt("書面審查及/或訪談結果通過，可據以辦理後續第 1 階段查驗。"),
                            ]
                        ),
                        para(
                            [
                                _box(c.summary == FinalConclusion.REDUCED),
                                txt("組織層級查驗符合下述情況，最低現場查驗人天數得少於 4 人天(含)但不得少於 1 人天(含)。"),
                            ]
                        ),
                        para(
                            [txt(REDUCED_DAYS_NOTE, size=10)],
                            spacing=Spacing(before=0, after=100, line=240),
                            indent=Indent(left=400),
                        ),
                        para(
                            [
                                _box(c.summary == FinalConclusion.PENDING),
                                txt("書面審查及/或訪談結果，尚有部分事項待釐清/補正。(參見待釐清/補正事項摘要表)"),
                            ]
                        ),
                    )
                ],
            ),
            Row(height=1500, cells=[cell(text_para(f"其它：{c.other_note}"))]),
        ],
    )


# --- Section 2: interview appendix ---


def _interview_blocks(model: G3022Model, view: G3022View) -> list:
    visit = view.visit_date
    rows = [
        Row(
            repeat_header=True,
            cells=[
                Cell([text_para(title, "center")], shading=SHADING)
                for title in ("系統編號", "現場訪談事項", "查 核 紀 錄", "結 果")
            ],
        )
    ]
    for i, interview in enumerate(model.conclusion.interviews, start=1):
        rows.append(
            Row(
                height=1800,
                cells=[
                    cell(text_para(str(i), "center")),
                    cell(text_para(interview.topic)),
                    cell(text_para(interview.record)),
                    cell(text_para(interview.result)),
                ],
            )
        )
    signatures = Table(
        columns=split_evenly(PORTRAIT_WIDTH, 4),
        borders=Borders(top=NO_BORDER, bottom=STD, left=STD, right=STD, inside_h=NO_BORDER, inside_v=STD),
        rows=[
            Row(
                height=1200,
                cells=[
                    cell(text_para("查驗員", "center"), text_para("簽 名", "center"), v_align="center"),
                    cell(v_align="center"),
                    cell(text_para("主導查驗員", "center"), text_para("簽 名", "center"), v_align="center"),
                    cell(v_align="center"),
                ],
            )
        ],
    )
    return [
        text_para(f"查驗準則：{CRITERIA}"),
        text_para(f"現場訪談日期：     {visit.y}    年     {visit.m}    月     {visit.d}    日"),
        Table(columns=[1000, 2400, 5505, 1500], borders=GRID, fixed_layout=True, rows=rows),
        signatures,
        text_para(APPENDIX_NOTE, size=10),
    ]


# --- Section 3: pending items ---


def _pending_blocks(model: G3022Model, view: G3022View) -> list:
    c = model.conclusion
    review = view.review_date
    rows = [
        Row(
            repeat_header=True,
            cells=[
                Cell([text_para(title, "center")], shading=SHADING)
                for title in ("項次", "待釐清/補正事項事項內容", "組織回覆")
            ],
        )
    ]
    if c.pending_items:
        for i, item in enumerate(c.pending_items, start=1):
            rows.append(
                Row(
                    height=1800,
                    cells=[
                        cell(text_para(str(i), "center")),
                        cell(text_para(item.content)),
                        cell(text_para(item.response)),
                    ],
                )
            )
    else:
        rows.append(
            Row(
                height=1800,
                cells=[cell(text_para(" ", "center")), cell(text_para(" ")), cell(text_para(" "))],
            )
        )

    def signer(title: str, name: str) -> Cell:
        return cell(
            text_para(title),
            Paragraph(spacing=Spacing(before=200)),
            text_para(name, "center", size=16),
        )

    signatures = Table(
        columns=[3368, 3368, PORTRAIT_WIDTH - 2 * 3368],
        borders=Borders(top=NO_BORDER, bottom=STD, left=STD, right=STD, inside_h=STD, inside_v=STD),
        rows=[
            Row(
                height=1500,
                cells=[
                    signer("填報之查驗人員簽名:", c.verifier_name),
                    signer("主導查驗員簽名:", c.lead_verifier_name),
                    signer("委託單位代表簽名:", c.client_rep_name),
                ],
            ),
            Row(
                cells=[
                    Cell(
                        [
                            text_para("備註:", bold=True),
                            para([_box(c.memo_correction), txt(MEMO_CORRECTION_NOTE, bold=True)]),
                        ],
                        col_span=3,
                        borders=Borders.box(STD, STD, STD, STD),
                    )
                ]
            ),
        ],
    )
    return [
        text_para("待釐清/補正事項摘要表", "center", size=14, bold=True),
        text_para(f"查驗準則：{CRITERIA}"),
        text_para(f"書面審查日期：     {review.y}    年     {review.m}    月     {review.d}    日"),
        Table(columns=[1000, 4602, 4603], borders=GRID, fixed_layout=True, rows=rows),
        signatures,
    ]
