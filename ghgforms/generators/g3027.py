"""G-3027 builder — nonconformity / observation summary.

The landscape findings page shows only findings of the active stage and
is dropped entirely at S2 when there are none. The portrait conclusion
page is always present and reports statistics for both stages.
"""

from __future__ import annotations

from dataclasses import dataclass

from ghgforms.generators import docx_renderer
from ghgforms.generators.common import (
    NIL_BORDER,
    NO_BORDER,
    BORDERLESS,
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
from ghgforms.generators.formatting import RocDate, to_roc_date
from ghgforms.models.common import ReportCode, Stage
from ghgforms.models.g3027 import FindingItem, G3027Model, G3027Stats, StageStats
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

LANDSCAPE_WIDTH = 14700
PORTRAIT_WIDTH = 10000

LANDSCAPE = PageSetup(orientation="landscape", top=1247, bottom=720, left=720, right=720, header=284, footer=624)
PORTRAIT = PageSetup(top=720, bottom=720, left=720, right=720, header=284, footer=624)

THICK = border(18)
THIN = border(4)
SHADING = "D9D9D9"
PADDED = CellMargins(100, 100, 100, 100)

BASIC_COLUMNS = [4500, 6200, 4000]
FINDINGS_COLUMNS = [600, 1400, 3000, 1000, 3000, 3000, 1200, 1100, 1100]
SUMMARY_COLUMNS = split_evenly(PORTRAIT_WIDTH, 5)

MIN_FINDING_ROWS = 3
FINDING_ROW_HEIGHT = 900

SECTION_FINDINGS = "findings"
SECTION_CONCLUSION = "conclusion"

FINDING_LEGEND = (
    ("備註:", 12),
    ("(S-1 適用)請於第 2 階段(S-2)查驗前提送不符合事項及觀察事項因應處理方案。", 12),
    (
        "(S-2 適用)請提送修正後經核章之溫室氣體報告書及不符合事項及觀察事項因應處理方案)依序表列彙整， "
        "並於 10 日內以電子郵件逕寄旭威認證股份有限公司查驗機構窗口，未送達前不予複審。",
        12,
    ),
    (
        "➢ 矯正措施要求：若不符合相關規定、構成實質差異、個別或累積之錯誤、遺漏及誤導構成實質性之部分，"
        "查驗人員應對受查驗者提出此要求，請受查驗者進行矯正。",
        10,
    ),
    ("➢ 澄清要求：若資訊不夠充分或不明確，無法確定是否符合相關規定時，查驗人員應對受查驗者提出此要求，請受查驗者提出說明以澄清。", 10),
    ("➢ 後續行動要求：針對下個查驗期間溫室氣體數據蒐集及報告特別注意或調整的部分，提出此要求。(*後續行動要求無須填寫矯正措施說明。)", 10),
    ("正本：旭威認證股份有限公司 查證機構存檔；影本：廠商存參", 10),
)


@dataclass(frozen=True)
class FindingLine:
    """One body row of the findings table; padding rows have no finding."""

    label: str
    finding: FindingItem | None


@dataclass(frozen=True)
class G3027View:
    stage: Stage
    date: RocDate
    auditee_date: RocDate
    verifier_date: RocDate
    findings: tuple[FindingItem, ...]
    lines: tuple[FindingLine, ...]
    include_findings_section: bool
    # From the findings, never the stored stats field
    stats: G3027Stats


def derive(model: G3027Model) -> G3027View:
    stage = model.basic_info.stage
    findings = tuple(model.findings_for(stage))
    total_rows = max(len(findings), MIN_FINDING_ROWS)
    lines = tuple(
        FindingLine(str(i + 1), findings[i]) if i < len(findings) else FindingLine("", None)
        for i in range(total_rows)
    )
    return G3027View(
        stage=stage,
        date=to_roc_date(model.basic_info.date),
        auditee_date=to_roc_date(model.conclusion.auditee_date),
        verifier_date=to_roc_date(model.conclusion.verifier_date),
        findings=findings,
        lines=lines,
        include_findings_section=not (stage == Stage.S2 and not findings),
        stats=G3027Stats.from_findings(model.findings),
    )


def build_document(model: G3027Model) -> Document:
    view = derive(model)
    header = _header(view.stage)
    footer = [footer_table(ReportCode.G3027.value, PORTRAIT_WIDTH)]
    sections = []
    if view.include_findings_section:
        sections.append(Section(SECTION_FINDINGS, LANDSCAPE, header, footer, _findings_blocks(model, view)))
    sections.append(Section(SECTION_CONCLUSION, PORTRAIT, header, footer, _conclusion_blocks(model, view)))
    return Document(sections=sections, font_size=12, spacing=Spacing(before=40, after=40))


def build(model: G3027Model) -> bytes:
    return docx_renderer.render(build_document(model))


def _box(top=THIN, bottom=THIN, left=THIN, right=THIN) -> Borders:
    return Borders.box(top, bottom, left, right)


def _date_text(date: RocDate) -> str:
    return f"{date.y}年{date.m}月{date.d}日"


def _header(stage: Stage) -> list[Paragraph]:
    return [
        company_line(),
        para(
            [
                txt("不符合事項/觀察事項摘要表 ", size=16, bold=True),
                checkbox(stage == Stage.S1, size=16),
                txt("第一階段(S-1) ", size=16),
                checkbox(stage == Stage.S2, size=16),
                txt("第二階段(S-2)", size=16),
            ],
            "center",
        ),
    ]


# --- Findings section ---


def _findings_blocks(model: G3027Model, view: G3027View) -> list:
    info = model.basic_info
    date = view.date
    invisible = Borders.box(NIL_BORDER, NIL_BORDER, NIL_BORDER, NIL_BORDER)

    def info_cell(text: str) -> Cell:
        return cell(text_para(text), borders=invisible)

    basic = Table(
        columns=BASIC_COLUMNS,
        borders=Borders.all(NIL_BORDER),
        fixed_layout=True,
        rows=[
            Row(
                cells=[
                    info_cell(f"案件編號：{info.case_number}"),
                    info_cell(" "),
                    info_cell(f"查驗年度： {info.verification_year} 年"),
                ]
            ),
            Row(
                cells=[
                    info_cell(f"主導查驗員：{info.lead_verifier}"),
                    info_cell(f"受查驗方代表：{info.auditee_rep}"),
                    info_cell(f"查驗日期： {date.y} 年 {date.m} 月 {date.d} 日"),
                ]
            ),
        ],
    )
    rows = _findings_header() + [_finding_row(line) for line in view.lines] + _findings_footer(model, view)
    return [
        basic,
        Paragraph(),
        Table(columns=FINDINGS_COLUMNS, fixed_layout=True, rows=rows),
    ]


def _findings_header() -> list[Row]:
    titles = (
        "發現事項之分類",
        "不符合事項描述",
        "填報查\n驗人員",
        "矯正措施/澄清說明",
        "審查意見",
        "查驗員",
        "審查結果",
        "審查地點",
    )
    return [
        Row(
            cells=[
                Cell(
                    [text_para("編號", "center")],
                    row_span=2,
                    shading=SHADING,
                    v_align="center",
                    borders=_box(THICK, THICK, THICK, THIN),
                ),
                Cell([text_para("查驗機構查驗發現", "center")], col_span=3, shading=SHADING, borders=_box(top=THICK)),
                Cell([text_para("受查驗方回覆", "center")], shading=SHADING, borders=_box(top=THICK)),
                Cell(
                    [text_para("查驗機構審查", "center")],
                    col_span=4,
                    shading=SHADING,
                    borders=_box(top=THICK, right=THICK),
                ),
            ]
        ),
        Row(
            cells=[
                Cell(
                    [text_para(title, "center")],
                    shading=SHADING,
                    v_align="center",
                    borders=_box(bottom=THICK, right=THICK if i == len(titles) - 1 else THIN),
                )
                for i, title in enumerate(titles)
            ]
        ),
    ]


def _finding_row(line: FindingLine) -> Row:
    item = line.finding or FindingItem(id="")
    result = para(
        [
            checkbox(item.result == "Close"),
            txt(" 結案"),
            txt("\n"),
            checkbox(item.result == "Keep"),
            txt(" 保留"),
        ]
    )
    location = para(
        [
            checkbox(item.location == "OnSite"),
            txt(" 現場"),
            txt("\n"),
            checkbox(item.location == "OffSite"),
            txt(" 非現場"),
        ]
    )
    return Row(
        height=FINDING_ROW_HEIGHT,
        cells=[
            cell(text_para(line.label, "center"), v_align="center", borders=_box(left=THICK)),
            cell(text_para(item.type.value, "center"), v_align="center", borders=_box()),
            cell(text_para(item.description), borders=_box()),
            cell(text_para(item.reporter, "center"), v_align="center", borders=_box()),
            cell(text_para(item.corrective_action), borders=_box()),
            cell(text_para(item.review_opinion), borders=_box()),
            cell(text_para(item.reviewer, "center"), v_align="center", borders=_box()),
            cell(result, v_align="center", borders=_box()),
            cell(location, v_align="center", borders=_box(right=THICK)),
        ],
    )


def _findings_footer(model: G3027Model, view: G3027View) -> list[Row]:
    info = model.basic_info
    span = len(FINDINGS_COLUMNS)
    signatures = Table(
        columns=split_evenly(LANDSCAPE_WIDTH, 4),
        borders=BORDERLESS,
        rows=[
            Row(
                cells=[
                    cell(text_para(f"受查驗方代表：{info.auditee_rep}")),
                    cell(text_para(f"回覆日期：{_date_text(view.auditee_date)}")),
                    cell(text_para(f"主導查驗員：{info.lead_verifier}")),
                    cell(text_para(f"審查日期：{_date_text(view.date)}")),
                ]
            )
        ],
    )
    return [
        Row(
            cells=[
                Cell(
                    [
                        text_para("發現事項之分類："),
                        text_para(
                            "矯正措施要求(Corrective Action Request，CAR)、澄清要求(Clarification Request，CR)"
                            "與後續行動要求(Forward Action Request，FAR)"
                        ),
                    ],
                    col_span=span,
                    shading=SHADING,
                    borders=_box(THICK, NO_BORDER, THICK, THICK),
                )
            ]
        ),
        Row(
            cells=[
                Cell(
                    [text_para(text, size=size) for text, size in FINDING_LEGEND],
                    col_span=span,
                    borders=_box(NO_BORDER, NO_BORDER, THICK, THICK),
                )
            ]
        ),
        Row(cells=[Cell([signatures], col_span=span, borders=_box(NO_BORDER, THICK, THICK, THICK))]),
    ]


# --- Conclusion section ---


def _conclusion_blocks(model: G3027Model, view: G3027View) -> list:
    info = model.basic_info
    rows = _stats_rows(view.stats) + _decision_rows(model) + [
        _signature_row(
            [
                text_para("受查組織", bold=True),
                text_para("組織代表瞭解並接受查證結果以及不符合報告的內容。組織代表亦能陳述對此次查證不滿意之處。"),
                text_para("組織代表簽名處：", bold=True),
                Paragraph(spacing=Spacing(before=400, after=400)),
                text_para(f"日期：{_date_text(view.auditee_date)}", "right"),
            ]
        ),
        _signature_row(
            [
                text_para("查證機構", bold=True),
                text_para(
                    "考慮到文件呈現方式、查證的場址，以及對問題的回應，主導查證員的簽名並不表示查證小組的查證人員"
                    "或查證機構須負責意外事件或在查證程序發生後其客戶所造成的錯誤。"
                ),
                text_para("此階段查證機構人員簽名處：", bold=True),
                text_para("(查證小組/技術專家/觀察員/見證員)", bold=True),
                Paragraph(spacing=Spacing(before=400, after=400)),
                text_para(f"日期：{_date_text(view.verifier_date)}", "right"),
            ]
        ),
    ]
    return [
        text_para(f"案件編號：{info.case_number}"),
        text_para("本階段現場查證結果(以下內容參照不符合事項/觀察事項摘要表)如下："),
        Paragraph(),
        Table(columns=SUMMARY_COLUMNS, fixed_layout=True, rows=rows),
    ]


def _stats_rows(stats: G3027Stats) -> list[Row]:
    s1, s2 = stats.s1, stats.s2
    metrics = (
        ("不符合事項數量", "non_conformity"),
        ("觀察事項數量", "observation"),
        ("建議事項數量", "suggestion"),
    )
    rows = []
    for index, (title, attr) in enumerate(metrics):
        top = THICK if index == 0 else THIN
        bottom = THICK if index == len(metrics) - 1 else THIN

        def stat_cell(text: str, left=THIN, right=THIN) -> Cell:
            return cell(text_para(text, "center"), v_align="center", borders=_box(top, bottom, left, right))

        rows.append(
            Row(
                cells=[
                    stat_cell(title, left=THICK),
                    stat_cell("第一階段(S-1)"),
                    stat_cell(_count(s1, attr)),
                    stat_cell("第二階段(S-2)"),
                    stat_cell(_count(s2, attr), right=THICK),
                ]
            )
        )
    return rows


def _count(stats: StageStats, attr: str) -> str:
    return str(getattr(stats, attr))


def _decision_rows(model: G3027Model) -> list[Row]:
    c = model.conclusion

    def labelled(label: str, *blocks) -> Row:
        return Row(
            cells=[
                cell(text_para(label), v_align="center", borders=_box(left=THICK)),
                Cell(list(blocks), col_span=4, borders=_box(right=THICK)),
            ]
        )

    return [
        Row(
            cells=[
                Cell(
                    [
                        text_para("第一階段適用:"),
                        para([checkbox(c.s1_result == "None"), txt("未發現相關問題，按原訂計畫執行第二階段查證。")]),
                        para([checkbox(c.s1_result == "NoEffect"), txt("本階段所發現之問題不影響第二階段查證。")]),
                        para([checkbox(c.s1_result == "AdjustDays"), txt("現場查證人天或第二階段查證日期需調節。")]),
                        text_para(f" 說明：{c.s1_note or ''}"),
                        para([checkbox(c.s1_result == "Undecided"), txt("目前的情況無法決定。")]),
                    ],
                    col_span=3,
                    borders=_box(NO_BORDER, THIN, THICK, THIN),
                    margins=PADDED,
                ),
                Cell(
                    [
                        text_para("第二階段適用:"),
                        text_para("不符合事項與觀察事項，是否已於第二階段前完成改正"),
                        para(
                            [
                                checkbox(c.s2_result == "Corrected"),
                                txt("是 "),
                                checkbox(c.s2_result == "Agree"),
                                txt("否(待組織回覆矯正措施審查)"),
                            ]
                        ),
                        para([checkbox(c.s2_result == "NoFindings"), txt("無相關發現")]),
                    ],
                    col_span=2,
                    borders=_box(NO_BORDER, THIN, THIN, THICK),
                    margins=PADDED,
                ),
            ]
        ),
        labelled(
            "查證協議資訊變更",
            para([checkbox(c.protocol_change == "No"), txt("無變更")]),
            para([checkbox(c.protocol_change == "Yes"), txt("查證協議變更")]),
            text_para(f" 請說明：{c.protocol_change_note}"),
        ),
        labelled("保留意見", text_para(c.reserved_opinion)),
        labelled("其他說明", text_para(c.other_note)),
    ]


def _signature_row(blocks: list) -> Row:
    return Row(
        cells=[
            Cell(
                blocks,
                col_span=len(SUMMARY_COLUMNS),
                borders=_box(THICK, THICK, THICK, THICK),
                margins=PADDED,
            )
        ]
    )
