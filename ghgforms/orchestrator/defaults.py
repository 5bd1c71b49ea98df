"""Default application state and seed checklists."""

from __future__ import annotations

from datetime import date

from ghgforms.models.common import ChecklistItem, ComplianceStatus, FinalConclusion, ReportCode, Stage
from ghgforms.models.g3022 import Emissions, G3022BasicInfo, G3022Conclusion, G3022Model
from ghgforms.models.g3026 import G3026BasicInfo, G3026Model
from ghgforms.models.g3027 import G3027BasicInfo, G3027Conclusion, G3027Model, G3027Stats
from ghgforms.models.state import AppState

DEFAULT_CASE_NUMBER = "113-T-0001"

# (id, name, doc_ref); ids without a "." are section headers
_G3022_CHECKLIST = (
    ("5", "溫室氣體邊界", ""),
    ("5.1", "組織邊界之設定 (營運控制權或財務控制權)", "盤查報告書 第 2 章"),
    ("5.2", "報告邊界之設定", "盤查報告書 第 3 章"),
    ("5.2.1", "直接溫室氣體排放與移除 (類別 1)", "盤查清冊"),
    ("5.2.2", "輸入能源之間接溫室氣體排放 (類別 2)", "盤查清冊"),
    ("5.2.3", "其他間接溫室氣體排放之顯著性評估 (類別 3 至 6)", "顯著性評估表"),
    ("5.2.4", "排除事項之說明與合理性", "盤查報告書 第 3 章"),
    ("6", "溫室氣體排放與移除之量化", ""),
    ("6.1", "排放源之鑑別與完整性", "排放源鑑別表"),
    ("6.2", "量化方法之選擇", "盤查作業程序書"),
    ("6.2.1", "活動數據之蒐集與佐證", "活動數據佐證資料"),
    ("6.2.2", "排放係數之選用與來源", "排放係數管理表"),
    ("6.2.3", "溫室氣體排放量 (公噸 CO2e) 之計算", "盤查清冊"),
    ("6.3", "全球暖化潛勢 (GWP) 之引用", "盤查清冊"),
    ("6.4", "基準年之選定與重新計算政策", "盤查報告書 第 5 章"),
    ("6.4.1", "基準年排放量之量化", "基準年盤查清冊"),
    ("6.4.2", "基準年重新計算之觸發條件", "盤查作業程序書"),
    ("7", "減緩活動", ""),
    ("7.1", "溫室氣體減量或移除增量之措施", "盤查報告書 第 6 章"),
    ("8", "溫室氣體清冊品質管理", ""),
    ("8.1", "數據品質管理程序", "盤查作業程序書"),
    ("8.2", "不確定性評估", "不確定性評估表"),
    ("8.3", "文件及紀錄之保存", "文件管制程序"),
    ("9", "溫室氣體報告", ""),
    ("9.1", "報告書之規劃與內容完整性", "盤查報告書"),
    ("9.2", "報告書應包含之必要資訊", "盤查報告書"),
    ("9.3", "排放量之分類呈現", "盤查報告書"),
    ("10", "組織在查證活動中之角色", ""),
    ("10.1", "查證準備與資料提供", "查證計畫"),
)

_G3026_CHECKLIST = (
    ("1.1", "組織邊界設定方式與現場設施一致", "盤查報告書 第 2 章"),
    ("1.2", "納入邊界之廠區與設施完整", "廠區平面圖"),
    ("2.1", "直接排放源 (類別 1) 鑑別完整", "排放源鑑別表"),
    ("2.2", "輸入能源間接排放 (類別 2) 鑑別完整", "電費單"),
    ("2.3", "其他間接排放顯著性評估合理", "顯著性評估表"),
    ("3.1", "活動數據與原始憑證相符", "活動數據佐證資料"),
    ("3.2", "排放係數引用正確且為最新版本", "排放係數管理表"),
    ("3.3", "全球暖化潛勢引用正確", "盤查清冊"),
    ("3.4", "排放量 (公噸 CO2e) 計算正確", "盤查清冊"),
    ("4.1", "基準年之設定與說明", "盤查報告書 第 5 章"),
    ("4.2", "基準年重新計算之必要性", "盤查作業程序書"),
    ("5.1", "數據蒐集與管理程序落實", "盤查作業程序書"),
    ("5.2", "儀器校正紀錄完整", "校正報告"),
    ("5.3", "文件及紀錄保存完整", "文件管制程序"),
)


def g3022_seed_checklist() -> list[ChecklistItem]:
    """Fresh copy of the G-3022 criteria checklist, all compliant."""
    return [
        ChecklistItem(id=item_id, name=name, doc_ref=doc_ref, status=ComplianceStatus.COMPLIANT)
        for item_id, name, doc_ref in _G3022_CHECKLIST
    ]


def g3026_seed_checklist() -> list[ChecklistItem]:
    """Fresh copy of the G-3026 observation checklist, all compliant."""
    return [
        ChecklistItem(id=item_id, name=name, doc_ref=doc_ref, field_obs="", status=ComplianceStatus.COMPLIANT)
        for item_id, name, doc_ref in _G3026_CHECKLIST
    ]


def default_emissions() -> Emissions:
    return Emissions()


def default_state(today: date | None = None) -> AppState:
    """State used before hydration and when nothing has been saved yet."""
    iso_today = (today or date.today()).isoformat()
    return AppState(
        active_report=ReportCode.G3022,
        g3022=G3022Model(
            basic_info=G3022BasicInfo(
                case_number=DEFAULT_CASE_NUMBER,
                review_date=iso_today,
                visit_date=iso_today,
                reasonable_scopes=["cat1", "cat2"],
                limited_scopes=["cat3", "cat4", "cat5", "cat6"],
                materiality="5%",
                base_year="2022",
                base_year_emissions="0",
                verification_year="2023",
                intended_user="預期使用者",
            ),
            emissions=default_emissions(),
            checklist=g3022_seed_checklist(),
            conclusion=G3022Conclusion(
                conflict_of_interest="No",
                summary=FinalConclusion.PASS,
                memo_correction=False,
            ),
        ),
        g3026=G3026Model(
            basic_info=G3026BasicInfo(
                case_number=DEFAULT_CASE_NUMBER,
                stage=Stage.S1,
                year="113",
                check_date=iso_today,
            ),
            checklist=g3026_seed_checklist(),
        ),
        g3027=G3027Model(
            basic_info=G3027BasicInfo(
                case_number=DEFAULT_CASE_NUMBER,
                stage=Stage.S1,
                verification_year="113",
                date=iso_today,
            ),
            stats=G3027Stats(),
            conclusion=G3027Conclusion(protocol_change="No"),
        ),
    )
