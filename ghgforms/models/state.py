"""Application state: the three report models plus the active selector."""

from __future__ import annotations

from pydantic import Field

from ghgforms.models.common import FormModel, ReportCode
from ghgforms.models.g3022 import G3022Model
from ghgforms.models.g3026 import G3026Model
from ghgforms.models.g3027 import G3027Model

ReportModel = G3022Model | G3026Model | G3027Model

# ReportCode -> AppState attribute holding that report
REPORT_FIELDS: dict[ReportCode, str] = {
    ReportCode.G3022: "g3022",
    ReportCode.G3026: "g3026",
    ReportCode.G3027: "g3027",
}


class AppState(FormModel):
    active_report: ReportCode = Field(default=ReportCode.G3022, alias="reportType")
    g3022: G3022Model = Field(default_factory=G3022Model)
    g3026: G3026Model = Field(default_factory=G3026Model)
    g3027: G3027Model = Field(default_factory=G3027Model)

    def report(self, code: ReportCode) -> ReportModel:
        return getattr(self, REPORT_FIELDS[ReportCode(code)])

    def with_report(self, code: ReportCode, model: ReportModel) -> AppState:
        return self.model_copy(update={REPORT_FIELDS[ReportCode(code)]: model})
