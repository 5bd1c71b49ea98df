"""G-3022 desk review / site interview summary report model."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from ghgforms.models.common import ChecklistItem, FinalConclusion, FormModel, new_id

EMISSION_CATEGORIES = ("cat1", "cat2", "cat3", "cat4", "cat5", "cat6")


class InterviewRecord(FormModel):
    id: str = Field(default_factory=new_id)
    topic: str = ""
    record: str = ""
    result: str = ""


class PendingItem(FormModel):
    id: str = Field(default_factory=new_id)
    content: str = ""
    response: str = ""


class G3022BasicInfo(FormModel):
    client_name: str = ""
    client_address: str = ""
    review_date: str = ""
    visit_date: str = ""
    case_number: str = ""
    reasonable_scopes: list[str] = Field(default_factory=list)
    limited_scopes: list[str] = Field(default_factory=list)
    materiality: str = ""
    base_year: str = ""
    base_year_emissions: str = ""
    verification_year: str = ""
    intended_user: str = ""
    report_name: str = ""
    inventory_name: str = ""
    procedure_name: str = ""


class Emissions(FormModel):
    cat1: float | None = 0
    cat2: float | None = 0
    cat3: float | None = 0
    cat4: float | None = 0
    cat5: float | None = 0
    cat6: float | None = 0
    uncertainty_upper: str = ""
    uncertainty_lower: str = ""

    def category_values(self) -> list[float]:
        return [getattr(self, cat) or 0 for cat in EMISSION_CATEGORIES]


class G3022Conclusion(FormModel):
    conflict_of_interest: Literal["Yes", "No"] = "No"
    conflict_detail: str = ""
    summary: FinalConclusion = FinalConclusion.PASS
    other_note: str = ""
    memo_correction: bool = False
    interviews: list[InterviewRecord] = Field(default_factory=list)
    pending_items: list[PendingItem] = Field(default_factory=list)
    verifier_name: str = ""
    lead_verifier_name: str = ""
    client_rep_name: str = ""


class G3022Model(FormModel):
    """Report A: desk review and site interview summary."""

    basic_info: G3022BasicInfo = Field(default_factory=G3022BasicInfo)
    emissions: Emissions = Field(default_factory=Emissions)
    checklist: list[ChecklistItem] = Field(default_factory=list)
    conclusion: G3022Conclusion = Field(default_factory=G3022Conclusion)
