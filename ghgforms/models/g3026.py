"""G-3026 verification observation report model."""

from __future__ import annotations

from pydantic import Field

from ghgforms.models.common import ChecklistItem, FormModel, Stage, new_id


class SamplingResult(FormModel):
    id: str = Field(default_factory=new_id)
    area: str = ""
    value: str = ""
    source: str = ""
    type: str = ""
    ratio: str = ""
    remarks: str = ""


class EmissionFactor(FormModel):
    id: str = Field(default_factory=new_id)
    item: str = ""
    source: str = ""
    description: str = ""
    remarks: str = ""


class G3026BasicInfo(FormModel):
    case_number: str = ""
    stage: Stage = Stage.S1
    year: str = ""
    check_date: str = ""
    report_info: str = ""
    inventory_info: str = ""
    power_factor_info: str = ""
    other_info: str = ""
    client_name: str | None = ""
    client_address: str | None = ""


class G3026Model(FormModel):
    """Report B: on-site observation checklist with sampling appendices."""

    basic_info: G3026BasicInfo = Field(default_factory=G3026BasicInfo)
    checklist: list[ChecklistItem] = Field(default_factory=list)
    sampling_results: list[SamplingResult] = Field(default_factory=list)
    emission_factors: list[EmissionFactor] = Field(default_factory=list)
    other_observation: str = ""
    lead_verifier_name: str = ""
