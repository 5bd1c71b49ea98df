"""G-3027 nonconformity / observation summary model."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import Field

from ghgforms.models.common import FormModel, Stage, new_id


class FindingType(str, Enum):
    CAR = "CAR"
    CR = "CR"
    FAR = "FAR"
    OBS = "OBS"
    NONE = ""


FindingResult = Literal["Close", "Keep", ""]
FindingLocation = Literal["OnSite", "OffSite", ""]


class FindingItem(FormModel):
    """A recorded nonconformity, observation or suggestion."""

    id: str = Field(default_factory=new_id)
    stage: Stage = Stage.S1
    type: FindingType = FindingType.NONE
    description: str = ""
    reporter: str = ""
    corrective_action: str = ""
    review_opinion: str = ""
    reviewer: str = ""
    result: FindingResult = ""
    location: FindingLocation = ""


_STAT_FIELDS = {
    FindingType.CAR: "non_conformity",
    FindingType.OBS: "observation",
    FindingType.CR: "observation",
    FindingType.FAR: "suggestion",
}


class StageStats(FormModel):
    non_conformity: int = 0
    observation: int = 0
    suggestion: int = 0


class G3027Stats(FormModel):
    s1: StageStats = Field(default_factory=StageStats)
    s2: StageStats = Field(default_factory=StageStats)

    @classmethod
    def from_findings(cls, findings: list[FindingItem]) -> G3027Stats:
        """Per-stage counts over all findings: CAR, OBS/CR and FAR."""
        counts = {Stage.S1: StageStats(), Stage.S2: StageStats()}
        for finding in findings:
            attr = _STAT_FIELDS.get(finding.type)
            if attr is None:
                continue
            current = counts[finding.stage]
            counts[finding.stage] = current.model_copy(update={attr: getattr(current, attr) + 1})
        return cls(s1=counts[Stage.S1], s2=counts[Stage.S2])


class G3027BasicInfo(FormModel):
    case_number: str = ""
    stage: Stage = Stage.S1
    verification_year: str = ""
    lead_verifier: str = ""
    auditee_rep: str = ""
    date: str = ""


class G3027Conclusion(FormModel):
    s1_result: Literal["None", "NoEffect", "AdjustDays", "Undecided", ""] = ""
    s1_note: str = ""
    s2_result: Literal["Corrected", "Agree", "NoFindings", ""] = ""
    protocol_change: Literal["No", "Yes"] = "No"
    protocol_change_note: str = ""
    reserved_opinion: str = ""
    other_note: str = ""
    auditee_date: str = ""
    verifier_date: str = ""


class G3027Model(FormModel):
    """Report C: staged findings summary with statistics and conclusions."""

    basic_info: G3027BasicInfo = Field(default_factory=G3027BasicInfo)
    findings: list[FindingItem] = Field(default_factory=list)
    stats: G3027Stats = Field(default_factory=G3027Stats)
    conclusion: G3027Conclusion = Field(default_factory=G3027Conclusion)

    def findings_for(self, stage: Stage) -> list[FindingItem]:
        return [f for f in self.findings if f.stage == stage]
