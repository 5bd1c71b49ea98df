"""Shared form data models and enumerations."""

from __future__ import annotations

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FormModel(BaseModel):
    """Base for every persisted form model.

    Instances are immutable snapshots; edits go through ``model_copy``.
    JSON keys are camelCase to stay compatible with saved payloads.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ReportCode(str, Enum):
    G3022 = "G-3022"
    G3026 = "G-3026"
    G3027 = "G-3027"


class Stage(str, Enum):
    S1 = "S1"
    S2 = "S2"


class ComplianceStatus(str, Enum):
    COMPLIANT = "符合"
    NON_COMPLIANT = "不符合"
    CLARIFY = "待釐清"
    NA = "不適用"


class FinalConclusion(str, Enum):
    PASS = "通過 (Pass)"
    REDUCED = "減少人天 (Reduced Days)"
    PENDING = "待釐清/補正 (Pending)"


CHECKLIST_DELIMITER = "."


def new_id() -> str:
    """Generate a unique id for a collection item."""
    return uuid4().hex


class ChecklistItem(FormModel):
    """A single compliance-criterion row."""

    id: str
    name: str
    doc_ref: str = ""
    field_obs: str | None = None
    status: ComplianceStatus = ComplianceStatus.COMPLIANT

    @property
    def is_header(self) -> bool:
        """Root items (no delimiter in the id) are section headers."""
        return CHECKLIST_DELIMITER not in self.id

    @property
    def group_key(self) -> str:
        return self.id.split(CHECKLIST_DELIMITER, 1)[0]
