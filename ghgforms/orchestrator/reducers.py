"""Pure edit reducers for the three report models.

Every function takes an immutable model (or the whole ``AppState`` for
resets) and returns a new one. Nothing here persists or synchronizes;
the store wires reducers, ``sync`` and persistence together.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Literal, TypeVar

from pydantic import BaseModel

from ghgforms.models.common import ComplianceStatus, FinalConclusion, ReportCode, Stage, new_id
from ghgforms.models.g3022 import EMISSION_CATEGORIES, G3022Model, InterviewRecord, PendingItem
from ghgforms.models.g3026 import EmissionFactor, G3026Model, SamplingResult
from ghgforms.models.g3027 import FindingItem, G3027Model, G3027Stats
from ghgforms.models.state import AppState
from ghgforms.orchestrator.defaults import default_emissions, g3022_seed_checklist, g3026_seed_checklist

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

Confirm = Callable[[str], bool]

RESET_PROMPTS = {
    ReportCode.G3022: "確定要重置 G-3022 嗎？",
    ReportCode.G3026: "確定要重置 G-3026 嗎？",
    ReportCode.G3027: "確定要重置 G-3027 嗎？",
}
REMOVE_FINDING_PROMPT = "確定要刪除此發現事項嗎？"

ScopeKind = Literal["reasonable", "limited"]


# -- Generic helpers --


def replace(model: M, **changes) -> M:
    """Validated copy of ``model`` with ``changes`` applied by field name."""
    fields = type(model).model_fields
    unknown = [name for name in changes if name not in fields]
    if unknown:
        raise ValueError(f"Unknown field(s) for {type(model).__name__}: {', '.join(unknown)}")
    data = {name: getattr(model, name) for name in fields}
    data.update(changes)
    return type(model).model_validate(data)


def _update_item(items: list[M], item_id: str, field: str, value) -> list[M]:
    return [replace(item, **{field: value}) if item.id == item_id else item for item in items]


def _remove_item(items: list[M], item_id: str) -> list[M]:
    return [item for item in items if item.id != item_id]


def update_basic_info(model: M, field: str, value) -> M:
    return replace(model, basic_info=replace(model.basic_info, **{field: value}))


def update_conclusion(model: M, field: str, value) -> M:
    return replace(model, conclusion=replace(model.conclusion, **{field: value}))


def update_field(model: M, field: str, value) -> M:
    """Set a top-level field such as ``other_observation``."""
    return replace(model, **{field: value})


def update_checklist_item(model: M, item_id: str, field: str, value) -> M:
    return replace(model, checklist=_update_item(model.checklist, item_id, field, value))


# -- G-3022 --


def toggle_scope(model: G3022Model, kind: ScopeKind, scope: str) -> G3022Model:
    """Add ``scope`` to the reasonable/limited assurance list, or remove it."""
    key = "reasonable_scopes" if kind == "reasonable" else "limited_scopes"
    current = list(getattr(model.basic_info, key) or [])
    if scope in current:
        current = [s for s in current if s != scope]
    else:
        current.append(scope)
    return update_basic_info(model, key, current)


def _parse_emission(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def update_emission(model: G3022Model, field: str, value) -> G3022Model:
    """Category fields are coerced to numbers (0 when unparsable)."""
    if field in EMISSION_CATEGORIES:
        value = _parse_emission(value)
    return replace(model, emissions=replace(model.emissions, **{field: value}))


def set_all_compliant(model: G3022Model) -> G3022Model:
    checklist = [replace(item, status=ComplianceStatus.COMPLIANT) for item in model.checklist]
    return replace(model, checklist=checklist)


def add_interview(model: G3022Model) -> G3022Model:
    interviews = [*model.conclusion.interviews, InterviewRecord()]
    return update_conclusion(model, "interviews", interviews)


def update_interview(model: G3022Model, item_id: str, field: str, value: str) -> G3022Model:
    interviews = _update_item(model.conclusion.interviews, item_id, field, value)
    return update_conclusion(model, "interviews", interviews)


def remove_interview(model: G3022Model, item_id: str) -> G3022Model:
    return update_conclusion(model, "interviews", _remove_item(model.conclusion.interviews, item_id))


def add_pending(model: G3022Model) -> G3022Model:
    pending = [*model.conclusion.pending_items, PendingItem()]
    return update_conclusion(model, "pending_items", pending)


def update_pending(model: G3022Model, item_id: str, field: str, value: str) -> G3022Model:
    pending = _update_item(model.conclusion.pending_items, item_id, field, value)
    return update_conclusion(model, "pending_items", pending)


def remove_pending(model: G3022Model, item_id: str) -> G3022Model:
    return update_conclusion(model, "pending_items", _remove_item(model.conclusion.pending_items, item_id))


# -- G-3026 --


def add_sampling(model: G3026Model) -> G3026Model:
    return replace(model, sampling_results=[*model.sampling_results, SamplingResult()])


def update_sampling(model: G3026Model, item_id: str, field: str, value: str) -> G3026Model:
    return replace(model, sampling_results=_update_item(model.sampling_results, item_id, field, value))


def remove_sampling(model: G3026Model, item_id: str) -> G3026Model:
    return replace(model, sampling_results=_remove_item(model.sampling_results, item_id))


def add_factor(model: G3026Model) -> G3026Model:
    return replace(model, emission_factors=[*model.emission_factors, EmissionFactor()])


def update_factor(model: G3026Model, item_id: str, field: str, value: str) -> G3026Model:
    return replace(model, emission_factors=_update_item(model.emission_factors, item_id, field, value))


def remove_factor(model: G3026Model, item_id: str) -> G3026Model:
    return replace(model, emission_factors=_remove_item(model.emission_factors, item_id))


# -- G-3027 --


def add_finding(model: G3027Model, stage: Stage) -> G3027Model:
    return replace(model, findings=[*model.findings, FindingItem(stage=Stage(stage))])


def update_finding(model: G3027Model, item_id: str, field: str, value) -> G3027Model:
    return replace(model, findings=_update_item(model.findings, item_id, field, value))


def remove_finding(model: G3027Model, item_id: str, confirm: Confirm | None = None) -> G3027Model:
    if confirm is not None and not confirm(REMOVE_FINDING_PROMPT):
        return model
    return replace(model, findings=_remove_item(model.findings, item_id))


def compute_stats(findings: list[FindingItem]) -> G3027Stats:
    return G3027Stats.from_findings(findings)


def with_stats(model: G3027Model) -> G3027Model:
    stats = compute_stats(model.findings)
    if stats == model.stats:
        return model
    return replace(model, stats=stats)


def carry_over(model: G3027Model) -> G3027Model:
    """Copy S1 findings kept open into S2.

    Runs only while the report is at S2. An S1 ``Keep`` item is copied when
    no S2 item has the same description; the copy gets a new id and clears
    the review columns, so repeated runs add nothing.
    """
    if model.basic_info.stage != Stage.S2:
        return model
    s2_descriptions = {f.description for f in model.findings if f.stage == Stage.S2}
    copies = []
    for finding in model.findings:
        if finding.stage != Stage.S1 or finding.result != "Keep":
            continue
        if finding.description in s2_descriptions:
            continue
        copies.append(
            replace(finding, id=new_id(), stage=Stage.S2, result="", review_opinion="", reviewer="")
        )
        s2_descriptions.add(finding.description)
    if not copies:
        return model
    logger.debug("Carried %d open S1 finding(s) into S2", len(copies))
    return replace(model, findings=[*model.findings, *copies])


def set_stage(model: G3027Model, stage: Stage) -> G3027Model:
    return carry_over(update_basic_info(model, "stage", Stage(stage)))


# -- State-level --


def set_active_report(state: AppState, code: ReportCode) -> AppState:
    return replace(state, active_report=ReportCode(code))


def reset_g3022(state: AppState, confirm: Confirm) -> AppState:
    """Restore checklist, emissions and conclusion decisions; names and basic info stay."""
    if not confirm(RESET_PROMPTS[ReportCode.G3022]):
        return state
    model = state.g3022
    conclusion = replace(
        model.conclusion,
        conflict_of_interest="No",
        conflict_detail="",
        summary=FinalConclusion.PASS,
        other_note="",
        memo_correction=False,
        interviews=[],
        pending_items=[],
    )
    model = replace(model, checklist=g3022_seed_checklist(), emissions=default_emissions(), conclusion=conclusion)
    logger.info("Reset G-3022 report data")
    return replace(state, g3022=model)


def reset_g3026(state: AppState, confirm: Confirm) -> AppState:
    if not confirm(RESET_PROMPTS[ReportCode.G3026]):
        return state
    model = replace(
        state.g3026,
        checklist=g3026_seed_checklist(),
        sampling_results=[],
        emission_factors=[],
        other_observation="",
    )
    logger.info("Reset G-3026 report data")
    return replace(state, g3026=model)


def reset_g3027(state: AppState, confirm: Confirm) -> AppState:
    """Clear findings, stats and decisions; signer dates survive."""
    if not confirm(RESET_PROMPTS[ReportCode.G3027]):
        return state
    model = state.g3027
    conclusion = replace(
        model.conclusion,
        s1_result="",
        s1_note="",
        s2_result="",
        protocol_change="No",
        protocol_change_note="",
        reserved_opinion="",
        other_note="",
    )
    model = replace(model, findings=[], stats=G3027Stats(), conclusion=conclusion)
    logger.info("Reset G-3027 report data")
    return replace(state, g3027=model)


RESETS: dict[ReportCode, Callable[[AppState, Confirm], AppState]] = {
    ReportCode.G3022: reset_g3022,
    ReportCode.G3026: reset_g3026,
    ReportCode.G3027: reset_g3027,
}
