"""Cross-form synchronizer — propagates shared fields from the edited report.

The three reports share a small tuple of fields (case number, client,
signers, visit date and document references). Whichever report was just
edited is the source of truth; its values are copied into the other two.
Both directions are declared as tables of attribute paths rooted at
``AppState`` so the mapping can be reviewed at a glance.
"""

from __future__ import annotations

from pydantic import BaseModel

from ghgforms.models.common import ReportCode
from ghgforms.models.state import AppState

Path = tuple[str, ...]

# Where each shared field is read from, per source report
EXTRACT: dict[ReportCode, dict[str, Path]] = {
    ReportCode.G3022: {
        "case_number": ("g3022", "basic_info", "case_number"),
        "client_name": ("g3022", "basic_info", "client_name"),
        "client_address": ("g3022", "basic_info", "client_address"),
        "lead_verifier": ("g3022", "conclusion", "lead_verifier_name"),
        "client_rep": ("g3022", "conclusion", "client_rep_name"),
        "visit_date": ("g3022", "basic_info", "visit_date"),
        "doc_report": ("g3022", "basic_info", "report_name"),
        "doc_inventory": ("g3022", "basic_info", "inventory_name"),
        "doc_procedure": ("g3022", "basic_info", "procedure_name"),
    },
    ReportCode.G3026: {
        "case_number": ("g3026", "basic_info", "case_number"),
        "client_name": ("g3026", "basic_info", "client_name"),
        "client_address": ("g3026", "basic_info", "client_address"),
        "lead_verifier": ("g3026", "lead_verifier_name"),
        "client_rep": ("g3022", "conclusion", "client_rep_name"),
        "visit_date": ("g3026", "basic_info", "check_date"),
        "doc_report": ("g3026", "basic_info", "report_info"),
        "doc_inventory": ("g3026", "basic_info", "inventory_info"),
        "doc_procedure": ("g3026", "basic_info", "power_factor_info"),
    },
    ReportCode.G3027: {
        "case_number": ("g3027", "basic_info", "case_number"),
        "client_name": ("g3022", "basic_info", "client_name"),
        "client_address": ("g3022", "basic_info", "client_address"),
        "lead_verifier": ("g3027", "basic_info", "lead_verifier"),
        "client_rep": ("g3027", "basic_info", "auditee_rep"),
        "visit_date": ("g3027", "basic_info", "date"),
        "doc_report": ("g3022", "basic_info", "report_name"),
        "doc_inventory": ("g3022", "basic_info", "inventory_name"),
        "doc_procedure": ("g3022", "basic_info", "procedure_name"),
    },
}

_G3022_CORE: dict[str, Path] = {
    "case_number": ("g3022", "basic_info", "case_number"),
    "client_name": ("g3022", "basic_info", "client_name"),
    "client_address": ("g3022", "basic_info", "client_address"),
    "lead_verifier": ("g3022", "conclusion", "lead_verifier_name"),
    "client_rep": ("g3022", "conclusion", "client_rep_name"),
    "visit_date": ("g3022", "basic_info", "visit_date"),
}

_G3022_DOCS: dict[str, Path] = {
    "doc_report": ("g3022", "basic_info", "report_name"),
    "doc_inventory": ("g3022", "basic_info", "inventory_name"),
    "doc_procedure": ("g3022", "basic_info", "procedure_name"),
}

_G3026_TARGETS: dict[str, Path] = {
    "case_number": ("g3026", "basic_info", "case_number"),
    "client_name": ("g3026", "basic_info", "client_name"),
    "client_address": ("g3026", "basic_info", "client_address"),
    "lead_verifier": ("g3026", "lead_verifier_name"),
    "visit_date": ("g3026", "basic_info", "check_date"),
    "doc_report": ("g3026", "basic_info", "report_info"),
    "doc_inventory": ("g3026", "basic_info", "inventory_info"),
    "doc_procedure": ("g3026", "basic_info", "power_factor_info"),
}

_G3027_TARGETS: dict[str, Path] = {
    "case_number": ("g3027", "basic_info", "case_number"),
    "lead_verifier": ("g3027", "basic_info", "lead_verifier"),
    "client_rep": ("g3027", "basic_info", "auditee_rep"),
    "visit_date": ("g3027", "basic_info", "date"),
}


def inject_targets(source: ReportCode) -> dict[str, list[Path]]:
    """Destination paths written when ``source`` was edited.

    The source report itself is never written. G-3022 document references
    follow G-3026 only; G-3027 carries no document fields of its own.
    """
    source = ReportCode(source)
    targets: dict[str, list[Path]] = {}

    def add(table: dict[str, Path]) -> None:
        for name, path in table.items():
            targets.setdefault(name, []).append(path)

    if source != ReportCode.G3022:
        add(_G3022_CORE)
        if source == ReportCode.G3026:
            add(_G3022_DOCS)
    if source != ReportCode.G3026:
        add(_G3026_TARGETS)
    if source != ReportCode.G3027:
        add(_G3027_TARGETS)
    return targets


def extract(source: ReportCode, state: AppState) -> dict[str, str]:
    """Read the shared tuple as seen from ``source``."""
    return {
        name: _get(state, path) or ""
        for name, path in EXTRACT[ReportCode(source)].items()
    }


def sync(source: ReportCode, state: AppState) -> AppState:
    """Copy shared fields from ``source`` into the other two reports.

    Pure: returns a new state and leaves collections (checklists, findings,
    interviews) untouched. Running it twice for the same source is a no-op.
    """
    shared = extract(source, state)
    result = state
    for name, paths in inject_targets(source).items():
        for path in paths:
            result = _set(result, path, shared[name])
    return result


def _get(model: BaseModel, path: Path):
    value = model
    for attr in path:
        value = getattr(value, attr)
    return value


def _set(model: BaseModel, path: Path, value) -> BaseModel:
    head, *rest = path
    if not rest:
        if getattr(model, head) == value:
            return model
        return model.model_copy(update={head: value})
    child = getattr(model, head)
    updated = _set(child, tuple(rest), value)
    if updated is child:
        return model
    return model.model_copy(update={head: updated})
