"""Formatting primitives shared by every report builder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ghgforms.models.common import ChecklistItem, ComplianceStatus
from ghgforms.models.layout import Run

# Republic of China calendar: year 1 == 1912
ROC_EPOCH_OFFSET = 1911

BLANK_YEAR = "    "
BLANK_MONTH = "  "
BLANK_DAY = "  "

SCOPE_LABELS = {
    "cat1": "類別1",
    "cat2": "類別2",
    "cat3": "類別3",
    "cat4": "類別4",
    "cat5": "類別5",
    "cat6": "類別6",
}

CO2E = "CO2e"


@dataclass(frozen=True)
class RocDate:
    y: str
    m: str
    d: str

    @property
    def is_blank(self) -> bool:
        return self.y == BLANK_YEAR


BLANK_DATE = RocDate(BLANK_YEAR, BLANK_MONTH, BLANK_DAY)


def to_roc_date(value: str | None) -> RocDate:
    """Convert an ISO date (or datetime) string to ROC year/month/day parts.

    Anything unparsable yields blank placeholders instead of raising.
    """
    if not value:
        return BLANK_DATE
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return BLANK_DATE
    return RocDate(
        y=str(parsed.year - ROC_EPOCH_OFFSET),
        m=f"{parsed.month:02d}",
        d=f"{parsed.day:02d}",
    )


def format_number(value: str | float | int | None) -> str:
    """Render with thousands separators and 2 to 4 fraction digits."""
    if not value:
        return "0"
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        return ""
    if not number.is_finite():
        return ""
    rounded = number.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
    text = f"{rounded:,.4f}"
    # Trim to at least two fraction digits
    whole, _, fraction = text.partition(".")
    fraction = fraction.rstrip("0").ljust(2, "0")
    return f"{whole}.{fraction}"


def emission_total(values: list[float]) -> float:
    return sum(v or 0 for v in values)


def get_percent(value: float | None, total: float) -> str:
    """Share of ``total`` as a percentage string; zero total gives ``0.00``."""
    if not total:
        return "0.00"
    return f"{((value or 0) / total) * 100:.2f}"


def scopes_text(scopes: list[str] | None) -> str:
    if not scopes:
        return ""
    return "、".join(SCOPE_LABELS.get(s, s) for s in scopes)


# --- Glyphs ---

# Glyph pairs (checked, unchecked) used by each form's checkboxes
CHECKBOX_FILLED = ("■", "□")
CHECKBOX_TICKED = ("☑", "□")


def checkbox_glyph(checked: bool, style: tuple[str, str] = CHECKBOX_TICKED) -> str:
    return style[0] if checked else style[1]


# Status legends. G-3022 marks CLARIFY with X and everything that is
# neither compliant nor clarify with a dash; G-3026 treats CLARIFY as a
# nonconformity in both its summary of G-3022 and its own checklist.
G3022_STATUS_GLYPHS: dict[ComplianceStatus, str] = {
    ComplianceStatus.COMPLIANT: "○",
    ComplianceStatus.CLARIFY: "X",
    ComplianceStatus.NON_COMPLIANT: "―",
    ComplianceStatus.NA: "―",
}

G3026_SUMMARY_STATUS_GLYPHS: dict[ComplianceStatus, str] = {
    ComplianceStatus.COMPLIANT: "O",
    ComplianceStatus.NON_COMPLIANT: "X",
    ComplianceStatus.CLARIFY: "X",
    ComplianceStatus.NA: "―",
}

G3026_STATUS_GLYPHS: dict[ComplianceStatus, str] = dict(G3026_SUMMARY_STATUS_GLYPHS)

DEFAULT_STATUS_GLYPH = "―"


def status_glyph(status: ComplianceStatus, legend: dict[ComplianceStatus, str]) -> str:
    return legend.get(status, DEFAULT_STATUS_GLYPH)


# --- Runs ---


def text_run(text: str | None, size: float = 12, bold: bool = False, **kwargs) -> Run:
    return Run(text=text or "", size=size, bold=bold, **kwargs)


def co2e_runs(prefix: str, suffix: str = "", size: float = 12, bold: bool = False) -> list[Run]:
    """Runs spelling ``prefix CO₂e suffix`` with a subscript 2."""
    runs = [text_run(prefix, size, bold)] if prefix else []
    runs += [
        text_run("CO", size, bold),
        text_run("2", size, bold, subscript=True),
        text_run("e", size, bold),
    ]
    if suffix:
        runs.append(text_run(suffix, size, bold))
    return runs


def split_co2e(text: str, size: float = 12, bold: bool = False) -> list[Run]:
    """Split free text on ``CO2e`` so every occurrence gets a subscript 2."""
    parts = text.split(CO2E)
    if len(parts) == 1:
        return [text_run(text, size, bold)]
    runs: list[Run] = []
    for i, part in enumerate(parts):
        if part:
            runs.append(text_run(part, size, bold))
        if i < len(parts) - 1:
            runs += co2e_runs("", size=size, bold=bold)
    return runs


def display_name(report_code: str, case_number: str | None, stage: str | None = None) -> str:
    """Download filename stem for an exported report."""
    stem = f"{report_code}_Report_{case_number or 'Draft'}"
    if stage:
        stem = f"{stem}_{stage}"
    return stem


# --- Checklist grouping ---


@dataclass(frozen=True)
class ChecklistGroup:
    key: str
    header: ChecklistItem | None
    children: tuple[ChecklistItem, ...]


def group_checklist(items: list[ChecklistItem]) -> list[ChecklistGroup]:
    """Group a flat checklist by the leading id segment, keeping source order.

    ``"10.1"`` belongs to group ``"10"``, never to ``"1"``.
    """
    headers: dict[str, ChecklistItem] = {}
    children: dict[str, list[ChecklistItem]] = {}
    for item in items:
        key = item.group_key
        children.setdefault(key, [])
        if item.is_header:
            headers.setdefault(key, item)
        else:
            children[key].append(item)
    return [ChecklistGroup(key, headers.get(key), tuple(kids)) for key, kids in children.items()]
