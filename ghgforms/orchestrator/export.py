"""Export service: picks the report builder and names the download."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from ghgforms.generators import g3022, g3026, g3027
from ghgforms.generators.formatting import display_name
from ghgforms.models.common import ReportCode
from ghgforms.models.state import AppState

logger = logging.getLogger(__name__)

EXPORT_FAILED_MESSAGE = "匯出失敗，請檢查資料是否完整"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass
class ExportResult:
    """Outcome of one export attempt."""

    success: bool
    filename: str = ""
    content: bytes = b""
    error: str = ""


def export_filename(state: AppState, code: ReportCode) -> str:
    code = ReportCode(code)
    basic = state.report(code).basic_info
    stage = basic.stage.value if code == ReportCode.G3027 else None
    return f"{display_name(code.value, basic.case_number, stage)}.docx"


def build_report(state: AppState, code: ReportCode) -> bytes:
    """Render one report to DOCX bytes. G-3026 also reads the G-3022 checklist."""
    code = ReportCode(code)
    if code == ReportCode.G3022:
        return g3022.build(state.g3022)
    if code == ReportCode.G3026:
        return g3026.build(state.g3026, state.g3022)
    return g3027.build(state.g3027)


class ExportService:
    """Runs exports one at a time and reports failures as a message."""

    def __init__(self) -> None:
        self.busy = False

    async def export(self, state: AppState, code: ReportCode) -> ExportResult:
        code = ReportCode(code)
        self.busy = True
        try:
            content = await asyncio.to_thread(build_report, state, code)
            filename = export_filename(state, code)
            logger.info("Exported %s (%d bytes)", filename, len(content))
            return ExportResult(success=True, filename=filename, content=content)
        except Exception:
            logger.exception("Export failed for %s", code.value)
            return ExportResult(success=False, error=EXPORT_FAILED_MESSAGE)
        finally:
            self.busy = False
