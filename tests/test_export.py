"""Tests for the export service: filenames, builder dispatch and failures."""

from __future__ import annotations

import unittest
from datetime import date
from unittest.mock import patch

from ghgforms.models.common import ReportCode, Stage
from ghgforms.orchestrator import reducers
from ghgforms.orchestrator.defaults import default_state
from ghgforms.orchestrator.export import EXPORT_FAILED_MESSAGE, ExportService, export_filename


class ExportFilenameTests(unittest.TestCase):
    def test_patterns(self) -> None:
        state = default_state(date(2024, 5, 20))
        self.assertEqual(export_filename(state, ReportCode.G3022), "G-3022_Report_113-T-0001.docx")
        self.assertEqual(export_filename(state, ReportCode.G3027), "G-3027_Report_113-T-0001_S1.docx")

    def test_blank_case_number_is_draft(self) -> None:
        state = default_state()
        g3026 = reducers.update_basic_info(state.g3026, "case_number", "")
        g3027 = reducers.set_stage(reducers.update_basic_info(state.g3027, "case_number", ""), Stage.S2)
        state = state.with_report(ReportCode.G3026, g3026).with_report(ReportCode.G3027, g3027)
        self.assertEqual(export_filename(state, ReportCode.G3026), "G-3026_Report_Draft.docx")
        self.assertEqual(export_filename(state, ReportCode.G3027), "G-3027_Report_Draft_S2.docx")


class ExportServiceTests(unittest.IsolatedAsyncioTestCase):
    async def test_successful_export(self) -> None:
        service = ExportService()
        result = await service.export(default_state(date(2024, 5, 20)), ReportCode.G3026)
        self.assertTrue(result.success)
        self.assertEqual(result.filename, "G-3026_Report_113-T-0001.docx")
        self.assertTrue(result.content.startswith(b"PK"))
        self.assertFalse(service.busy)

    async def test_failure_is_reported_and_busy_cleared(self) -> None:
        service = ExportService()
        state = default_state()
        with patch("ghgforms.orchestrator.export.build_report", side_effect=RuntimeError("boom")):
            with self.assertLogs("ghgforms.orchestrator.export", level="ERROR"):
                result = await service.export(state, ReportCode.G3022)
        self.assertFalse(result.success)
        self.assertEqual(result.error, EXPORT_FAILED_MESSAGE)
        self.assertEqual(result.content, b"")
        self.assertFalse(service.busy)


if __name__ == "__main__":
    unittest.main()
