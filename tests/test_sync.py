"""Tests for cross-form shared field propagation."""

from __future__ import annotations

import unittest
from datetime import date

from ghgforms.models.common import ReportCode
from ghgforms.orchestrator import reducers
from ghgforms.orchestrator.defaults import default_state
from ghgforms.orchestrator.sync import extract, sync


def _state():
    state = default_state(date(2024, 5, 20))
    g3022 = state.g3022
    g3022 = reducers.update_basic_info(g3022, "client_name", "台灣測試股份有限公司")
    g3022 = reducers.update_basic_info(g3022, "client_address", "台北市中正區")
    g3022 = reducers.update_basic_info(g3022, "report_name", "2023 溫室氣體盤查報告書")
    g3022 = reducers.update_conclusion(g3022, "client_rep_name", "王經理")
    g3022 = reducers.update_conclusion(g3022, "lead_verifier_name", "陳查證員")
    return state.with_report(ReportCode.G3022, g3022)


class SyncTests(unittest.TestCase):
    def test_case_number_flows_from_g3022(self) -> None:
        state = _state()
        edited = state.with_report(
            ReportCode.G3022, reducers.update_basic_info(state.g3022, "case_number", "114-T-0042")
        )
        result = sync(ReportCode.G3022, edited)

        self.assertEqual(result.g3026.basic_info.case_number, "114-T-0042")
        self.assertEqual(result.g3027.basic_info.case_number, "114-T-0042")
        self.assertEqual(result.g3022, edited.g3022)

    def test_g3022_fields_reach_other_reports(self) -> None:
        result = sync(ReportCode.G3022, _state())
        self.assertEqual(result.g3026.basic_info.client_name, "台灣測試股份有限公司")
        self.assertEqual(result.g3026.basic_info.report_info, "2023 溫室氣體盤查報告書")
        self.assertEqual(result.g3026.lead_verifier_name, "陳查證員")
        self.assertEqual(result.g3027.basic_info.lead_verifier, "陳查證員")
        self.assertEqual(result.g3027.basic_info.auditee_rep, "王經理")
        self.assertEqual(result.g3027.basic_info.date, "2024-05-20")

    def test_sync_is_idempotent_for_every_source(self) -> None:
        for source in ReportCode:
            with self.subTest(source=source):
                once = sync(source, _state())
                self.assertEqual(sync(source, once), once)

    def test_g3026_source_writes_document_references(self) -> None:
        state = _state()
        g3026 = reducers.update_basic_info(state.g3026, "inventory_info", "盤查清冊 v2")
        result = sync(ReportCode.G3026, state.with_report(ReportCode.G3026, g3026))

        self.assertEqual(result.g3022.basic_info.inventory_name, "盤查清冊 v2")
        # Client rep is not part of G-3026; it is read back from G-3022
        self.assertEqual(result.g3022.conclusion.client_rep_name, "王經理")
        self.assertEqual(result.g3027.basic_info.auditee_rep, "王經理")

    def test_g3027_source_keeps_g3022_document_references(self) -> None:
        state = _state()
        g3027 = reducers.update_basic_info(state.g3027, "auditee_rep", "李課長")
        result = sync(ReportCode.G3027, state.with_report(ReportCode.G3027, g3027))

        self.assertEqual(result.g3022.conclusion.client_rep_name, "李課長")
        self.assertEqual(result.g3022.basic_info.report_name, "2023 溫室氣體盤查報告書")
        self.assertEqual(result.g3026.basic_info.report_info, "2023 溫室氣體盤查報告書")
        self.assertEqual(result.g3026.basic_info.client_name, "台灣測試股份有限公司")

    def test_missing_g3026_client_name_extracts_empty(self) -> None:
        state = _state()
        g3026 = reducers.update_basic_info(state.g3026, "client_name", None)
        shared = extract(ReportCode.G3026, state.with_report(ReportCode.G3026, g3026))
        self.assertEqual(shared["client_name"], "")

    def test_collections_are_untouched(self) -> None:
        state = _state()
        result = sync(ReportCode.G3026, state)
        self.assertEqual(result.g3022.checklist, state.g3022.checklist)
        self.assertEqual(result.g3026.checklist, state.g3026.checklist)
        self.assertEqual(result.g3027.findings, state.g3027.findings)


if __name__ == "__main__":
    unittest.main()
