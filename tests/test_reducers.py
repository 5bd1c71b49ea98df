"""Tests for the pure edit reducers, resets and G-3027 statistics."""

from __future__ import annotations

import unittest
from datetime import date

from ghgforms.models.common import ComplianceStatus, FinalConclusion, ReportCode, Stage
from ghgforms.models.g3022 import InterviewRecord
from ghgforms.models.g3027 import FindingItem, FindingType, G3027Model
from ghgforms.orchestrator import reducers
from ghgforms.orchestrator.defaults import default_state, g3022_seed_checklist


def _finding(stage: Stage, type_: FindingType, **fields) -> FindingItem:
    return FindingItem(stage=stage, type=type_, **fields)


class StatsTests(unittest.TestCase):
    def test_counts_per_stage(self) -> None:
        stats = reducers.compute_stats(
            [
                _finding(Stage.S1, FindingType.CAR),
                _finding(Stage.S1, FindingType.OBS),
                _finding(Stage.S2, FindingType.FAR),
            ]
        )
        self.assertEqual(
            (stats.s1.non_conformity, stats.s1.observation, stats.s1.suggestion), (1, 1, 0)
        )
        self.assertEqual(
            (stats.s2.non_conformity, stats.s2.observation, stats.s2.suggestion), (0, 0, 1)
        )

    def test_cr_counts_as_observation_and_untyped_is_ignored(self) -> None:
        stats = reducers.compute_stats(
            [_finding(Stage.S1, FindingType.CR), _finding(Stage.S1, FindingType.NONE)]
        )
        self.assertEqual(stats.s1.observation, 1)
        self.assertEqual(stats.s1.non_conformity + stats.s1.suggestion, 0)


class CarryOverTests(unittest.TestCase):
    def _model(self) -> G3027Model:
        model = G3027Model(
            findings=[
                _finding(Stage.S1, FindingType.CAR, description="排放係數版本錯誤", result="Keep",
                         review_opinion="尚未修正", reviewer="陳查證員"),
                _finding(Stage.S1, FindingType.OBS, description="活動數據佐證不足", result="Close"),
            ]
        )
        return model

    def test_advancing_to_s2_copies_kept_findings_once(self) -> None:
        model = reducers.set_stage(self._model(), Stage.S2)
        model = reducers.carry_over(model)

        s2 = model.findings_for(Stage.S2)
        self.assertEqual(len(s2), 1)
        copy = s2[0]
        original = model.findings[0]
        self.assertEqual(copy.description, "排放係數版本錯誤")
        self.assertEqual(copy.type, FindingType.CAR)
        self.assertEqual((copy.result, copy.review_opinion, copy.reviewer), ("", "", ""))
        self.assertNotEqual(copy.id, original.id)

    def test_no_carry_over_at_s1(self) -> None:
        model = self._model()
        self.assertIs(reducers.carry_over(model), model)

    def test_existing_s2_description_blocks_copy(self) -> None:
        model = self._model()
        model = reducers.replace(
            model, findings=[*model.findings, _finding(Stage.S2, FindingType.CAR, description="排放係數版本錯誤")]
        )
        model = reducers.set_stage(model, Stage.S2)
        self.assertEqual(len(model.findings_for(Stage.S2)), 1)


class ItemEditTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = default_state(date(2024, 5, 20))

    def test_toggle_scope(self) -> None:
        model = reducers.toggle_scope(self.state.g3022, "reasonable", "cat3")
        self.assertEqual(model.basic_info.reasonable_scopes, ["cat1", "cat2", "cat3"])
        model = reducers.toggle_scope(model, "reasonable", "cat1")
        self.assertEqual(model.basic_info.reasonable_scopes, ["cat2", "cat3"])

    def test_update_emission_coerces_numbers(self) -> None:
        model = reducers.update_emission(self.state.g3022, "cat1", "12.5")
        self.assertEqual(model.emissions.cat1, 12.5)
        model = reducers.update_emission(model, "cat1", "abc")
        self.assertEqual(model.emissions.cat1, 0)
        model = reducers.update_emission(model, "uncertainty_upper", "5%")
        self.assertEqual(model.emissions.uncertainty_upper, "5%")

    def test_update_checklist_item_by_id(self) -> None:
        model = reducers.update_checklist_item(self.state.g3022, "5.1", "status", "不符合")
        item = next(i for i in model.checklist if i.id == "5.1")
        self.assertEqual(item.status, ComplianceStatus.NON_COMPLIANT)
        model = reducers.set_all_compliant(model)
        self.assertTrue(all(i.status == ComplianceStatus.COMPLIANT for i in model.checklist))

    def test_unknown_field_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            reducers.update_basic_info(self.state.g3022, "no_such_field", "x")

    def test_interview_lifecycle(self) -> None:
        model = reducers.add_interview(self.state.g3022)
        item_id = model.conclusion.interviews[0].id
        model = reducers.update_interview(model, item_id, "topic", "數據管理")
        self.assertEqual(model.conclusion.interviews[0].topic, "數據管理")
        model = reducers.remove_interview(model, item_id)
        self.assertEqual(model.conclusion.interviews, [])

    def test_pending_lifecycle(self) -> None:
        model = reducers.add_pending(self.state.g3022)
        item_id = model.conclusion.pending_items[0].id
        model = reducers.update_pending(model, item_id, "response", "已補件")
        self.assertEqual(model.conclusion.pending_items[0].response, "已補件")
        self.assertEqual(reducers.remove_pending(model, item_id).conclusion.pending_items, [])

    def test_sampling_and_factors(self) -> None:
        model = reducers.add_sampling(self.state.g3026)
        model = reducers.add_factor(model)
        sampling_id = model.sampling_results[0].id
        model = reducers.update_sampling(model, sampling_id, "area", "鍋爐房")
        self.assertEqual(model.sampling_results[0].area, "鍋爐房")
        factor_id = model.emission_factors[0].id
        model = reducers.update_factor(model, factor_id, "source", "環境部係數")
        self.assertEqual(model.emission_factors[0].source, "環境部係數")
        model = reducers.remove_factor(model, model.emission_factors[0].id)
        self.assertEqual(model.emission_factors, [])
        model = reducers.remove_sampling(model, sampling_id)
        self.assertEqual(model.sampling_results, [])
        model = reducers.update_field(model, "other_observation", "無")
        self.assertEqual(model.other_observation, "無")

    def test_remove_finding_respects_confirmation(self) -> None:
        model = reducers.add_finding(self.state.g3027, Stage.S1)
        finding_id = model.findings[0].id
        self.assertIs(reducers.remove_finding(model, finding_id, confirm=lambda _: False), model)
        self.assertEqual(reducers.remove_finding(model, finding_id, confirm=lambda _: True).findings, [])


class ResetTests(unittest.TestCase):
    def setUp(self) -> None:
        state = default_state(date(2024, 5, 20))
        g3022 = reducers.update_emission(state.g3022, "cat1", 100)
        g3022 = reducers.update_conclusion(g3022, "summary", FinalConclusion.PENDING)
        g3022 = reducers.update_conclusion(g3022, "interviews", [InterviewRecord(topic="邊界")])
        g3022 = reducers.update_conclusion(g3022, "verifier_name", "林查證員")
        g3022 = reducers.update_checklist_item(g3022, "5.1", "status", ComplianceStatus.CLARIFY)
        g3027 = reducers.add_finding(state.g3027, Stage.S1)
        g3027 = reducers.update_conclusion(g3027, "s1_result", "AdjustDays")
        g3027 = reducers.update_conclusion(g3027, "auditee_date", "2024-06-01")
        self.state = state.with_report(ReportCode.G3022, g3022).with_report(ReportCode.G3027, g3027)

    def test_declined_reset_returns_same_state(self) -> None:
        prompts = []

        def decline(message: str) -> bool:
            prompts.append(message)
            return False

        for reset in (reducers.reset_g3022, reducers.reset_g3026, reducers.reset_g3027):
            self.assertIs(reset(self.state, decline), self.state)
        self.assertEqual(len(prompts), 3)

    def test_g3022_reset_keeps_names_and_basic_info(self) -> None:
        result = reducers.reset_g3022(self.state, lambda _: True)
        g3022 = result.g3022
        self.assertEqual(g3022.emissions.cat1, 0)
        self.assertEqual(g3022.conclusion.summary, FinalConclusion.PASS)
        self.assertEqual(g3022.conclusion.interviews, [])
        self.assertEqual(g3022.conclusion.verifier_name, "林查證員")
        self.assertEqual(g3022.checklist, g3022_seed_checklist())
        self.assertEqual(g3022.basic_info, self.state.g3022.basic_info)

    def test_g3027_reset_keeps_signer_dates(self) -> None:
        result = reducers.reset_g3027(self.state, lambda _: True)
        g3027 = result.g3027
        self.assertEqual(g3027.findings, [])
        self.assertEqual(g3027.conclusion.s1_result, "")
        self.assertEqual(g3027.conclusion.auditee_date, "2024-06-01")

    def test_g3026_reset_clears_appendices(self) -> None:
        state = self.state.with_report(ReportCode.G3026, reducers.add_sampling(self.state.g3026))
        result = reducers.reset_g3026(state, lambda _: True)
        self.assertEqual(result.g3026.sampling_results, [])
        self.assertEqual(result.g3026.other_observation, "")


if __name__ == "__main__":
    unittest.main()
