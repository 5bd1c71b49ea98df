"""Tests for the state store: edits, hydration and debounced saves."""

from __future__ import annotations

import asyncio
import unittest
from datetime import date

from ghgforms.models.common import ReportCode, Stage
from ghgforms.models.g3027 import FindingType
from ghgforms.models.state import AppState
from ghgforms.orchestrator import reducers
from ghgforms.orchestrator.defaults import default_state
from ghgforms.orchestrator.store import StateStore

DEBOUNCE = 0.02


class MemoryBackend:
    name = "memory"

    def __init__(self, stored: AppState | None = None, fail_load: bool = False, fail_save: bool = False) -> None:
        self.stored = stored
        self.fail_load = fail_load
        self.fail_save = fail_save
        self.saves: list[tuple[str, AppState]] = []

    async def load(self, user_id: str) -> AppState | None:
        if self.fail_load:
            raise ConnectionError("service unavailable")
        return self.stored

    async def save(self, user_id: str, state: AppState) -> None:
        if self.fail_save:
            raise ConnectionError("service unavailable")
        self.saves.append((user_id, state))


class StateStoreTests(unittest.IsolatedAsyncioTestCase):
    def _store(self, backend: MemoryBackend) -> StateStore:
        return StateStore(backend, user_id="tester", debounce=DEBOUNCE, initial=default_state(date(2024, 5, 20)))

    async def test_edits_are_synchronized(self) -> None:
        store = self._store(MemoryBackend())
        state = store.edit(ReportCode.G3022, reducers.update_basic_info, "case_number", "114-T-0099")
        self.assertEqual(state.g3027.basic_info.case_number, "114-T-0099")
        self.assertEqual(store.state.g3026.basic_info.case_number, "114-T-0099")
        await store.close()

    async def test_g3027_stats_follow_findings(self) -> None:
        store = self._store(MemoryBackend())
        store.edit(ReportCode.G3027, reducers.add_finding, Stage.S1)
        finding_id = store.state.g3027.findings[0].id
        store.edit(ReportCode.G3027, reducers.update_finding, finding_id, "type", FindingType.CAR)
        self.assertEqual(store.state.g3027.stats.s1.non_conformity, 1)
        await store.close()

    async def test_rapid_edits_save_once(self) -> None:
        backend = MemoryBackend()
        store = self._store(backend)
        for name in ("甲公司", "乙公司", "丙公司"):
            store.edit(ReportCode.G3022, reducers.update_basic_info, "client_name", name)
        self.assertTrue(store.save_pending)

        await asyncio.sleep(DEBOUNCE * 5)

        self.assertEqual(len(backend.saves), 1)
        user_id, saved = backend.saves[0]
        self.assertEqual(user_id, "tester")
        self.assertEqual(saved.g3022.basic_info.client_name, "丙公司")

    async def test_close_drops_pending_save(self) -> None:
        backend = MemoryBackend()
        store = self._store(backend)
        store.set_active_report(ReportCode.G3026)
        await store.close()
        await asyncio.sleep(DEBOUNCE * 3)
        self.assertEqual(backend.saves, [])
        self.assertFalse(store.save_pending)

    async def test_flush_saves_immediately(self) -> None:
        backend = MemoryBackend()
        store = self._store(backend)
        store.set_active_report(ReportCode.G3027)
        await store.flush()
        self.assertEqual(len(backend.saves), 1)
        self.assertEqual(backend.saves[0][1].active_report, ReportCode.G3027)

    async def test_save_failure_is_logged(self) -> None:
        store = self._store(MemoryBackend(fail_save=True))
        with self.assertLogs("ghgforms.orchestrator.store", level="ERROR"):
            await store.flush()

    async def test_hydrate_failure_keeps_defaults(self) -> None:
        store = self._store(MemoryBackend(fail_load=True))
        before = store.state
        with self.assertLogs("ghgforms.orchestrator.store", level="ERROR"):
            self.assertFalse(await store.hydrate())
        self.assertIs(store.state, before)

    async def test_hydrate_replaces_state_once(self) -> None:
        saved = default_state(date(2023, 1, 1))
        backend = MemoryBackend(stored=saved)
        store = self._store(backend)

        self.assertTrue(await store.hydrate())
        self.assertEqual(store.state, saved)

        backend.stored = default_state(date(2022, 1, 1))
        self.assertFalse(await store.hydrate())
        self.assertEqual(store.state, saved)
        self.assertEqual(backend.saves, [])

    async def test_hydrate_recounts_g3027_stats(self) -> None:
        saved = default_state(date(2023, 1, 1))
        model = reducers.add_finding(saved.g3027, Stage.S2)
        model = reducers.update_finding(model, model.findings[0].id, "type", FindingType.CR)
        store = self._store(MemoryBackend(stored=saved.with_report(ReportCode.G3027, model)))

        self.assertTrue(await store.hydrate())
        self.assertEqual(store.state.g3027.stats.s2.observation, 1)
        self.assertFalse(store.save_pending)

    async def test_declined_reset_schedules_nothing(self) -> None:
        store = self._store(MemoryBackend())
        before = store.state
        self.assertIs(store.reset(ReportCode.G3022, lambda _: False), before)
        self.assertFalse(store.save_pending)


if __name__ == "__main__":
    unittest.main()
