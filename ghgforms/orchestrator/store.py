"""Application state store with debounced persistence."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from ghgforms.backends.base import StateBackend
from ghgforms.config import settings
from ghgforms.models.common import ReportCode
from ghgforms.models.state import AppState, ReportModel
from ghgforms.orchestrator import reducers
from ghgforms.orchestrator.defaults import default_state
from ghgforms.orchestrator.reducers import Confirm
from ghgforms.orchestrator.sync import sync

logger = logging.getLogger(__name__)


class StateStore:
    """Holds the current ``AppState`` and persists it after edits settle.

    Every report edit is applied by a reducer, G-3027 statistics are
    recomputed, then shared fields are synchronized from the edited report.
    Saves are trailing-edge debounced: each change cancels the pending save
    and schedules a new one ``debounce`` seconds later.
    """

    def __init__(
        self,
        backend: StateBackend,
        user_id: str | None = None,
        debounce: float | None = None,
        initial: AppState | None = None,
    ) -> None:
        self.backend = backend
        self.user_id = user_id or settings.default_user_id
        self.debounce = debounce if debounce is not None else settings.save_debounce_seconds
        self._state = initial if initial is not None else default_state()
        self._hydrated = False
        self._save_task: asyncio.Task | None = None

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def save_pending(self) -> bool:
        return self._save_task is not None and not self._save_task.done()

    async def hydrate(self) -> bool:
        """Load saved state once. Returns True when state was replaced.

        G-3027 statistics are recounted from the loaded findings.
        """
        if self._hydrated:
            return False
        self._hydrated = True
        try:
            loaded = await self.backend.load(self.user_id)
        except Exception:
            logger.exception("Failed to load data for user %s; keeping defaults", self.user_id)
            return False
        if loaded is None:
            return False
        self._state = loaded.with_report(ReportCode.G3027, reducers.with_stats(loaded.g3027))
        logger.info("Loaded saved data for user %s", self.user_id)
        return True

    # -- Edits --

    def edit(self, code: ReportCode, reducer: Callable[..., ReportModel], *args, **kwargs) -> AppState:
        """Apply ``reducer`` to one report, then synchronize shared fields."""
        code = ReportCode(code)
        model = reducer(self._state.report(code), *args, **kwargs)
        if code == ReportCode.G3027:
            model = reducers.with_stats(model)
        state = sync(code, self._state.with_report(code, model))
        return self._commit(state)

    def set_active_report(self, code: ReportCode) -> AppState:
        return self._commit(reducers.set_active_report(self._state, code))

    def reset(self, code: ReportCode, confirm: Confirm) -> AppState:
        return self._commit(reducers.RESETS[ReportCode(code)](self._state, confirm))

    def _commit(self, state: AppState) -> AppState:
        if state is self._state:
            return state
        self._state = state
        self._schedule_save()
        return state

    # -- Persistence --

    def _schedule_save(self) -> None:
        if self._save_task is not None:
            self._save_task.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (synchronous use); the caller saves with flush()
            self._save_task = None
            return
        self._save_task = loop.create_task(self._save_later())

    async def _save_later(self) -> None:
        await asyncio.sleep(self.debounce)
        await self._save(self._state)

    async def _save(self, state: AppState) -> None:
        try:
            await self.backend.save(self.user_id, state)
        except Exception:
            logger.exception("Auto-save failed for user %s", self.user_id)
        else:
            logger.info("Auto-saved data for user %s", self.user_id)

    async def flush(self) -> None:
        """Cancel any pending save and write the current state now."""
        await self._cancel_pending()
        await self._save(self._state)

    async def close(self) -> None:
        """Drop a pending save without writing it."""
        await self._cancel_pending()

    async def _cancel_pending(self) -> None:
        task, self._save_task = self._save_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
