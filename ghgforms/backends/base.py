"""Base protocol for all state persistence backends."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ghgforms.models.state import AppState


class PersistenceError(Exception):
    """The persistence service answered but reported a failure."""


@runtime_checkable
class StateBackend(Protocol):
    """Interface that all persistence backends must implement."""

    name: str

    async def load(self, user_id: str) -> AppState | None:
        """Return the saved state for ``user_id``, or None when nothing is stored."""
        ...

    async def save(self, user_id: str, state: AppState) -> None:
        """Store ``state`` for ``user_id``, replacing any previous copy."""
        ...
