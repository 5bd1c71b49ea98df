"""HTTP persistence backend — talks to the GHG forms data service via httpx."""

from __future__ import annotations

import logging

import httpx

from ghgforms.backends.base import PersistenceError
from ghgforms.config import settings
from ghgforms.models.state import AppState

logger = logging.getLogger(__name__)


class HttpStateBackend:
    """State backend using the ``/api/data/{userId}`` endpoints."""

    name: str = "http"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.persistence_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def load(self, user_id: str) -> AppState | None:
        async with self._client() as client:
            response = await client.get(f"/api/data/{user_id}")
            body = _json_body(response)

        if not body.get("success"):
            raise PersistenceError(body.get("error") or f"Load failed with HTTP {response.status_code}")

        data = body.get("data")
        if data is None:
            logger.info("No saved data for user %s", user_id)
            return None
        return AppState.model_validate(data)

    async def save(self, user_id: str, state: AppState) -> None:
        async with self._client() as client:
            response = await client.post(f"/api/data/{user_id}", json=state.to_json_dict())
            body = _json_body(response)

        if not body.get("success"):
            raise PersistenceError(body.get("error") or f"Save failed with HTTP {response.status_code}")
        logger.debug("Saved data for user %s", user_id)


def _json_body(response: httpx.Response) -> dict:
    """Decode the service envelope; error responses still carry one."""
    try:
        body = response.json()
    except ValueError:
        response.raise_for_status()
        raise PersistenceError(f"Unexpected response body (HTTP {response.status_code})")
    if not isinstance(body, dict):
        raise PersistenceError("Unexpected response body")
    return body
