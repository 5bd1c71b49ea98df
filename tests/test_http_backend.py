"""Tests for the httpx persistence client against a mocked service."""

from __future__ import annotations

import json
import unittest
from datetime import date

import httpx

from ghgforms.backends.base import PersistenceError, StateBackend
from ghgforms.backends.http import HttpStateBackend
from ghgforms.models.common import ReportCode
from ghgforms.orchestrator.defaults import default_state


def _backend(handler) -> HttpStateBackend:
    return HttpStateBackend(base_url="http://forms.test", timeout=5, transport=httpx.MockTransport(handler))


class HttpStateBackendTests(unittest.IsolatedAsyncioTestCase):
    async def test_satisfies_protocol(self) -> None:
        self.assertIsInstance(_backend(lambda request: httpx.Response(200)), StateBackend)

    async def test_load_validates_saved_payload(self) -> None:
        payload = default_state(date(2024, 5, 20)).to_json_dict()
        payload["reportType"] = "G-3026"
        payload["lastUpdated"] = "2024-05-20T01:02:03.000Z"
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path))
            return httpx.Response(200, json={"success": True, "data": payload})

        state = await _backend(handler).load("default-user")

        self.assertEqual(seen, [("GET", "/api/data/default-user")])
        self.assertEqual(state.active_report, ReportCode.G3026)
        self.assertEqual(state.g3022.basic_info.case_number, "113-T-0001")

    async def test_load_without_saved_data(self) -> None:
        backend = _backend(lambda request: httpx.Response(200, json={"success": True, "data": None}))
        self.assertIsNone(await backend.load("nobody"))

    async def test_save_posts_camel_case_state(self) -> None:
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True, "message": "Data saved successfully"})

        await _backend(handler).save("u1", default_state(date(2024, 5, 20)))

        body = bodies[0]
        self.assertEqual(body["reportType"], "G-3022")
        self.assertEqual(body["g3022"]["basicInfo"]["caseNumber"], "113-T-0001")
        self.assertIn("pendingItems", body["g3022"]["conclusion"])

    async def test_service_failure_raises_persistence_error(self) -> None:
        backend = _backend(
            lambda request: httpx.Response(500, json={"success": False, "error": "Failed to save data"})
        )
        with self.assertRaisesRegex(PersistenceError, "Failed to save data"):
            await backend.save("u1", default_state())

    async def test_non_json_error_raises_http_error(self) -> None:
        backend = _backend(lambda request: httpx.Response(502, text="Bad Gateway"))
        with self.assertRaises(httpx.HTTPError):
            await backend.load("u1")


if __name__ == "__main__":
    unittest.main()
