"""Tests for the persistence and export HTTP service."""

from __future__ import annotations

import unittest
from datetime import date
from io import BytesIO
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

import docx
from fastapi.testclient import TestClient

from ghgforms import main
from ghgforms.db.database import Database
from ghgforms.orchestrator.defaults import default_state


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = TemporaryDirectory()
        self.db = Database(str(Path(self._tmp.name) / "forms.db"))
        self._patch = patch.object(main, "db", self.db)
        self._patch.start()
        self.client = TestClient(main.app)
        self.client.__enter__()

    def tearDown(self) -> None:
        self.client.__exit__(None, None, None)
        self._patch.stop()
        self._tmp.cleanup()


class DataEndpointTests(ApiTestCase):
    def test_health(self) -> None:
        body = self.client.get("/api/health").json()
        self.assertEqual(body["status"], "OK")
        self.assertTrue(body["timestamp"].endswith("Z"))

    def test_missing_user_returns_null(self) -> None:
        response = self.client.get("/api/data/nobody")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "data": None})

    def test_save_then_load_round_trip(self) -> None:
        payload = {"reportType": "G-3027", "anything": {"nested": [1, 2, 3]}}
        response = self.client.post("/api/data/u1", json=payload)
        self.assertEqual(response.json(), {"success": True, "message": "Data saved successfully"})

        data = self.client.get("/api/data/u1").json()["data"]
        self.assertEqual(data["reportType"], "G-3027")
        self.assertEqual(data["anything"], {"nested": [1, 2, 3]})
        self.assertIn("lastUpdated", data)

    def test_last_writer_wins(self) -> None:
        self.client.post("/api/data/u1", json={"version": 1})
        self.client.post("/api/data/u1", json={"version": 2})
        self.assertEqual(self.client.get("/api/data/u1").json()["data"]["version"], 2)

    def test_read_failure_returns_500(self) -> None:
        with patch.object(self.db, "get_user_data", side_effect=RuntimeError("disk")):
            with self.assertLogs("ghgforms.main", level="ERROR"):
                response = self.client.get("/api/data/u1")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "error": "Failed to read data"})

    def test_save_failure_returns_500(self) -> None:
        with patch.object(self.db, "save_user_data", side_effect=RuntimeError("disk")):
            with self.assertLogs("ghgforms.main", level="ERROR"):
                response = self.client.post("/api/data/u1", json={"a": 1})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "error": "Failed to save data"})


class ExportEndpointTests(ApiTestCase):
    def _state(self) -> dict:
        return default_state(date(2024, 5, 20)).to_json_dict()

    def test_export_g3022(self) -> None:
        response = self.client.post("/api/export/G-3022", json=self._state())
        self.assertEqual(response.status_code, 200)
        self.assertIn("G-3022_Report_113-T-0001.docx", response.headers["content-disposition"])
        document = docx.Document(BytesIO(response.content))
        self.assertEqual(len(document.sections), 2)

    def test_export_g3027_filename_has_stage(self) -> None:
        response = self.client.post("/api/export/G-3027", json=self._state())
        self.assertEqual(response.status_code, 200)
        self.assertIn("G-3027_Report_113-T-0001_S1.docx", response.headers["content-disposition"])

    def test_unknown_report_is_404(self) -> None:
        response = self.client.post("/api/export/G-9999", json=self._state())
        self.assertEqual(response.status_code, 404)

    def test_build_failure_is_500(self) -> None:
        with patch("ghgforms.orchestrator.export.build_report", side_effect=ValueError("bad layout")):
            response = self.client.post("/api/export/G-3026", json=self._state())
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], "匯出失敗，請檢查資料是否完整")


if __name__ == "__main__":
    unittest.main()
