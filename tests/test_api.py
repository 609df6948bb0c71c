import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fastapi.testclient import TestClient

from api.main import app
from api.routers.gaps import POLICY_ENV_VAR, policy_from_path
from privacy_gaps import generate_daily_gap_schedule
from privacy_gaps.utils import iso_z


class ScheduleApiTest(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch.dict(os.environ, {}, clear=False)
        patcher.start()
        self.addCleanup(patcher.stop)
        os.environ.pop(POLICY_ENV_VAR, None)
        self.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_schedule_matches_library(self):
        response = self.client.get("/api/subjects/api-child/schedules/2025-12-16")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        expected = generate_daily_gap_schedule("api-child", "2025-12-16")
        self.assertEqual(body["subjectId"], "api-child")
        self.assertEqual(body["date"], "2025-12-16")
        self.assertEqual(
            [(g["startTime"], g["endTime"], g["durationMs"]) for g in body["gaps"]],
            [(iso_z(g.start_time), iso_z(g.end_time), g.duration_ms) for g in expected.gaps],
        )

    def test_invalid_date(self):
        response = self.client.get("/api/subjects/api-child/schedules/12-16-2025")
        self.assertEqual(response.status_code, 400)

    def test_status_inside_gap(self):
        gap = generate_daily_gap_schedule("api-child", "2025-12-16").gaps[0]
        response = self.client.get(
            "/api/subjects/api-child/status",
            params={"at": iso_z(gap.start_time)},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["enabled"])
        self.assertTrue(body["inGap"])
        self.assertEqual(body["currentGap"]["startTime"], iso_z(gap.start_time))
        self.assertIsNotNone(body["msUntilNextGap"])

    def test_status_at_gap_end(self):
        schedule = generate_daily_gap_schedule("api-child", "2025-12-16")
        last = schedule.gaps[-1]
        body = self.client.get(
            "/api/subjects/api-child/status",
            params={"at": iso_z(last.end_time)},
        ).json()
        self.assertFalse(body["inGap"])
        self.assertIsNone(body["currentGap"])
        self.assertIsNone(body["msUntilNextGap"])

    def test_status_invalid_timestamp(self):
        response = self.client.get("/api/subjects/api-child/status", params={"at": "yesterday"})
        self.assertEqual(response.status_code, 400)

    def test_generate_with_inline_config(self):
        response = self.client.post(
            "/api/schedules/generate",
            json={
                "subject_id": "child-1",
                "date": "2024-03-01",
                "config": {
                    "waking_hours_start": 6,
                    "waking_hours_end": 22,
                    "min_daily_gaps": 2,
                    "max_daily_gaps": 2,
                    "min_gap_duration_ms": 300000,
                    "max_gap_duration_ms": 900000,
                    "min_gap_spacing_ms": 1800000,
                },
            },
        )
        self.assertEqual(response.status_code, 200)
        gaps = response.json()["gaps"]
        self.assertEqual(
            [g["startTime"] for g in gaps],
            ["2024-03-01T09:30:00.000Z", "2024-03-01T14:21:00.000Z"],
        )

    def test_generate_invalid_config(self):
        response = self.client.post(
            "/api/schedules/generate",
            json={"subject_id": "child-1", "date": "2024-03-01", "config": {"min_daily_gaps": 5, "max_daily_gaps": 2}},
        )
        self.assertEqual(response.status_code, 422)
        self.assertIn("min_daily_gaps", response.json()["detail"])

    def test_generate_rejects_coerced_values(self):
        for config in ({"enabled": "yes"}, {"min_daily_gaps": "3"}, {"max_daily_gaps": 4.0}, {"min_gap_spacing_ms": True}):
            with self.subTest(config=config):
                response = self.client.post(
                    "/api/schedules/generate",
                    json={"subject_id": "child-1", "date": "2024-03-01", "config": config},
                )
                self.assertEqual(response.status_code, 422)

    def test_generate_accepts_camel_case(self):
        response = self.client.post(
            "/api/schedules/generate",
            json={"subjectId": "child-1", "date": "2024-03-01", "config": {"minDailyGaps": 3, "maxDailyGaps": 3}},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["gaps"]), 3)

    def test_schedule_wire_format_matches_to_dict(self):
        body = self.client.get("/api/subjects/api-child/schedules/2025-12-16").json()
        expected = generate_daily_gap_schedule("api-child", "2025-12-16").to_dict()
        self.assertEqual(set(body), set(expected))
        self.assertEqual(body["gaps"], expected["gaps"])

    def test_generate_requires_subject(self):
        response = self.client.post("/api/schedules/generate", json={"subject_id": "", "date": "2024-03-01"})
        self.assertEqual(response.status_code, 422)


class PolicyApiTest(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.policy_path = Path(tmp.name) / "policy.yaml"
        self.policy_path.write_text(
            "defaults:\n  minDailyGaps: 3\n  maxDailyGaps: 3\nsubjects:\n  child-off:\n    enabled: false\n",
            encoding="utf-8",
        )
        patcher = mock.patch.dict(os.environ, {POLICY_ENV_VAR: str(self.policy_path)})
        patcher.start()
        self.addCleanup(patcher.stop)
        policy_from_path.cache_clear()
        self.addCleanup(policy_from_path.cache_clear)
        self.client = TestClient(app)

    def test_policy_applies_to_schedules(self):
        body = self.client.get("/api/subjects/anyone/schedules/2025-12-16").json()
        self.assertEqual(len(body["gaps"]), 3)

    def test_subject_config(self):
        body = self.client.get("/api/subjects/child-off/config").json()
        self.assertFalse(body["enabled"])
        self.assertEqual(body["minDailyGaps"], 3)

    def test_disabled_subject_never_in_gap(self):
        body = self.client.get(
            "/api/subjects/child-off/status",
            params={"at": "2025-12-16T12:00:00Z"},
        ).json()
        self.assertFalse(body["enabled"])
        self.assertFalse(body["inGap"])
        self.assertEqual(body["date"], "2025-12-16")

    def test_policy_file_read_once(self):
        first = self.client.get("/api/subjects/anyone/schedules/2025-12-16").json()
        self.policy_path.write_text("defaults:\n  minDailyGaps: 2\n  maxDailyGaps: 2\n", encoding="utf-8")
        second = self.client.get("/api/subjects/anyone/schedules/2025-12-16").json()
        self.assertEqual(second, first)
        self.assertEqual(policy_from_path.cache_info().misses, 1)

    def test_broken_policy_is_server_error(self):
        self.policy_path.write_text("defaults:\n  minDailyGaps: 9\n", encoding="utf-8")
        response = self.client.get("/api/subjects/anyone/schedules/2025-12-16")
        self.assertEqual(response.status_code, 500)


if __name__ == "__main__":
    unittest.main()
