import json
import tempfile
import unittest
from datetime import date
from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from cli import commands
from cli.__main__ import app
from privacy_gaps import generate_daily_gap_schedule
from privacy_gaps.utils import iso_z


class CliTest(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.dir = Path(tmp.name)

    def write_policy(self, text: str) -> Path:
        path = self.dir / "policy.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_generate_table(self):
        result = self.runner.invoke(app, ["generate", "cli-child", "2025-12-16"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Privacy gaps for cli-child on 2025-12-16", result.output)
        self.assertIn("13:45:00 - 13:56:53", result.output)

    def test_generate_json(self):
        result = self.runner.invoke(app, ["generate", "cli-child", "2025-12-16", "--json"])
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        expected = generate_daily_gap_schedule("cli-child", "2025-12-16").to_dict()
        self.assertEqual(data["gaps"], expected["gaps"])

    def test_generate_bad_date(self):
        result = self.runner.invoke(app, ["generate", "cli-child", "16/12/2025"])
        self.assertEqual(result.exit_code, 1)

    def test_generate_invalid_policy(self):
        policy = self.write_policy("defaults:\n  minDailyGaps: 7\n  maxDailyGaps: 3\n")
        result = self.runner.invoke(app, ["generate", "cli-child", "2025-12-16", "--policy", str(policy)])
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Configuration error", result.output)

    def test_check_in_gap(self):
        gap = generate_daily_gap_schedule("cli-child", "2025-12-16").gaps[0]
        result = self.runner.invoke(app, ["check", "cli-child", iso_z(gap.start_time)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn(f"In gap until {iso_z(gap.end_time)}", result.output)

    def test_check_disabled_subject(self):
        policy = self.write_policy("subjects:\n  cli-child:\n    enabled: false\n")
        result = self.runner.invoke(
            app, ["check", "cli-child", "2025-12-16T13:50:00Z", "--policy", str(policy)]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("disabled", result.output)

    def test_export_csv(self):
        output = self.dir / "gaps.csv"
        result = self.runner.invoke(
            app,
            ["export", "cli-child", "--start", "2025-12-16", "--end", "2025-12-22", "--output", str(output)],
        )
        self.assertEqual(result.exit_code, 0, result.output)
        df = pd.read_csv(output)
        self.assertEqual(list(df.columns), commands.EXPORT_COLUMNS)
        self.assertEqual(df["date"].nunique(), 7)
        self.assertTrue(df["duration_ms"].between(300_000, 900_000).all())

    def test_export_rejects_reversed_range(self):
        result = self.runner.invoke(
            app, ["export", "cli-child", "--start", "2025-12-22", "--end", "2025-12-16"]
        )
        self.assertEqual(result.exit_code, 1)

    def test_export_rejects_unknown_format(self):
        result = self.runner.invoke(
            app, ["export", "cli-child", "--start", "2025-12-16", "--end", "2025-12-16", "--fmt", "xlsx"]
        )
        self.assertEqual(result.exit_code, 1)

    def test_validate_config(self):
        policy = self.write_policy("subjects:\n  a:\n    maxDailyGaps: 3\n  b:\n    enabled: false\n")
        result = self.runner.invoke(app, ["validate-config", str(policy)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("2 subject overrides", result.output)

    def test_validate_config_rejects_bad_bounds(self):
        policy = self.write_policy("defaults:\n  wakingHoursStart: 22\n  wakingHoursEnd: 7\n")
        result = self.runner.invoke(app, ["validate-config", str(policy)])
        self.assertEqual(result.exit_code, 2)


class CommandsTest(unittest.TestCase):
    def test_schedule_frame_rows(self):
        days = commands.iter_days(date(2025, 12, 16), date(2025, 12, 18))
        self.assertEqual(len(days), 3)
        config = commands.resolve_config("frame-child")
        df = commands.schedule_frame("frame-child", days, config)
        expected = sum(len(generate_daily_gap_schedule("frame-child", d, config).gaps) for d in days)
        self.assertEqual(len(df), expected)
        self.assertEqual(df.iloc[0]["gap_index"], 0)

    def test_print_schedule_empty(self):
        from dataclasses import replace
        from privacy_gaps import DEFAULT_PRIVACY_GAP_CONFIG

        config = replace(DEFAULT_PRIVACY_GAP_CONFIG, min_daily_gaps=0, max_daily_gaps=0)
        schedule = generate_daily_gap_schedule("nobody", "2025-12-16", config)
        self.assertIn("  No gaps scheduled", commands.print_schedule(schedule))


if __name__ == "__main__":
    unittest.main()
