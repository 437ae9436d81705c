import pathlib
import sys
import tempfile
import unittest

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from cartlab.core.models import TrialRecord  # noqa: E402
from cartlab.dataio.trial_export import (  # noqa: E402
    TRIAL_CSV_HEADER,
    format_trial_csv,
    quote_csv,
    write_trial_csv,
)

HEADER_LINE = (
    "scenario,preset,trial_id,hanging_mass_kg,force_mean_N,accel_mps2,moved,"
    "force_window_start_s,force_window_end_s,vel_window_start_s,vel_window_end_s,"
    "noise_enabled,timestamp_iso"
)


def _record(**overrides):
    values = dict(
        scenario="cart_only",
        preset="Low Friction",
        trial_id=3,
        hanging_mass_kg=0.2,
        force_mean_n=1.2345,
        accel_mps2=2.5,
        moved=True,
        force_window_start_s=0.9,
        force_window_end_s=1.6,
        vel_window_start_s=0.95,
        vel_window_end_s=1.55,
        noise_enabled=False,
        timestamp_iso="2024-01-01T00:00:00.000Z",
    )
    values.update(overrides)
    return TrialRecord(**values)


class TrialExportTest(unittest.TestCase):
    def test_header_only_without_records(self):
        self.assertEqual(len(TRIAL_CSV_HEADER), 13)
        self.assertEqual(format_trial_csv([]), HEADER_LINE)

    def test_row_format(self):
        text = format_trial_csv([_record()])

        self.assertEqual(
            text.split("\n")[1],
            '"cart_only","Low Friction",3,0.2,1.2345,2.5,true,0.9,1.6,0.95,1.55,false,'
            '"2024-01-01T00:00:00.000Z"',
        )
        self.assertFalse(text.endswith("\n"))

    def test_whole_numbers_have_no_decimal_point(self):
        row = format_trial_csv(
            [_record(accel_mps2=0.0, force_mean_n=1.0, force_window_end_s=2.0)]
        ).split("\n")[1]

        self.assertEqual(
            row,
            '"cart_only","Low Friction",3,0.2,1,0,true,0.9,2,0.95,1.55,false,'
            '"2024-01-01T00:00:00.000Z"',
        )

    def test_non_finite_numbers(self):
        row = format_trial_csv([_record(accel_mps2=float("nan"))]).split("\n")[1]
        self.assertIn(",NaN,", row)

    def test_embedded_quotes_are_doubled(self):
        self.assertEqual(quote_csv('Low "slick"'), '"Low ""slick"""')
        row = format_trial_csv([_record(preset='Low "slick"')]).split("\n")[1]
        self.assertTrue(row.startswith('"cart_only","Low ""slick""",'))

    def test_write_into_directory_creates_default_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            target = write_trial_csv(tmpdir, [_record(), _record(trial_id=4)])

            self.assertEqual(target.name, "trial_data.csv")
            lines = target.read_text(encoding="utf-8").split("\n")
            self.assertEqual(lines[0], HEADER_LINE)
            self.assertEqual(len(lines), 3)

    def test_write_creates_parent_directories(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "exports" / "run1.csv"
            target = write_trial_csv(path, [_record()])
            self.assertTrue(target.exists())


if __name__ == "__main__":
    unittest.main()
