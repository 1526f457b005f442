"""Tests for results CSV export."""

import csv
import tempfile
import unittest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from usage_digitizer.calibration import AffineMap
from usage_digitizer.coords import Point
from usage_digitizer.export_csv import results_csv_string, write_results_csv
from usage_digitizer.extract import UsageMode, compute_results


def _results():
    affine = AffineMap(y_bottom=500, y_top=100, vmin=0, vmax=1000)
    pts = [Point(10 * i, 300) for i in range(12)]
    return compute_results(pts, affine, UsageMode.DAILY_AVERAGE, 11)


class TestExportCsv(unittest.TestCase):

    def test_csv_string(self):
        lines = results_csv_string(_results()).split("\n")

        self.assertEqual(lines[0], "month,axis_value,kwh")
        self.assertEqual(len(lines), 14)
        self.assertEqual(lines[1], "Dec,500.00,15500.00")
        self.assertEqual(lines[2], "Jan,500.00,15500.00")
        self.assertEqual(lines[3], "Feb,500.00,14000.00")
        self.assertEqual(lines[-1], "Annual,,182500.00")

    def test_write_file(self):
        with tempfile.TemporaryDirectory() as d:
            path = Path(d) / "out.csv"
            write_results_csv(str(path), _results())
            with open(path, newline="", encoding="utf-8") as f:
                rows = list(csv.reader(f))
        self.assertEqual(rows[0], ["month", "axis_value", "kwh"])
        self.assertEqual(len(rows), 14)
        self.assertEqual(rows[13][0], "Annual")


if __name__ == "__main__":
    unittest.main()
