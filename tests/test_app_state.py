"""End-to-end tests for the application state: clicks, calibration, crop."""

import unittest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
from PIL import Image

from usage_digitizer.app_state import AppState
from usage_digitizer.calibration import Calibrated, Uncalibrated
from usage_digitizer.coords import CropBox, Point, RasterSize
from usage_digitizer.crop import CropIdle
from usage_digitizer.errors import EmptyCrop, InvalidCalibration, InvalidInput
from usage_digitizer.extract import UsageMode


def _image(w=1600, h=1000, seed=1):
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(h, w, 3), dtype=np.uint8)
    return Image.fromarray(arr), arr


def _calibrated_state():
    st = AppState(default_raster=RasterSize(800, 500))
    st.load_image(_image()[0])
    st.click(Point(40, 500))
    st.click(Point(40, 100))
    st.set_calibration("0", "1000", "Total", "Jan")
    return st


class TestClickRouting(unittest.TestCase):

    def test_clicks_ignored_without_image(self):
        st = AppState()
        self.assertFalse(st.click(Point(1, 1)))

    def test_first_two_clicks_calibrate(self):
        st = AppState()
        st.load_image(_image()[0])
        self.assertTrue(st.click(Point(10, 480)))
        self.assertTrue(st.click(Point(10, 80)))
        self.assertEqual(len(st.points.calibration), 2)

        # uncalibrated: further clicks are dropped
        self.assertFalse(st.click(Point(100, 200)))
        self.assertEqual(st.points.months, [])

    def test_scenario_single_month_value(self):
        st = _calibrated_state()
        self.assertIsInstance(st.calibration, Calibrated)
        self.assertAlmostEqual(st.calibration.affine.value(123, 300), 500.0)

    def test_twelfth_point_computes_results(self):
        st = _calibrated_state()
        for i in range(11):
            st.click(Point(60 + 50 * i, 300))
            self.assertIsNone(st.results)
        st.click(Point(700, 300))

        self.assertIsNotNone(st.results)
        self.assertEqual(len(st.results.rows), 12)
        self.assertAlmostEqual(st.results.annual_total, 6000.0)
        self.assertEqual(st.status_text(), "Red Points: 12/12")

        # thirteenth click is a no-op
        self.assertFalse(st.click(Point(750, 250)))

    def test_undo_drops_results(self):
        st = _calibrated_state()
        for i in range(12):
            st.click(Point(60 + 50 * i, 300))
        self.assertTrue(st.undo())
        self.assertIsNone(st.results)
        self.assertEqual(len(st.points.months), 11)

        st.click(Point(700, 100))
        self.assertAlmostEqual(st.results.rows[11].axis_value, 1000.0)

    def test_mode_change_recomputes(self):
        st = _calibrated_state()
        for i in range(12):
            st.click(Point(60 + 50 * i, 480))  # axis value 50
        st.set_mode("Daily average", "Jan")

        self.assertIs(st.results.mode, UsageMode.DAILY_AVERAGE)
        self.assertAlmostEqual(st.results.rows[1].final_value, 50 * 28)
        self.assertAlmostEqual(st.results.annual_total, 50 * 365)


class TestCalibrationErrors(unittest.TestCase):

    def test_needs_two_points(self):
        st = AppState()
        st.load_image(_image()[0])
        st.click(Point(0, 10))
        with self.assertRaises(InvalidCalibration):
            st.set_calibration("0", "1", "Total", "Jan")
        self.assertIsInstance(st.calibration, Uncalibrated)

    def test_bad_input_keeps_previous_calibration(self):
        st = _calibrated_state()
        before = st.calibration
        with self.assertRaises(InvalidInput):
            st.set_calibration("zero", "1000", "Total", "Jan")
        self.assertIs(st.calibration, before)

    def test_degenerate_points(self):
        st = AppState()
        st.load_image(_image()[0])
        st.click(Point(0, 200))
        st.click(Point(300, 200))
        with self.assertRaises(InvalidCalibration):
            st.set_calibration("0", "1", "Total", "Jan")
        self.assertFalse(st.is_calibrated)


class TestLifecycle(unittest.TestCase):

    def test_new_image_clears_everything(self):
        st = _calibrated_state()
        for i in range(12):
            st.click(Point(60 + 50 * i, 300))
        self.assertIsNotNone(st.results)
        st.crop.toggle()

        st.load_image(_image(seed=9)[0])

        self.assertEqual(st.points.calibration, [])
        self.assertEqual(st.points.months, [])
        self.assertIsInstance(st.calibration, Uncalibrated)
        self.assertIsNone(st.results)
        self.assertIsInstance(st.crop.state, CropIdle)

    def test_reset_keeps_image(self):
        st = _calibrated_state()
        doc = st.document
        st.reset()
        self.assertIs(st.document, doc)
        self.assertFalse(st.is_calibrated)
        self.assertEqual(st.points.calibration, [])

    def test_clicks_ignored_in_crop_mode(self):
        st = AppState()
        st.load_image(_image()[0])
        st.crop.toggle()
        self.assertFalse(st.click(Point(5, 5)))


class TestApplyCrop(unittest.TestCase):

    def test_apply_replaces_image_and_raster(self):
        img, arr = _image()
        st = AppState(default_raster=RasterSize(800, 500))
        st.load_image(img)
        st.click(Point(1, 400))
        st.click(Point(1, 100))
        st.set_calibration("0", "10", "Total", "Jan")

        st.crop.toggle()
        st.crop.press(Point(100, 50))
        st.crop.move(Point(300, 150), st.raster)
        st.crop.release(st.raster)
        self.assertTrue(st.apply_crop())

        self.assertEqual(st.raster, RasterSize(400, 200))
        self.assertEqual(st.document.original.size, (400, 200))
        np.testing.assert_array_equal(np.array(st.document.original), arr[100:300, 200:600])
        self.assertEqual(st.points.calibration, [])
        self.assertFalse(st.is_calibrated)
        self.assertFalse(st.crop.active)

    def test_second_crop_is_relative_to_first(self):
        img, arr = _image()
        st = AppState(default_raster=RasterSize(800, 500))
        st.load_image(img)

        st.crop.toggle()
        st.crop.press(Point(100, 50))
        st.crop.move(Point(300, 150), st.raster)
        st.crop.release(st.raster)
        st.apply_crop()

        # raster now equals the 400x200 crop, so the mapping is 1:1
        st.crop.toggle()
        st.crop.press(Point(10, 20))
        st.crop.move(Point(60, 70), st.raster)
        st.crop.release(st.raster)
        st.apply_crop()

        self.assertEqual(st.raster, RasterSize(50, 50))
        np.testing.assert_array_equal(np.array(st.document.original), arr[120:170, 210:260])

    def test_empty_crop_changes_nothing(self):
        st = _calibrated_state()
        doc = st.document
        st.crop.toggle()
        with self.assertRaises(EmptyCrop):
            st.apply_crop()
        self.assertIs(st.document, doc)
        self.assertTrue(st.is_calibrated)
        self.assertTrue(st.crop.active)
        self.assertEqual(st.crop.box, CropBox())

    def test_apply_without_crop_mode_is_noop(self):
        st = _calibrated_state()
        self.assertFalse(st.apply_crop())
        self.assertTrue(st.is_calibrated)

    def test_working_raster_uses_raster_size(self):
        st = AppState(default_raster=RasterSize(320, 200))
        self.assertIsNone(st.working_raster())
        st.load_image(_image(640, 400)[0])
        self.assertEqual(st.working_raster().size, (320, 200))


if __name__ == "__main__":
    unittest.main()
