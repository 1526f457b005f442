"""Tests for background image decoding and stale-result handling."""

import io
import unittest
from concurrent.futures import Future
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from PIL import Image

from usage_digitizer.loader import ImageLoader


class ImmediateExecutor:
    """Runs submitted work synchronously so completion order is deterministic."""

    def submit(self, fn, *args, **kwargs):
        fut = Future()
        fut.set_running_or_notify_cancel()
        try:
            fut.set_result(fn(*args, **kwargs))
        except Exception as e:
            fut.set_exception(e)
        return fut

    def shutdown(self, wait=True, cancel_futures=False):
        pass


def _png_bytes(size, color):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


class TestImageLoader(unittest.TestCase):

    def setUp(self):
        self.queued = []
        self.loader = ImageLoader(dispatch=self.queued.append, executor=ImmediateExecutor())
        self.loaded = []
        self.errors = []

    def _run_queued(self):
        while self.queued:
            self.queued.pop(0)()

    def test_decodes_and_delivers(self):
        gen = self.loader.request(_png_bytes((30, 20), "red"), self.loaded.append, self.errors.append)
        self._run_queued()

        self.assertEqual(gen, 1)
        self.assertEqual(len(self.loaded), 1)
        self.assertEqual(self.loaded[0].size, (30, 20))
        self.assertEqual(self.loaded[0].mode, "RGB")
        self.assertEqual(self.errors, [])

    def test_stale_decode_is_dropped(self):
        self.loader.request(_png_bytes((10, 10), "red"), self.loaded.append, self.errors.append)
        self.loader.request(_png_bytes((40, 40), "blue"), self.loaded.append, self.errors.append)

        # both finished before the UI loop ran; only the newest may land
        self.assertEqual(len(self.queued), 2)
        self._run_queued()

        self.assertEqual([im.size for im in self.loaded], [(40, 40)])

    def test_decode_error_reported(self):
        self.loader.request(b"not an image", self.loaded.append, self.errors.append)
        self._run_queued()

        self.assertEqual(self.loaded, [])
        self.assertEqual(len(self.errors), 1)

    def test_stale_error_is_dropped(self):
        self.loader.request(b"garbage", self.loaded.append, self.errors.append)
        self.loader.request(_png_bytes((5, 5), "green"), self.loaded.append, self.errors.append)
        self._run_queued()

        self.assertEqual(self.errors, [])
        self.assertEqual(len(self.loaded), 1)

    def test_shutdown_invalidates_pending(self):
        self.loader.request(_png_bytes((5, 5), "green"), self.loaded.append, self.errors.append)
        self.loader.shutdown()
        self._run_queued()
        self.assertEqual(self.loaded, [])

    def test_palette_images_are_normalized(self):
        buf = io.BytesIO()
        Image.new("P", (8, 8), 3).save(buf, format="PNG")
        self.loader.request(buf.getvalue(), self.loaded.append, self.errors.append)
        self._run_queued()
        self.assertIn(self.loaded[0].mode, ("RGB", "RGBA"))


if __name__ == "__main__":
    unittest.main()
