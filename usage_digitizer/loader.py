from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional, Union

from PIL import Image

from .image_utils import decode_image

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes]


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class ImageLoader:
    """
    Decodes image files off the UI thread, one request at a time.

    Starting a new request cancels the previous one if it has not started
    yet; if it is already decoding, its result is dropped on completion
    because its generation no longer matches. ``dispatch`` marshals
    completions back onto the UI loop (e.g. ``lambda fn: root.after(0, fn)``).
    """

    def __init__(
        self,
        *,
        dispatch: Callable[[Callable[[], None]], None] = _call_now,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        self._dispatch = dispatch
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="image-decode")
        self._generation = 0
        self._pending: Optional[Future] = None

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def request(
        self,
        source: Source,
        on_done: Callable[[Image.Image], None],
        on_error: Callable[[Exception], None],
    ) -> int:
        if self._pending is not None and not self._pending.done():
            if self._pending.cancel():
                logger.info("Cancelled pending decode (generation %d)", self._generation)
        self._generation += 1
        gen = self._generation

        fut = self._executor.submit(decode_image, source)
        self._pending = fut

        def _deliver(f: Future) -> None:
            if f.cancelled():
                return
            self._dispatch(lambda: self._commit(gen, f, on_done, on_error))

        fut.add_done_callback(_deliver)
        return gen

    def _commit(self, gen: int, fut: Future, on_done, on_error) -> None:
        if not self.is_current(gen):
            logger.info("Dropping stale decode (generation %d, current %d)", gen, self._generation)
            return
        exc = fut.exception()
        if exc is not None:
            on_error(exc)
            return
        on_done(fut.result())

    def shutdown(self) -> None:
        self._generation += 1
        self._executor.shutdown(wait=False, cancel_futures=True)
