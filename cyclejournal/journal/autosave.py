"""
Debounced autosave for an answer which is still being typed.
"""
import asyncio
import logging
from typing import Callable, Optional

from ..utils.settings import CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS

logger = logging.getLogger(__name__)


class AutosaveClosed(Exception):
    """
    Raised when content is pushed to a debouncer which was already closed.
    """


class AutosaveDebouncer:
    """
    Persists the latest pushed content once no new content arrived for `delay` seconds. Every
    push restarts the delay.

    push() must be called with a running event loop. flush() and close() write pending content
    synchronously, close() is also called when leaving the debouncer as a context manager.
    """

    def __init__(
        self,
        save: Callable[[str], None],
        delay: float = CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS,
    ) -> None:
        self.save = save
        self.delay = delay
        self.closed = False
        self._pending: Optional[str] = None
        self._timer: Optional["asyncio.Task[None]"] = None

    @property
    def pending(self) -> Optional[str]:
        return self._pending

    def push(self, content: str) -> None:
        if self.closed:
            raise AutosaveClosed("Autosave is closed")
        self._pending = content
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().create_task(self._save_after_delay())

    async def _save_after_delay(self) -> None:
        await asyncio.sleep(self.delay)
        # Detach before saving, flush() must not cancel the task it runs in
        self._timer = None
        self.flush()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def flush(self) -> bool:
        """
        Saves pending content now. Returns True if something was written.
        """
        self._cancel_timer()
        if self._pending is None:
            return False

        content = self._pending
        try:
            self.save(content)
        except Exception as e:
            logger.error(f"Autosave failed, content kept for retry: {repr(e)}")
            return False

        self._pending = None
        return True

    def close(self) -> bool:
        saved = self.flush()
        self.closed = True
        return saved

    def __enter__(self) -> "AutosaveDebouncer":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    async def __aenter__(self) -> "AutosaveDebouncer":
        return self

    async def __aexit__(self, *args) -> None:
        self.close()
