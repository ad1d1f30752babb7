import asyncio
import inspect
import logging
from typing import Any, Callable, List, Optional

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class Debouncer:
    """Collapse bursts of triggers into one delayed call.

    Each `trigger()` cancels the pending timer and reschedules it `delay_ms` later
    with the newest arguments. When the quiet period elapses the callback runs once,
    and every future handed out during the burst resolves to that single result.
    Must be used from inside a running event loop.
    """

    def __init__(self, callback: Callable[..., Any], delay_ms: int = 300):
        self.callback = callback
        self.delay_ms = max(0, int(delay_ms))
        self._handle: Optional[asyncio.TimerHandle] = None
        self._args: tuple = ()
        self._kwargs: dict = {}
        self._waiters: List[asyncio.Future] = []
        self.fire_count = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, *args: Any, **kwargs: Any) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._args = args
        self._kwargs = kwargs
        waiter = loop.create_future()
        self._waiters.append(waiter)
        self._handle = loop.call_later(self.delay_ms / 1000.0, self._fire)
        return waiter

    def cancel(self) -> None:
        """Drop the pending call; outstanding futures are cancelled."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        waiters, self._waiters = self._waiters, []
        for w in waiters:
            if not w.done():
                w.cancel()

    def _fire(self) -> None:
        self._handle = None
        args, kwargs = self._args, self._kwargs
        waiters, self._waiters = self._waiters, []
        self.fire_count += 1
        try:
            result = self.callback(*args, **kwargs)
        except Exception as e:
            logger.error(f"Debounced call failed: {e}")
            _settle(waiters, error=e)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            task.add_done_callback(lambda t: _settle_from_task(waiters, t))
        else:
            _settle(waiters, value=result)


def _settle(waiters: List[asyncio.Future], value: Any = None, error: Optional[BaseException] = None) -> None:
    for w in waiters:
        if w.done():
            continue
        if error is not None:
            w.set_exception(error)
        else:
            w.set_result(value)


def _settle_from_task(waiters: List[asyncio.Future], task: asyncio.Future) -> None:
    if task.cancelled():
        for w in waiters:
            if not w.done():
                w.cancel()
        return
    error = task.exception()
    if error is not None:
        logger.error(f"Debounced call failed: {error}")
    _settle(waiters, value=None if error is not None else task.result(), error=error)
