"""Sync-to-async bridging on a shared background event loop.

The motor client binds itself to the loop it is first used on, so every synchronous call made
through this module runs on the same long-lived loop rather than a fresh ``asyncio.run`` loop.

Example:
    .. code-block:: python

        from mongowrap.core.utils import run_async

        async def fetch():
            return await db.find({"status": "active"})

        docs = run_async(fetch())
"""

import asyncio
import atexit
import threading
from typing import Any, Coroutine, TypeVar

T = TypeVar("T")

_shared_loop: asyncio.AbstractEventLoop | None = None
_shared_thread: threading.Thread | None = None
_shared_lock = threading.Lock()


def _get_shared_loop() -> asyncio.AbstractEventLoop:
    """Get or lazily create the shared background loop. Thread-safe."""
    global _shared_loop, _shared_thread

    if _shared_loop is not None and _shared_loop.is_running():
        return _shared_loop

    with _shared_lock:
        # Double-check after acquiring lock
        if _shared_loop is not None and _shared_loop.is_running():
            return _shared_loop

        loop = asyncio.new_event_loop()
        started = threading.Event()

        def _run_loop():
            asyncio.set_event_loop(loop)
            loop.call_soon(started.set)
            loop.run_forever()

        _shared_thread = threading.Thread(target=_run_loop, name="mongowrap-shared-loop", daemon=True)
        _shared_thread.start()
        started.wait()
        _shared_loop = loop
        return _shared_loop


def shutdown():
    """Stop the shared loop. It is recreated on the next ``run_async`` call."""
    global _shared_loop, _shared_thread

    if _shared_loop is not None and _shared_loop.is_running():
        _shared_loop.call_soon_threadsafe(_shared_loop.stop)
    if _shared_thread is not None:
        _shared_thread.join(timeout=1.0)
    _shared_loop = None
    _shared_thread = None


atexit.register(shutdown)


def is_async_context() -> bool:
    """Return True if an event loop is running in the current thread."""
    try:
        asyncio.get_running_loop()
        return True
    except RuntimeError:
        return False


def run_async(coro: Coroutine[Any, Any, T], timeout: float | None = None) -> T:
    """Run a coroutine from synchronous code and return its result.

    Args:
        coro: The coroutine to run.
        timeout: Optional timeout in seconds.

    Raises:
        TimeoutError: If the timeout is exceeded.
        Exception: Any exception raised by the coroutine.
    """
    loop = _get_shared_loop()
    try:
        fut = asyncio.run_coroutine_threadsafe(coro, loop)
    except Exception:
        coro.close()
        raise

    try:
        return fut.result(timeout=timeout)
    except TimeoutError:
        fut.cancel()
        raise
