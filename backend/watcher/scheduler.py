"""
WatchCompile Scheduler.

Cancellable repeating tasks. The next run starts a fixed delay after the
previous run finishes, so runs never overlap.
Requires Python 3.11+.
"""

import asyncio
import threading
from collections.abc import Callable
from typing import Any

from utils.logger import LoggerMixin


class PollingScheduler(LoggerMixin):
    """
    Runs a task repeatedly on a background thread.

    Waits on a threading.Event between runs so stop() interrupts the
    delay instead of waiting it out.
    """

    def __init__(
        self,
        task: Callable[[], Any],
        delay_ms: int = 100,
        name: str = "watch-compile",
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            task: Callable run once per tick
            delay_ms: Delay in milliseconds after each run
            name: Name of the background thread
        """
        self._task = task
        self._delay = delay_ms / 1000.0
        self._name = name
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._runs = 0

    @property
    def is_running(self) -> bool:
        """Whether the background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def run_count(self) -> int:
        """Number of completed runs."""
        return self._runs

    def start(self) -> None:
        """Start running the task on a background thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop,
            name=self._name,
            daemon=True,
        )
        self._thread.start()
        self.log.info("scheduler_started", delay_ms=int(self._delay * 1000))

    def stop(self, timeout: float = 5.0) -> None:
        """Signal the loop to stop and wait for the current run to finish."""
        self._stop_event.set()
        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join(timeout=timeout)
            self._thread = None
            self.log.info("scheduler_stopped", runs=self._runs)

    def run_forever(self) -> None:
        """Run the loop on the calling thread until stop() is called."""
        self._stop_event.clear()
        self._loop()

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            self._run_once()
            if self._stop_event.wait(self._delay):
                break

    def _run_once(self) -> None:
        try:
            self._task()
        except Exception as e:
            self.log.error("scheduled_task_failed", error=str(e), exc_info=True)
        finally:
            self._runs += 1

    def __enter__(self) -> "PollingScheduler":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.stop()


class AsyncPollingScheduler(LoggerMixin):
    """
    Asyncio version of the scheduler.

    Uses an asyncio.Task and asyncio.sleep instead of a dedicated thread.
    Each run of the synchronous task goes through asyncio.to_thread, so
    the event loop stays responsive; the next run waits for it to finish.
    """

    def __init__(self, task: Callable[[], Any], delay_ms: int = 100) -> None:
        self._task = task
        self._delay = delay_ms / 1000.0
        self._runner: asyncio.Task[None] | None = None
        self._runs = 0

    @property
    def is_running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    @property
    def run_count(self) -> int:
        return self._runs

    def start(self) -> None:
        """Start the loop on the running event loop."""
        if self.is_running:
            return
        self._runner = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        """Cancel the loop and wait for it to exit."""
        if self._runner is None:
            return
        self._runner.cancel()
        try:
            await self._runner
        except asyncio.CancelledError:
            pass
        self._runner = None

    async def _loop(self) -> None:
        while True:
            try:
                await asyncio.to_thread(self._task)
            except Exception as e:
                self.log.error("scheduled_task_failed", error=str(e), exc_info=True)
            finally:
                self._runs += 1
            await asyncio.sleep(self._delay)
