"""Fixed-interval worker threads for the update and resync loops."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterable, List

from agent.core import DDNSRunner


class PeriodicWorker(threading.Thread):
    """Calls ``task`` every ``interval`` seconds until stopped.

    Behaves like a ticker: the first call happens one interval after start,
    and ticks that fall due while ``task`` is still running are dropped.
    A stop request is only observed between calls.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        task: Callable[[], None],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(name=name, daemon=True)
        self._interval = interval
        self._task = task
        self._clock = clock
        self._stop_event = threading.Event()

    @property
    def interval(self) -> float:
        return self._interval

    def stop(self) -> None:
        self._stop_event.set()

    def run(self) -> None:
        next_run = self._clock() + self._interval
        while not self._stop_event.wait(timeout=max(0.0, next_run - self._clock())):
            try:
                self._task()
            except Exception:  # noqa: BLE001 - keep the loop alive
                logging.exception("%s: cycle failed", self.name)

            next_run += self._interval
            now = self._clock()
            if next_run <= now:
                dropped = int((now - next_run) // self._interval) + 1
                next_run += dropped * self._interval
                logging.warning("%s: cycle overran, dropped %d tick(s)", self.name, dropped)
        logging.info("%s stopped.", self.name)


class Scheduler:
    """Owns the periodic workers and stops them together."""

    def __init__(self, workers: Iterable[PeriodicWorker]) -> None:
        self._workers: List[PeriodicWorker] = list(workers)
        self._lock = threading.Lock()
        self._stopped = False

    @classmethod
    def for_runner(cls, runner: DDNSRunner) -> "Scheduler":
        settings = runner.settings
        return cls(
            [
                PeriodicWorker("update-loop", settings.update_interval, runner.run_update_cycle),
                PeriodicWorker("poll-loop", settings.poll_interval, runner.run_poll_cycle),
            ]
        )

    @property
    def workers(self) -> List[PeriodicWorker]:
        return list(self._workers)

    def start(self) -> None:
        for worker in self._workers:
            logging.info("Starting %s (every %ss).", worker.name, worker.interval)
            worker.start()

    def stop(self, timeout: float = 10) -> bool:
        """Signal every worker, then wait up to ``timeout`` seconds in total.

        Safe to call more than once; only the first call does anything.
        Returns False when a worker was still busy when the timeout ran out.
        """
        with self._lock:
            if self._stopped:
                return not any(worker.is_alive() for worker in self._workers)
            self._stopped = True

        for worker in self._workers:
            worker.stop()

        deadline = time.monotonic() + timeout
        all_stopped = True
        for worker in self._workers:
            if worker.is_alive():
                worker.join(timeout=max(0.0, deadline - time.monotonic()))
            if worker.is_alive():
                logging.warning("%s did not stop within %ss.", worker.name, timeout)
                all_stopped = False
        return all_stopped
