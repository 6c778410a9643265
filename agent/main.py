"""Entry point for the DDNS agent."""

from __future__ import annotations

import logging
import signal
import threading
from typing import Callable, Optional

from agent.core import DDNSRunner
from agent.scheduler import Scheduler
from shared_lib.schema import AgentSettings


def _configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def install_signal_handlers(stop_event: threading.Event) -> Callable[[int, Optional[object]], None]:
    """Set ``stop_event`` on SIGINT/SIGTERM, logging only the first signal."""

    def handle_stop(signum: int, frame: Optional[object]) -> None:
        if stop_event.is_set():
            return
        stop_event.set()
        logging.info("Received %s; stopping agent.", signal.Signals(signum).name)

    signal.signal(signal.SIGINT, handle_stop)
    signal.signal(signal.SIGTERM, handle_stop)
    return handle_stop


def main() -> int:
    try:
        settings = AgentSettings.from_env()
    except ValueError as exc:
        _configure_logging()
        logging.error("Invalid settings: %s", exc)
        return 1
    _configure_logging(settings.log_level)
    logging.info("Starting cloudflare-ddns...")

    runner = DDNSRunner(settings)
    try:
        runner.load_config()
    except (OSError, ValueError) as exc:
        logging.error("Cannot load records: %s", exc)
        runner.close()
        return 1

    stop_event = threading.Event()
    install_signal_handlers(stop_event)

    scheduler = Scheduler.for_runner(runner)
    scheduler.start()
    try:
        stop_event.wait()
    finally:
        scheduler.stop(timeout=settings.shutdown_timeout)
        logging.info("Stopped")
        runner.close()

    logging.info("Exiting cloudflare-ddns")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
