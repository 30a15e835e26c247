from __future__ import annotations

import logging
import signal
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from models import ResultRecord, RunOutput
from services.output_writer import OutputWriter

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownHandler:
    """Turns SIGINT/SIGTERM into a cooperative stop and flushes partial results.

    The first signal sets ``stop_event``; the orchestrator checks it between
    batches, so the in-flight batch settles before anything is flushed. A
    second signal raises KeyboardInterrupt to stop immediately.
    """

    def __init__(self, writer: OutputWriter, stop_event: Optional[threading.Event] = None) -> None:
        self.writer = writer
        self.stop_event = stop_event or threading.Event()
        self.signals_received = 0
        self._previous: Dict[int, Any] = {}

    @property
    def requested(self) -> bool:
        return self.stop_event.is_set()

    def install(self) -> None:
        for sig in HANDLED_SIGNALS:
            self._previous[sig] = signal.signal(sig, self._on_signal)

    def restore(self) -> None:
        for sig, previous in self._previous.items():
            signal.signal(sig, previous)
        self._previous.clear()

    def _on_signal(self, signum: int, frame: Any) -> None:
        self.signals_received += 1
        if self.signals_received > 1:
            logger.warning("Second shutdown signal - stopping immediately", extra={"step": "shutdown"})
            raise KeyboardInterrupt
        logger.warning(
            f"Received {signal.Signals(signum).name}; finishing the current batch before shutting down "
            "(signal again to stop immediately)",
            extra={"step": "shutdown"},
        )
        self.request_stop()

    def request_stop(self) -> None:
        self.stop_event.set()

    def flush_partial(
        self,
        results: List[ResultRecord],
        *,
        batch_number: Optional[int] = None,
        start_index: Optional[int] = None,
        end_index: Optional[int] = None,
    ) -> Optional[Path]:
        """Write whatever results exist with a ``partial_results`` status; None when there are none."""
        if not results:
            logger.info("No results to save", extra={"step": "shutdown"})
            return None
        output = RunOutput.build(
            results,
            status="partial_results",
            batch_number=batch_number,
            start_index=start_index,
            end_index=end_index,
        )
        return self.writer.write_partial(output, batch_number)
