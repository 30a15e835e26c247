from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional, Union

from config.settings import Settings, get_settings
from pipelines.batch_orchestrator import BatchOrchestrator
from pipelines.runner import Pipeline, RunContext
from pipelines.shutdown import ShutdownHandler
from pipelines.steps import LoadFounderWindow, PersistRunOutputs, ProcessFounderBatches
from ports import ClassifierPort, ProfileResolverPort, SearchFetcherPort
from services.classifier import FounderClassifier
from services.llm_client import LLMClient
from services.output_writer import OutputWriter
from services.progress_checkpoint import ProgressCheckpoint
from services.search_fetcher import RetryingFetcher
from services.snapshot_poller import SnapshotPoller

logger = logging.getLogger(__name__)


def process_founders(
    settings: Optional[Settings] = None,
    *,
    input_path: Optional[Union[str, Path]] = None,
    fetcher: Optional[SearchFetcherPort] = None,
    resolver: Optional[ProfileResolverPort] = None,
    classifier: Optional[ClassifierPort] = None,
    shutdown: Optional[ShutdownHandler] = None,
    install_signals: bool = True,
    sleep: Callable[[float], None] = time.sleep,
) -> RunContext:
    """Process the next window of founders from the input CSV.

    Network collaborators default to the real proxy/dataset/OpenAI clients.
    A first SIGINT/SIGTERM stops after the in-flight batch and writes partial
    results; a second one (or a plain KeyboardInterrupt) stops immediately and
    keeps only fully committed batches. Any other exception flushes partial
    results and propagates.
    """
    settings = settings or get_settings()
    checkpoint = ProgressCheckpoint(settings.progress_file)
    writer = OutputWriter(settings.output_dir)
    shutdown = shutdown or ShutdownHandler(writer)

    orchestrator = BatchOrchestrator(
        fetcher or RetryingFetcher(settings, sleep=sleep),
        resolver or SnapshotPoller(settings, sleep=sleep),
        classifier or FounderClassifier(LLMClient(settings)),
        settings=settings,
        stop_event=shutdown.stop_event,
        sleep=sleep,
    )
    pipeline = Pipeline([
        LoadFounderWindow(checkpoint, input_path or settings.input_csv, settings),
        ProcessFounderBatches(orchestrator),
        PersistRunOutputs(checkpoint, writer, shutdown),
    ])

    ctx = RunContext()
    if install_signals:
        shutdown.install()
    try:
        return pipeline.run(ctx)
    except KeyboardInterrupt:
        logger.warning("Forced shutdown; saving committed results", extra={"step": "shutdown"})
        if "start_index" in ctx.meta:
            cursor = max(orchestrator.cursor, ctx.meta["start_index"])
            checkpoint.save(cursor)
            ctx.meta["next_index"] = cursor
            ctx.meta["interrupted"] = True
            ctx.results = orchestrator.snapshot()
            ctx.meta["partial_output_path"] = shutdown.flush_partial(
                ctx.results,
                batch_number=ctx.meta.get("batch_number"),
                start_index=ctx.meta["start_index"],
                end_index=cursor,
            )
        return ctx
    except Exception:
        logger.exception("Fatal error while processing founders", extra={"step": "run", "status": "error"})
        shutdown.flush_partial(
            orchestrator.snapshot(),
            batch_number=ctx.meta.get("batch_number"),
            start_index=ctx.meta.get("start_index"),
            end_index=orchestrator.cursor if "start_index" in ctx.meta else None,
        )
        raise
    finally:
        if install_signals:
            shutdown.restore()
