from __future__ import annotations

import logging

from models import RunOutput
from pipelines.runner import RunContext
from pipelines.shutdown import ShutdownHandler
from services.output_writer import OutputWriter
from services.progress_checkpoint import ProgressCheckpoint

logger = logging.getLogger(__name__)


class PersistRunOutputs:
    """Advance the checkpoint and write either the full outputs or, when interrupted, the partial file."""

    def __init__(self, checkpoint: ProgressCheckpoint, writer: OutputWriter, shutdown: ShutdownHandler) -> None:
        self.checkpoint = checkpoint
        self.writer = writer
        self.shutdown = shutdown

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.meta.get("exhausted"):
            return ctx
        batch_number = ctx.meta["batch_number"]
        start = ctx.meta["start_index"]

        if ctx.meta.get("interrupted"):
            next_index = ctx.meta["next_index"]
            self.checkpoint.save(next_index)
            ctx.meta["partial_output_path"] = self.shutdown.flush_partial(
                ctx.results, batch_number=batch_number, start_index=start, end_index=next_index
            )
            return ctx

        end = ctx.meta["end_index"]
        self.checkpoint.save(end)
        output = RunOutput.build(
            ctx.results, status="complete", batch_number=batch_number, start_index=start, end_index=end
        )
        ctx.meta["output"] = output.to_output()
        ctx.meta["output_path"] = self.writer.write_run(output, batch_number)
        ctx.meta["filtered_paths"] = self.writer.write_filtered(output, batch_number)
        logger.info(f"Batch {batch_number} - Records {start + 1} to {end} complete", extra={"step": "persist", "status": "complete"})
        return ctx
