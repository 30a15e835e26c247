from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from config.settings import Settings
from pipelines.runner import RunContext
from services.csv_loader import load_founders
from services.progress_checkpoint import ProgressCheckpoint

logger = logging.getLogger(__name__)


class LoadFounderWindow:
    """Read the input CSV and select this run's window starting at the checkpoint cursor."""

    def __init__(self, checkpoint: ProgressCheckpoint, input_path: Union[str, Path], settings: Settings) -> None:
        self.checkpoint = checkpoint
        self.input_path = input_path
        self.settings = settings

    def run(self, ctx: RunContext) -> RunContext:
        records = load_founders(
            self.input_path,
            domain=self.settings.target_domain,
            excluded_domain=self.settings.excluded_domain,
        )
        total = len(records)
        start = self.checkpoint.load().last_processed_index
        ctx.meta["total_records"] = total

        if start >= total:
            logger.info("All records have been processed. Starting over from the beginning.", extra={"step": "load"})
            self.checkpoint.save(0)
            ctx.founders = []
            ctx.meta["exhausted"] = True
            return ctx

        per_run = max(1, self.settings.records_per_run)
        end = min(start + per_run, total)
        ctx.founders = records[start:end]
        ctx.meta.update({
            "start_index": start,
            "end_index": end,
            "batch_number": start // per_run + 1,
        })
        logger.info(f"Starting from record {start + 1}, processing up to record {end}", extra={"step": "load"})
        return ctx
