from __future__ import annotations

from pipelines.batch_orchestrator import BatchOrchestrator
from pipelines.runner import RunContext


class ProcessFounderBatches:
    def __init__(self, orchestrator: BatchOrchestrator) -> None:
        self.orchestrator = orchestrator

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.meta.get("exhausted"):
            return ctx
        outcome = self.orchestrator.run_window(ctx.founders, ctx.meta["start_index"])
        ctx.results = self.orchestrator.snapshot()
        ctx.meta["next_index"] = outcome.next_index
        ctx.meta["interrupted"] = outcome.interrupted
        return ctx
