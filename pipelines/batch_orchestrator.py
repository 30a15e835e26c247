from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from config.settings import Settings, get_settings
from models import InputRecord, ProfileData, ResolvedHandle, ResultRecord
from ports import ClassifierPort, ProfileResolverPort, SearchFetcherPort
from services.result_extractor import extract_handle, extract_links, pick_canonical_profile

logger = logging.getLogger(__name__)


@dataclass
class WindowOutcome:
    start_index: int
    end_index: int
    next_index: int
    interrupted: bool = False


class BatchOrchestrator:
    """Resolves founders batch by batch and owns the run's accumulated results.

    Results of a batch are committed only once the whole batch is done, so
    ``cursor`` always points at the first input index without a committed result.
    """

    def __init__(
        self,
        fetcher: SearchFetcherPort,
        resolver: ProfileResolverPort,
        classifier: ClassifierPort,
        settings: Optional[Settings] = None,
        stop_event: Optional[threading.Event] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.fetcher = fetcher
        self.resolver = resolver
        self.classifier = classifier
        self.settings = settings or get_settings()
        self.stop_event = stop_event or threading.Event()
        self.sleep = sleep
        self._results: List[ResultRecord] = []
        self.cursor = 0

    def snapshot(self) -> List[ResultRecord]:
        """Copy of the committed results; safe to hand to the shutdown path."""
        return list(self._results)

    def search_url(self, record: InputRecord) -> str:
        return f"{self.settings.search_url}?q={record.search_query}&brd_json=1"

    def resolve_record(self, record: InputRecord) -> Union[ResultRecord, ResolvedHandle]:
        """Search phase: a terminal ``failed`` result, or a handle pending the snapshot lookup."""
        domain = self.settings.target_domain
        payload = self.fetcher.fetch(self.search_url(record))
        if not payload or not payload.get("organic"):
            logger.info(f"No search results for {record.founder_name}", extra={"step": "search", "status": "failed"})
            return ResultRecord.for_record(record, "failed", reason="No search results found")

        profile_url = pick_canonical_profile(extract_links(payload, domain))
        if not profile_url:
            logger.info(f"No main profile found for {record.founder_name}", extra={"step": "extract", "status": "failed"})
            return ResultRecord.for_record(record, "failed", reason="No profile found")

        handle = extract_handle(profile_url, domain)
        if not handle:
            return ResultRecord.for_record(record, "failed", reason="Could not extract handle", profile_url=profile_url)

        return ResolvedHandle(record=record, handle=handle, profile_url=profile_url)

    def _assemble(self, pending: ResolvedHandle, profile: ProfileData) -> ResultRecord:
        record = pending.record
        result = ResultRecord.for_record(
            record,
            "processed",
            handle=pending.handle,
            profile_url=pending.profile_url,
            dm_status="open" if profile.can_dm else "closed",
            description=profile.description or "",
        )
        verdict = self.classifier.classify(pending.handle, profile.description, record.company_name)
        if verdict:
            result.role = verdict.role
            result.rank = verdict.rank
            result.confidence_reason = verdict.confidence_reason
        return result

    def process_batch(self, batch: Sequence[InputRecord]) -> List[ResultRecord]:
        """One result per record, in input order."""
        slots: List[Optional[ResultRecord]] = [None] * len(batch)
        pending: List[Tuple[int, ResolvedHandle]] = []

        for idx, record in enumerate(batch):
            logger.info(f"Processing: {record.founder_name} from {record.company_name}", extra={"step": "search"})
            try:
                outcome = self.resolve_record(record)
            except Exception as e:
                logger.exception(f"Error processing {record.founder_name}", extra={"step": "search", "status": "error"})
                slots[idx] = ResultRecord.for_record(record, "error", reason=str(e))
                continue
            if isinstance(outcome, ResolvedHandle):
                pending.append((idx, outcome))
            else:
                slots[idx] = outcome

        if pending:
            # Spread out calls to the dataset API
            self.sleep(self.settings.profile_lookup_delay_seconds)
            try:
                profiles = self.resolver.resolve_profiles([p.handle for _, p in pending])
            except Exception as e:
                logger.exception("Profile lookup failed for the batch", extra={"step": "snapshot", "status": "error"})
                profiles = [
                    ProfileData.api_error(str(e), assume_dm_open=self.settings.assume_dm_open_on_error)
                    for _ in pending
                ]

            for (idx, item), profile in zip(pending, profiles):
                try:
                    slots[idx] = self._assemble(item, profile)
                    logger.info(f"Successfully processed {item.record.founder_name}", extra={"step": "classify", "handle": item.handle, "status": "processed"})
                except Exception as e:
                    logger.exception(f"Error analyzing {item.record.founder_name}", extra={"step": "classify", "handle": item.handle, "status": "error"})
                    slots[idx] = ResultRecord.for_record(
                        item.record, "error", handle=item.handle, profile_url=item.profile_url, reason=str(e)
                    )

        # A short resolver answer must not drop records
        for idx, slot in enumerate(slots):
            if slot is None:
                slots[idx] = ResultRecord.for_record(batch[idx], "error", reason="Profile lookup returned no data")
        return [s for s in slots if s is not None]

    def run_window(self, records: Sequence[InputRecord], start_index: int) -> WindowOutcome:
        """Process ``records`` (the run window starting at ``start_index``) in batches."""
        size = max(1, self.settings.batch_size)
        batches = [list(records[i:i + size]) for i in range(0, len(records), size)]
        end_index = start_index + len(records)
        self.cursor = start_index
        logger.info(f"Processing {len(records)} founders in {len(batches)} batches", extra={"step": "orchestrate"})

        for i, batch in enumerate(batches):
            if self.stop_event.is_set():
                next_index = start_index + i * size
                logger.warning("Processing interrupted, stopping...", extra={"step": "orchestrate", "batch": i + 1, "status": "interrupted"})
                return WindowOutcome(start_index, end_index, next_index, interrupted=True)

            logger.info(f"Processing batch {i + 1}/{len(batches)}", extra={"step": "orchestrate", "batch": i + 1})
            batch_results = self.process_batch(batch)
            self._results.extend(batch_results)
            self.cursor = start_index + i * size + len(batch)

            if i < len(batches) - 1 and not self.stop_event.is_set():
                delay = self.settings.batch_delay_seconds
                logger.info(f"Waiting {delay:.1f} seconds before next batch...", extra={"step": "orchestrate", "batch": i + 1})
                # Returns early when a shutdown is requested
                self.stop_event.wait(delay)

        return WindowOutcome(start_index, end_index, end_index)
