"""
Profile lookups through the dataset snapshot API (trigger a job, then poll its snapshot).
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from config.settings import Settings, get_settings
from models import ProfileData
from services.result_extractor import extract_handle

logger = logging.getLogger(__name__)


class SnapshotError(RuntimeError):
    """The snapshot job could not be triggered or never materialised."""


def _is_running(data: Any) -> bool:
    return isinstance(data, dict) and data.get("status") == "running"


class SnapshotPoller:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.sleep = sleep

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.settings.brightdata_api_token}"}

    def trigger(self, handles: Sequence[str]) -> str:
        s = self.settings
        body = [
            {"url": f"https://{s.target_domain}/{handle}", "max_number_of_posts": s.snapshot_max_posts}
            for handle in list(handles)[: s.snapshot_max_handles]
        ]
        resp = self.session.post(
            f"{s.brightdata_api_url}/trigger",
            params={"dataset_id": s.brightdata_dataset_id, "include_errors": "true"},
            json=body,
            headers=self._headers(),
            timeout=s.request_timeout_seconds,
        )
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict):
            raise SnapshotError("Trigger response is not a JSON object")
        snapshot_id = data.get("snapshot_id")
        if not snapshot_id:
            raise SnapshotError("Trigger response missing snapshot_id")
        logger.info(f"Snapshot ID: {snapshot_id}", extra={"step": "snapshot"})
        return str(snapshot_id)

    def poll(self, snapshot_id: str) -> Any:
        """Poll until the snapshot is no longer running; raise when the budget runs out."""
        s = self.settings
        url = f"{s.brightdata_api_url}/snapshot/{snapshot_id}"
        data: Any = None
        attempts = 0
        while (data is None or _is_running(data)) and attempts < s.snapshot_max_attempts:
            attempts += 1
            self.sleep(s.snapshot_poll_interval_seconds)
            try:
                resp = self.session.get(
                    url, params={"format": "json"}, headers=self._headers(), timeout=s.request_timeout_seconds
                )
                resp.raise_for_status()
                data = resp.json()
            except (requests.exceptions.RequestException, ValueError) as e:
                logger.warning(f"Error fetching snapshot: {e}", extra={"step": "snapshot", "attempt": attempts})
                if attempts >= s.snapshot_max_attempts:
                    raise SnapshotError(str(e)) from e
                continue
            if _is_running(data):
                logger.info(
                    f"Data processing still running. Attempt {attempts}/{s.snapshot_max_attempts}",
                    extra={"step": "snapshot", "attempt": attempts, "status": "running"},
                )

        if data is None or _is_running(data):
            raise SnapshotError("Failed to get profile data after maximum attempts")
        return data

    def _profiles_by_handle(self, rows: Any) -> Dict[str, ProfileData]:
        """Map snapshot rows to handles; rows without a string ``url`` are skipped."""
        profiles: Dict[str, ProfileData] = {}
        if not isinstance(rows, list):
            return profiles
        for row in rows:
            if not isinstance(row, dict) or not isinstance(row.get("url"), str):
                continue
            row_handle = extract_handle(row["url"], self.settings.target_domain)
            if not row_handle:
                continue
            biography = row.get("biography")
            profiles[row_handle] = ProfileData.found(biography if isinstance(biography, str) else None)
        return profiles

    def resolve_profiles(self, handles: Sequence[str]) -> List[ProfileData]:
        """One ProfileData per handle, in input order. Never raises."""
        handles = list(handles)
        if not handles:
            return []
        assume_open = self.settings.assume_dm_open_on_error
        logger.info(f"Fetching profile data for {len(handles)} handles", extra={"step": "snapshot"})
        try:
            profiles = self._profiles_by_handle(self.poll(self.trigger(handles)))
        except Exception as e:
            logger.error(f"Error fetching profiles: {e}", extra={"step": "snapshot", "status": "error"})
            return [ProfileData.api_error(str(e), assume_dm_open=assume_open) for _ in handles]

        return [profiles.get(h) or ProfileData.not_found(assume_dm_open=assume_open) for h in handles]
