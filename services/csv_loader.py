from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from models import InputRecord

logger = logging.getLogger(__name__)


def read_csv_rows(path: Union[str, Path]) -> List[Dict[str, str]]:
    """Rows keyed by trimmed header names; blank lines and all-empty rows are skipped."""
    with Path(path).open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None:
            return []
        keys = [h.strip() for h in header]
        rows: List[Dict[str, str]] = []
        for values in reader:
            if not any((v or "").strip() for v in values):
                continue
            rows.append({k: (values[i] if i < len(values) else "") for i, k in enumerate(keys)})
    logger.info(f"Successfully parsed {len(rows)} records from CSV", extra={"step": "load"})
    return rows


def load_founders(
    path: Union[str, Path],
    *,
    domain: str = "x.com",
    excluded_domain: Optional[str] = None,
) -> List[InputRecord]:
    excluded = excluded_domain or f"status.{domain}"
    return [InputRecord.from_row(row, domain=domain, excluded_domain=excluded) for row in read_csv_rows(path)]
