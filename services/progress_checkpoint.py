from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from models import CheckpointState

logger = logging.getLogger(__name__)


class ProgressCheckpoint:
    """Single-file resume cursor: ``{"lastProcessedIndex": n}``."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> CheckpointState:
        if not self.path.exists():
            return CheckpointState()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return CheckpointState.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Error reading progress file {self.path}: {e}", extra={"step": "checkpoint"})
            return CheckpointState()

    def save(self, index: int) -> None:
        state = CheckpointState(last_processed_index=index)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(state.model_dump(by_alias=True), indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.info(f"Progress saved at index {index}", extra={"step": "checkpoint"})
