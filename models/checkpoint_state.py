from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CheckpointState(BaseModel):
    """Resume cursor persisted between runs."""

    last_processed_index: int = Field(default=0, ge=0, alias="lastProcessedIndex")

    model_config = ConfigDict(populate_by_name=True)
