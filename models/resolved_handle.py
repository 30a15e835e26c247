from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .input_record import InputRecord


class ResolvedHandle(BaseModel):
    """A record whose canonical profile and handle were found, pending the snapshot lookup."""

    record: InputRecord
    handle: str
    profile_url: str

    model_config = ConfigDict(frozen=True)
