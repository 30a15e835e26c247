from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class ProfileData(BaseModel):
    """Snapshot lookup outcome for a single handle."""

    status: Literal["success", "error"]
    can_dm: bool
    description: str = ""
    reason: str = ""

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def found(cls, biography: str | None) -> "ProfileData":
        return cls(status="success", can_dm=True, description=biography or "", reason="DMs are open")

    @classmethod
    def not_found(cls, *, assume_dm_open: bool) -> "ProfileData":
        reason = "Profile data not found but assuming DMs are open" if assume_dm_open else "Profile data not found"
        return cls(status="error", can_dm=assume_dm_open, reason=reason)

    @classmethod
    def api_error(cls, message: str, *, assume_dm_open: bool) -> "ProfileData":
        return cls(status="error", can_dm=assume_dm_open, reason=f"API Error: {message}")
