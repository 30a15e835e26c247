from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .input_record import InputRecord


ResultStatus = Literal["failed", "error", "processed"]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ResultRecord(BaseModel):
    """Per-founder outcome; exactly one per InputRecord."""

    name: str
    company: str
    email: str = ""
    status: ResultStatus
    handle: Optional[str] = None
    profile_url: Optional[str] = None
    dm_status: Optional[str] = None
    description: Optional[str] = None
    role: Optional[str] = None
    rank: Optional[int] = None
    confidence_reason: Optional[str] = None
    reason: Optional[str] = None
    processed_at: str = Field(default_factory=utc_now_iso)

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def for_record(cls, record: InputRecord, status: ResultStatus, **fields: Any) -> "ResultRecord":
        return cls(name=record.founder_name, company=record.company_name, email=record.email, status=status, **fields)

    def to_output(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
