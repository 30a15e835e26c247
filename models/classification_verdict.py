from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ClassificationVerdict(BaseModel):
    """LLM structured output: founder/executive likelihood."""

    role: str
    rank: int = Field(ge=1, le=10)
    confidence_reason: str = ""

    model_config = ConfigDict(extra="ignore")
