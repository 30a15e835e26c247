from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .result_record import ResultRecord, utc_now_iso


RunStatus = Literal["complete", "partial_results"]


def success_rate(results: List[ResultRecord]) -> str:
    if not results:
        return "0.0%"
    processed = sum(1 for r in results if r.status == "processed")
    return f"{processed / len(results) * 100:.1f}%"


class RunMetadata(BaseModel):
    batch_number: Optional[int] = None
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    total_processed: int
    successful_matches: int
    success_rate: str
    status: RunStatus
    generated_at: str = Field(default_factory=utc_now_iso)

    model_config = ConfigDict(extra="ignore")


class RunOutput(BaseModel):
    results: List[ResultRecord]
    metadata: RunMetadata

    @classmethod
    def build(
        cls,
        results: List[ResultRecord],
        *,
        status: RunStatus,
        batch_number: Optional[int] = None,
        start_index: Optional[int] = None,
        end_index: Optional[int] = None,
    ) -> "RunOutput":
        metadata = RunMetadata(
            batch_number=batch_number,
            start_index=start_index,
            end_index=end_index,
            total_processed=len(results),
            successful_matches=sum(1 for r in results if r.status == "processed"),
            success_rate=success_rate(results),
            status=status,
        )
        return cls(results=list(results), metadata=metadata)

    def to_output(self) -> Dict[str, Any]:
        return {
            "results": [r.to_output() for r in self.results],
            "metadata": self.metadata.model_dump(exclude_none=True),
        }
