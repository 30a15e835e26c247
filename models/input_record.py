from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict


def build_search_query(first_name: str, last_name: str, company: str, *, domain: str, excluded_domain: str) -> str:
    """URL-encoded search query for a founder's profile on ``domain``."""
    raw = f"site:{domain} ({first_name}) ({last_name}) ({company}) -site:{excluded_domain}"
    # Same character set as encodeURIComponent: keep !*'() literal
    return quote(raw, safe="!*'()")


class InputRecord(BaseModel):
    """One founder row from the input CSV. Never mutated once built."""

    founder_name: str
    company_name: str
    email: str = ""
    search_query: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_row(cls, row: Dict[str, Optional[str]], *, domain: str, excluded_domain: str) -> "InputRecord":
        first_name = (row.get("first_name") or "").strip()
        last_name = (row.get("last_name") or "").strip()
        company = (row.get("company") or "").strip()
        return cls(
            founder_name=f"{first_name} {last_name}".strip(),
            company_name=company,
            email=(row.get("email") or "").strip(),
            search_query=build_search_query(
                first_name, last_name, company, domain=domain, excluded_domain=excluded_domain
            ),
        )
