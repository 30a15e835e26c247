from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from models import ClassificationVerdict, ProfileData


class SearchFetcherPort(Protocol):
    def fetch(self, url: str) -> Optional[Dict[str, Any]]:
        ...


class ProfileResolverPort(Protocol):
    def resolve_profiles(self, handles: Sequence[str]) -> List[ProfileData]:
        ...


class ClassifierPort(Protocol):
    def classify(self, handle: str, description: Optional[str], company: str) -> Optional[ClassificationVerdict]:
        ...
