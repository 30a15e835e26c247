from __future__ import annotations

import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse


def _host_matches(url: str, domain: str) -> bool:
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return False
    domain = domain.lower()
    return host == domain or host.endswith("." + domain)


def extract_links(payload: Optional[Dict[str, Any]], domain: str = "x.com") -> Optional[List[str]]:
    """Links from a search payload that point at ``domain``; None when there are none."""
    if not payload:
        return None
    organic = payload.get("organic") or []
    if not organic:
        return None
    links = [
        item["link"]
        for item in organic
        if isinstance(item, dict) and isinstance(item.get("link"), str) and _host_matches(item["link"], domain)
    ]
    return links or None


def pick_canonical_profile(links: Optional[List[str]]) -> Optional[str]:
    """First link that is a bare profile root: one path segment, no query string."""
    if not links:
        return None
    for link in links:
        try:
            u = urlparse(link)
        except ValueError:
            continue
        parts = [p for p in (u.path or "").split("/") if p]
        if len(parts) == 1 and not u.query:
            return link
    return None


def extract_handle(url: Optional[str], domain: str = "x.com") -> Optional[str]:
    if not url:
        return None
    m = re.search(r"(?:^|//|\.)" + re.escape(domain) + r"/([^/?#]+)", url)
    return m.group(1) if m else None
