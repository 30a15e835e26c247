from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


SEPARATOR = "\n-------------------------------------------"


def filter_processed_founders(data: Dict[str, Any], batch_number: Optional[int] = None) -> Dict[str, Any]:
    """Reduce a run output to the founders that made it through classification.

    ``data`` is the serialized run output: ``{"results": [...], "metadata": {...}}``.
    """
    results: List[Dict[str, Any]] = data.get("results") or []
    metadata: Dict[str, Any] = data.get("metadata") or {}
    founders = []
    for r in results:
        if r.get("status") != "processed":
            continue
        rank = r.get("rank")
        founders.append({
            "name": r.get("name"),
            "company": r.get("company"),
            "profile_url": r.get("profile_url"),
            "role": r.get("role") or "Unknown",
            "confidence_rank": f"{rank}/10" if rank is not None else "N/A",
        })
    filtered: Dict[str, Any] = {
        "founders": founders,
        "stats": {
            "total_founders": metadata.get("total_processed", len(results)),
            "successful_matches": metadata.get("successful_matches", len(founders)),
            "success_rate": metadata.get("success_rate", "N/A"),
        },
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }
    if batch_number is not None:
        filtered["batch_number"] = batch_number
    return filtered


def render_founders_text(filtered: Dict[str, Any]) -> str:
    """Human-readable rendering of the filtered founders list."""
    stats = filtered.get("stats", {})
    header = (
        "\nFOUNDER PROFILES SUMMARY\n"
        "======================\n"
        f"Total Founders Analyzed: {stats.get('total_founders', 0)}\n"
        f"Successful Matches: {stats.get('successful_matches', 0)}\n"
        f"Success Rate: {stats.get('success_rate', 'N/A')}\n"
        f"Generated at: {filtered.get('generated_at', 'N/A')}\n"
        "\nDETAILED RESULTS:\n"
    )
    blocks = [
        f"\n* {f.get('name')}\n"
        f"   Company: {f.get('company')}\n"
        f"   Role: {f.get('role')}\n"
        f"   Profile: {f.get('profile_url')}\n"
        f"   Confidence Rank: {f.get('confidence_rank')}\n"
        for f in filtered.get("founders", [])
    ]
    return header + SEPARATOR.join(blocks)


def print_summary(data: Dict[str, Any], output_path: Optional[Path] = None) -> None:
    """Print summary of the run."""
    metadata = data.get('metadata', {})

    print("\n" + "="*60)
    print("FOUNDER DM FINDER - SUMMARY")
    print("="*60)
    if metadata.get('batch_number') is not None:
        start = metadata.get('start_index', 0)
        print(f"Batch {metadata['batch_number']} - Records {start + 1} to {metadata.get('end_index', 'N/A')}")
    print(f"Status: {metadata.get('status', 'N/A')}")
    print(f"Total Founders Analyzed: {metadata.get('total_processed', 0)}")
    print(f"Successful Matches: {metadata.get('successful_matches', 0)}")
    print(f"Success Rate: {metadata.get('success_rate', 'N/A')}")
    print(f"Generated At: {metadata.get('generated_at', 'N/A')}")
    if output_path:
        print(f"Output File: {output_path}")
    print("="*60)
