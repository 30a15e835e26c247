from __future__ import annotations

import hashlib
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from config.settings import Settings, get_settings


def _ensure_parent_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass


def sha256_text(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def log_call(
    *,
    caller: str,
    provider: str,
    model: Optional[str],
    operation: str,
    prompt_name: Optional[str] = None,
    prompt_hash: Optional[str] = None,
    duration_ms: Optional[int] = None,
    status: str = "ok",
    error: Optional[str] = None,
    usage: Optional[Dict[str, Any]] = None,
    extras: Optional[Dict[str, Any]] = None,
    settings: Optional[Settings] = None,
) -> None:
    """Append a single JSON line describing an LLM call if tracing is enabled.

    ``settings`` defaults to the process-wide settings; callers holding their own
    (e.g. an LLMClient built with overrides) pass them so the trace flag and path match.
    """
    settings = settings or get_settings()
    if not settings.llm_trace:
        return

    log_path = Path(settings.llm_log_path)
    _ensure_parent_dir(log_path)

    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "caller": caller,
        "provider": provider,
        "model": model,
        "operation": operation,
        "prompt_name": prompt_name,
        "prompt_hash": prompt_hash,
        "duration_ms": duration_ms,
        "status": status,
        "error": error,
        "usage": usage or {},
    }
    # Include run metadata if present
    run_id = os.getenv("RUN_ID")
    if run_id:
        payload["run_id"] = run_id

    if extras:
        # Kept under a dedicated key to avoid collisions
        payload["extras"] = extras

    try:
        with log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
    except OSError:
        # Never break the app on logging failures
        return
