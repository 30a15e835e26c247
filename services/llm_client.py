from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from config.llm_routes import ROUTES
from config.settings import Settings, get_settings
from utils.llm_logger import log_call, sha256_text


class LLMClient:
    """Minimal wrapper to centralize per-use-case routing and logging."""

    def __init__(self, settings: Optional[Settings] = None, client: Any = None) -> None:
        self.settings = settings or get_settings()
        self._client = client

    def _openai(self) -> Any:
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(api_key=self.settings.openai_api_key)
        return self._client

    def chat(
        self,
        *,
        use_case: str,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        prompt_name: Optional[str] = None,
        prompt_text: Optional[str] = None,
        extras: Optional[Dict[str, Any]] = None,
    ) -> Any:
        route = ROUTES.get(use_case, {})
        provider = route.get("provider", "openai")
        model = route.get("model") or self.settings.openai_model or "gpt-4o-mini"
        op = route.get("operation", "chat")
        temp = temperature if temperature is not None else route.get("temperature")

        if provider != "openai":
            raise NotImplementedError(f"Provider not implemented: {provider}")

        kwargs: Dict[str, Any] = {"model": model, "messages": messages}
        # Only pass temperature if explicitly provided (some models only accept default)
        if temp is not None:
            kwargs["temperature"] = temp
        if route.get("response_format"):
            kwargs["response_format"] = route["response_format"]

        t0 = time.time()
        try:
            resp = self._openai().chat.completions.create(**kwargs)
        except Exception as e:
            log_call(
                caller=f"llm_client.chat:{use_case}",
                provider=provider,
                model=model,
                operation=op,
                prompt_name=prompt_name,
                prompt_hash=sha256_text(prompt_text),
                duration_ms=int((time.time() - t0) * 1000),
                status="error",
                error=str(e),
                extras=extras,
                settings=self.settings,
            )
            raise
        dt_ms = int((time.time() - t0) * 1000)

        usage_obj = None
        usage = getattr(resp, "usage", None)
        if usage:
            usage_obj = {
                "prompt_tokens": getattr(usage, "prompt_tokens", None),
                "completion_tokens": getattr(usage, "completion_tokens", None),
                "total_tokens": getattr(usage, "total_tokens", None),
            }

        log_call(
            caller=f"llm_client.chat:{use_case}",
            provider=provider,
            model=model,
            operation=op,
            prompt_name=prompt_name,
            prompt_hash=sha256_text(prompt_text),
            duration_ms=dt_ms,
            status="ok",
            usage=usage_obj,
            extras=extras,
            settings=self.settings,
        )

        return resp
