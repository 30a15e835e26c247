from __future__ import annotations

import os


# Central routing for LLM use-cases. Edit here to change per-operation defaults.
# You can also override per-route model via env vars for quick testing.
#
# Keys are use_case identifiers consumed by services/llm_client.py
ROUTES: dict[str, dict] = {
    # Founder/executive likelihood scoring (OpenAI chat, JSON mode)
    "founder_classification": {
        "provider": os.getenv("LLM_CLASSIFIER_PROVIDER", "openai"),
        "model": os.getenv("OPENAI_MODEL_CLASSIFIER"),  # falls back to global OPENAI_MODEL
        "response_format": {"type": "json_object"},
        # Logical operation name for logging (not a vendor API name)
        "operation": "founder_classification",
    },
}
