from __future__ import annotations

import json
import logging
from typing import Optional

from pydantic import ValidationError

from models import ClassificationVerdict
from ports.llm import LLMClientPort
from services.llm_client import LLMClient

logger = logging.getLogger(__name__)


PROMPT_NAME = "founder_classification_v1"

PROMPT_TEMPLATE = """Given this person's information:
Handle: {handle}
Company: {company}
Profile description: {description}

Instructions:
- Determine if they are a founder/cofounder/CEO/CTO based on their description
- Rank them on a scale of 1-10 (10 highest, 1 lowest) based on likelihood
- Return result in JSON format with fields: role, rank, confidence_reason"""


def build_prompt(handle: str, description: Optional[str], company: str) -> str:
    return PROMPT_TEMPLATE.format(handle=handle, company=company, description=description or "(none)")


class FounderClassifier:
    def __init__(self, llm: Optional[LLMClientPort] = None) -> None:
        self.llm = llm or LLMClient()

    def classify(self, handle: str, description: Optional[str], company: str) -> Optional[ClassificationVerdict]:
        """Score how likely ``handle`` is a founder/executive; None on any failure."""
        prompt = build_prompt(handle, description, company)
        try:
            resp = self.llm.chat(
                use_case="founder_classification",
                messages=[{"role": "user", "content": prompt}],
                prompt_name=PROMPT_NAME,
                prompt_text=prompt,
                extras={"handle": handle, "company": company},
            )
            content = resp.choices[0].message.content if resp.choices else None
            return ClassificationVerdict.model_validate(json.loads(content or ""))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Unusable classification for {handle}: {e}", extra={"step": "classify", "handle": handle})
            return None
        except Exception as e:
            logger.error(f"Error analyzing profile for {handle}: {e}", extra={"step": "classify", "handle": handle, "status": "error"})
            return None
