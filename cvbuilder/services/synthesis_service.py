# cvbuilder/services/synthesis_service.py
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from cvbuilder.core.config import Settings
from cvbuilder.core.exceptions import FailureReason, GenerationError, ProviderError
from cvbuilder.schemas.base import JobAdData, SynthesisResult
from cvbuilder.services.gemini_client import GeminiClient
from cvbuilder.services.prompts import GENERATION_PROMPT, JOB_CONTEXT, NO_JOB_CONTEXT

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^\s*```[A-Za-z0-9_-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker, if present."""
    raw = (text or "").strip()
    raw = _FENCE_OPEN.sub("", raw, count=1)
    raw = _FENCE_CLOSE.sub("", raw, count=1)
    return raw.strip()


def _reject_constant(token: str) -> Any:
    # NaN and Infinity are not JSON and cannot be sent back to the client
    raise ValueError(f"non-standard JSON constant {token}")


def parse_generation(text: str) -> SynthesisResult:
    raw = strip_code_fences(text)
    try:
        data = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:  # JSONDecodeError is a ValueError
        logger.error("Failed to parse generated JSON: %.300s", raw)
        raise GenerationError(f"Failed to parse AI response: {e}", reason=FailureReason.PARSE) from e

    if not isinstance(data, dict):
        raise GenerationError("AI response was not a JSON object", reason=FailureReason.PARSE)
    extracted = data.get("extractedData")
    generated = data.get("generatedContent")
    if not isinstance(extracted, dict) or not isinstance(generated, dict):
        raise GenerationError(
            "AI response is missing extractedData or generatedContent",
            reason=FailureReason.PARSE,
        )
    return SynthesisResult(extracted_data=extracted, generated_content=_clamp_score(generated))


def _clamp_score(content: Dict[str, Any]) -> Dict[str, Any]:
    score = content.get("atsScore")
    # only touch real numbers; anything else is passed through untouched
    if isinstance(score, (int, float)) and not isinstance(score, bool):
        content = {**content, "atsScore": int(round(max(0.0, min(100.0, float(score)))))}
    return content


class CVGenerator:
    """Turns the aggregated document text into CV data, resume and cover letter."""

    def __init__(self, client: GeminiClient, cfg: Settings):
        self.client = client
        self.cfg = cfg

    def build_prompt(self, extracted_text: str, job: Optional[JobAdData]) -> str:
        cfg = self.cfg
        job_context = JOB_CONTEXT.format(**job.model_dump()) if job else NO_JOB_CONTEXT
        return GENERATION_PROMPT.format(
            region=cfg.target_region,
            extracted_text=extracted_text,
            job_context=job_context,
            secondary_language=cfg.secondary_language,
            applicant_placeholder=cfg.applicant_placeholder,
            default_province=cfg.default_province,
            phone_placeholder=cfg.phone_placeholder,
            email_placeholder=cfg.email_placeholder,
        )

    async def generate(self, extracted_text: str, job: Optional[JobAdData] = None) -> SynthesisResult:
        prompt = self.build_prompt(extracted_text, job)
        try:
            text = await self.client.generate(
                self.cfg.generation_model,
                [{"text": prompt}],
                self.cfg.generation_temperature,
                self.cfg.generation_max_tokens,
            )
        except ProviderError as e:
            raise GenerationError(f"Failed to generate CV content: {e}", reason=e.reason) from e
        return parse_generation(text)
