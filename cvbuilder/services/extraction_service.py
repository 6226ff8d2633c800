# cvbuilder/services/extraction_service.py
from __future__ import annotations

import logging

from cvbuilder.core.config import Settings
from cvbuilder.core.exceptions import ExtractionError, ProviderError
from cvbuilder.services.gemini_client import GeminiClient
from cvbuilder.services.prompts import EXTRACTION_PROMPT

logger = logging.getLogger(__name__)


class DocumentExtractor:
    """Sends one encoded document to the multimodal model and returns its text."""

    def __init__(self, client: GeminiClient, model: str, temperature: float = 0.1, max_output_tokens: int = 4096):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    @classmethod
    def from_settings(cls, client: GeminiClient, cfg: Settings) -> "DocumentExtractor":
        return cls(client, cfg.extraction_model, cfg.extraction_temperature, cfg.extraction_max_tokens)

    async def extract(self, encoded: str, mime_type: str) -> str:
        parts = [
            {"text": EXTRACTION_PROMPT},
            {"inline_data": {"mime_type": mime_type, "data": encoded}},
        ]
        try:
            return await self.client.generate(self.model, parts, self.temperature, self.max_output_tokens)
        except ProviderError as e:
            raise ExtractionError(f"Failed to extract text from document: {e}", reason=e.reason) from e
