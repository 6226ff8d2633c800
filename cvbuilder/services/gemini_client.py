# cvbuilder/services/gemini_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from cvbuilder.core.exceptions import FailureReason, ProviderError

logger = logging.getLogger(__name__)


def _candidate_text(body: Any) -> Optional[str]:
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class GeminiClient:
    """
    Thin async client for the ``models/{model}:generateContent`` endpoint.

    One POST per call, no retries. Every failure is raised as ProviderError
    with a FailureReason so callers never have to inspect message text.
    The API key travels in the ``x-goog-api-key`` header.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _url(self, model: str) -> str:
        return f"{self.base_url}/models/{model}:generateContent"

    async def generate(
        self,
        model: str,
        parts: List[Dict[str, Any]],
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        payload = {
            "contents": [{"parts": parts}],
            "generationConfig": {"temperature": temperature, "maxOutputTokens": max_output_tokens},
        }
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self._url(model), json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise ProviderError(f"Request to {model} timed out after {self.timeout:g}s", reason=FailureReason.TIMEOUT) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Request to {model} failed: {e}", reason=FailureReason.NETWORK) from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("error"):
            err = body["error"]
            msg = err.get("message") if isinstance(err, dict) else str(err)
            # provider errors usually come with a 4xx/5xx too; the body is more useful
            raise ProviderError(f"Provider error ({resp.status_code}): {msg}", reason=FailureReason.PROVIDER)

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.warning("generateContent %s returned %s: %s", model, resp.status_code, resp.text[:300])
            raise ProviderError(f"Provider responded with HTTP {resp.status_code}", reason=FailureReason.HTTP_STATUS)

        text = _candidate_text(body)
        if text is None:
            raise ProviderError("Provider response did not contain candidate text", reason=FailureReason.MALFORMED)
        return text
