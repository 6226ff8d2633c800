# cvbuilder/utils/analytics.py
from __future__ import annotations
import logging
from typing import Optional

import posthog
from fastapi import Request

from cvbuilder.core.config import Settings

logger = logging.getLogger(__name__)


def init_analytics(cfg: Settings) -> None:
    # PostHog (optional)
    if cfg.posthog_key:
        posthog.api_key = cfg.posthog_key
        posthog.project_api_key = cfg.posthog_key
        posthog.host = cfg.posthog_host


def track(request: Optional[Request], cfg: Settings, event: str, props: Optional[dict] = None) -> None:
    """Fire-and-forget product event; analytics problems never reach the caller."""
    if not cfg.posthog_key:
        return
    try:
        ident = request.client.host if request is not None and request.client else "0.0.0.0"
        posthog.capture(distinct_id=ident, event=event, properties=props or {})
    except Exception as e:
        logger.debug("posthog capture failed for %s: %s", event, e)
