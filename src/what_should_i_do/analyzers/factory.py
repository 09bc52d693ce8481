from __future__ import annotations

import logging
from typing import Optional

from what_should_i_do.analyzers.base import RemoteAnalyzer
from what_should_i_do.analyzers.ollama import OllamaAnalyzer
from what_should_i_do.analyzers.openrouter import OpenRouterAnalyzer
from what_should_i_do.config.settings import Settings
from what_should_i_do.storage.key_status import KeyStatusTable

logger = logging.getLogger(__name__)

ANALYZER_NAMES = ("openrouter", "ollama", "none")


def build_analyzer(settings: Settings, key_status: Optional[KeyStatusTable] = None) -> Optional[RemoteAnalyzer]:
    """Pick the configured backend; None means rule-based analysis only."""
    name = settings.analyzer
    if name not in ANALYZER_NAMES:
        raise ValueError(f"Unknown analyzer {name!r}; expected one of {ANALYZER_NAMES}")

    if name == "none":
        return None

    if name == "ollama":
        return OllamaAnalyzer(model=settings.ollama_model, base_url=settings.ollama_host)

    if not settings.api_keys:
        logger.info("No OpenRouter API keys configured; using rule-based analysis only")
        return None
    return OpenRouterAnalyzer(
        settings.api_keys,
        model=settings.openrouter_model,
        base_url=settings.openrouter_base_url,
        app_url=settings.app_url,
        key_status=key_status or KeyStatusTable(len(settings.api_keys)),
    )
