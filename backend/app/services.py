from __future__ import annotations

from functools import lru_cache

from what_should_i_do.app.run import build_orchestrator, build_translator
from what_should_i_do.config.settings import Settings, load_settings
from what_should_i_do.pipeline.orchestrator import AnalysisOrchestrator
from what_should_i_do.translation.client import TranslationClient


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


# One per process: every request shares the credential status table.
@lru_cache(maxsize=1)
def get_orchestrator() -> AnalysisOrchestrator:
    return build_orchestrator(get_settings())


@lru_cache(maxsize=1)
def get_translator() -> TranslationClient:
    return build_translator(get_settings())
