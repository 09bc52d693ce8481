from __future__ import annotations

import logging
from typing import Dict

import requests

from what_should_i_do.config.settings import DEFAULT_TRANSLATE_URL
from what_should_i_do.errors import ErrorCode, create_error
from what_should_i_do.extractors.highlight import strip_markup

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES: Dict[str, str] = {
    "en": "English",
    "fr": "French",
    "es": "Spanish",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "tl": "Filipino",
}


class TranslationClient:
    """
    Display-only translation of a finished summary via the MyMemory lookup API.

    Failures surface as TRANSLATION_FAILED and are never retried here.
    """

    def __init__(self, url: str = DEFAULT_TRANSLATE_URL, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    def translate(self, summary: str, language: str, source: str = "en") -> str:
        language = (language or "").strip().lower()
        if language not in SUPPORTED_LANGUAGES:
            raise create_error(f"Unsupported language {language!r}", ErrorCode.TRANSLATION_FAILED)

        plain = strip_markup(summary or "").strip()
        if not plain or language == source:
            return plain

        try:
            response = requests.get(
                self.url,
                params={"q": plain, "langpair": f"{source}|{language}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Translation to %s failed: %s", language, exc)
            raise create_error("Translation service is unavailable", ErrorCode.TRANSLATION_FAILED) from exc

        translated = (data.get("responseData") or {}).get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str) or not translated.strip():
            raise create_error("Translation service returned no text", ErrorCode.TRANSLATION_FAILED)
        return translated.strip()
