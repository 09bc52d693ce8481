from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from backend.app.services import get_translator
from what_should_i_do.translation.client import SUPPORTED_LANGUAGES, TranslationClient

router = APIRouter()


class TranslateRequest(BaseModel):
    summary: str
    language: str


@router.get("/translate/languages")
def list_languages() -> dict:
    return {"ok": True, "languages": SUPPORTED_LANGUAGES}


@router.post("/translate")
async def translate_endpoint(
    body: TranslateRequest,
    translator: TranslationClient = Depends(get_translator),
) -> dict:
    translated = await run_in_threadpool(translator.translate, body.summary, body.language)
    return {"ok": True, "language": body.language, "translatedText": translated}
