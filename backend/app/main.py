# backend/app/main.py
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.app.api.analyze import router as analyze_router
from backend.app.api.keys import router as keys_router
from backend.app.api.translate import router as translate_router
from backend.app.services import get_orchestrator, get_settings
from what_should_i_do.config.logging import configure_logging
from what_should_i_do.errors import AnalysisError, ErrorCode

ERROR_STATUS = {
    ErrorCode.INPUT_TOO_SHORT: 400,
    ErrorCode.API_KEY_EXHAUSTED: 503,
    ErrorCode.ALL_KEYS_EXHAUSTED: 503,
    ErrorCode.TRANSLATION_FAILED: 502,
}

settings = get_settings()
configure_logging(settings.log_level, settings.log_file)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield
    # Only tear down an orchestrator that was actually built.
    if get_orchestrator.cache_info().currsize:
        get_orchestrator().shutdown()


app = FastAPI(title="what-should-i-do API", lifespan=lifespan)
app.include_router(analyze_router, prefix="/api")
app.include_router(translate_router, prefix="/api")
app.include_router(keys_router, prefix="/api")


@app.exception_handler(AnalysisError)
async def analysis_error_handler(_request: Request, exc: AnalysisError) -> JSONResponse:
    return JSONResponse(status_code=ERROR_STATUS.get(exc.code, 500), content=exc.to_dict())


@app.get("/api/health")
def health() -> dict:
    return {"ok": True, "analyzer": settings.analyzer, "profile": settings.rule_profile}
