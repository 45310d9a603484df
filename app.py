"""FastAPI service exposing the per-post translation cache."""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from post_translations.cache import TranslationCache
from post_translations.config import FENCE_REQUESTS, LOG_LEVEL, PROVIDER
from post_translations.translation import build_provider
from post_translations.utils import _build_async_client

# ─── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)5s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("post_translations.app")


# ─── Schemas ───────────────────────────────────────────────────────────────────
class TranslateRequest(BaseModel):
    text: str = Field(..., min_length=1)
    target_language: Optional[str] = None


# ─── Lifecycle ─────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    async with _build_async_client() as client:
        cache = TranslationCache(build_provider(PROVIDER, client=client), fence_requests=FENCE_REQUESTS)
        app.state.cache = cache
        logger.info("Translation service ready (provider=%s, fencing=%s)", PROVIDER, FENCE_REQUESTS)
        try:
            yield
        finally:
            await cache.drain()
            logger.info("Translation service stopped")


app = FastAPI(title="Post translations", lifespan=lifespan)


def get_cache(request: Request) -> TranslationCache:
    return request.app.state.cache


# ─── Routes ────────────────────────────────────────────────────────────────────
@app.get("/translations")
async def list_translations(cache: TranslationCache = Depends(get_cache)) -> Dict[str, dict]:
    return {key: record.to_dict() for key, record in cache.snapshot().items()}


@app.get("/translations/{key:path}")
async def read_translation(key: str, cache: TranslationCache = Depends(get_cache)) -> dict:
    record = cache.get(key)
    if record is None:
        raise HTTPException(status_code=404, detail=f"No translation for {key!r}")
    return record.to_dict()


@app.post("/translations/{key:path}")
async def translate(
    key: str,
    payload: TranslateRequest,
    response: Response,
    wait: bool = False,
    cache: TranslationCache = Depends(get_cache),
) -> dict:
    try:
        if wait:
            await cache.request(key, payload.text, payload.target_language)
        else:
            cache.schedule(key, payload.text, payload.target_language)
            response.status_code = 202
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    record = cache.get(key)
    if record is None:
        # Fenced caches drop results for keys cleared mid-flight.
        raise HTTPException(status_code=404, detail=f"No translation for {key!r}")
    return record.to_dict()


@app.delete("/translations/{key:path}", status_code=204)
async def clear_translation(key: str, cache: TranslationCache = Depends(get_cache)) -> Response:
    cache.clear(key)
    return Response(status_code=204)


@app.get("/health", response_class=HTMLResponse)
def healthcheck() -> HTMLResponse:
    return HTMLResponse("ok")


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=int(os.getenv("PORT", 8000)), reload=False)
