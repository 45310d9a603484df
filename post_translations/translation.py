import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Optional, Protocol

import httpx
from deep_translator import GoogleTranslator

from .config import MAX_TEXT_CHARS, PROVIDER, TRANSLATE_ENDPOINT
from .utils import _build_async_client, describe_error

logger = logging.getLogger(__name__)

AUTO_DETECT = "auto"


class TranslationProviderError(Exception):
    """Raised by a provider when a translation could not be produced."""


class TranslationTransportError(TranslationProviderError):
    """The request never produced a usable HTTP response."""


class MalformedResponseError(TranslationProviderError):
    """The provider answered with a payload of an unexpected shape."""


@dataclass(frozen=True)
class TranslationResult:
    translated_text: str
    detected_source_language: Optional[str] = None


class TranslationProvider(Protocol):
    async def translate(
        self, text: str, target_language: str, source_language: str = AUTO_DETECT
    ) -> TranslationResult:
        ...


def parse_translation_payload(data: Any) -> TranslationResult:
    """Decode a ``translate_a/single`` response body.

    The body looks like ``[[[fragment, original, ...], ...], None, "en", ...]``:
    the first element holds the translated segments, the third one the
    detected source language.
    """
    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        raise MalformedResponseError("Invalid translation response")

    fragments: List[str] = []
    for segment in data[0]:
        if not isinstance(segment, list):
            raise MalformedResponseError("Invalid translation response")
        if segment and segment[0]:
            fragments.append(str(segment[0]))

    detected = None
    if len(data) > 2 and isinstance(data[2], str) and data[2]:
        detected = data[2]
    return TranslationResult("".join(fragments), detected)


class GoogleTranslateProvider:
    """Translator backed by the public ``client=gtx`` endpoint."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        endpoint: str = TRANSLATE_ENDPOINT,
    ) -> None:
        self._client = client
        self.endpoint = endpoint

    async def translate(
        self, text: str, target_language: str, source_language: str = AUTO_DETECT
    ) -> TranslationResult:
        params = {
            "client": "gtx",
            "sl": source_language,
            "tl": target_language,
            "dt": "t",
            "q": text,
        }
        if self._client is not None:
            return await self._fetch(self._client, params)
        async with _build_async_client() as client:
            return await self._fetch(client, params)

    async def _fetch(self, client: httpx.AsyncClient, params: dict) -> TranslationResult:
        try:
            response = await client.get(self.endpoint, params=params)
        except httpx.HTTPError as exc:
            detail = str(exc).strip() or type(exc).__name__
            raise TranslationTransportError(f"Translation failed: {detail}") from exc

        if not response.is_success:
            reason = response.reason_phrase or str(response.status_code)
            logger.debug("Translate endpoint answered %s %s", response.status_code, reason)
            raise TranslationTransportError(f"Translation failed: {reason}")

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError("Invalid translation response") from exc
        return parse_translation_payload(data)


@lru_cache(maxsize=8)
def _get_translator(source_lang: str, target_lang: str) -> GoogleTranslator:
    return GoogleTranslator(source=source_lang, target=target_lang)


class DeepTranslatorProvider:
    """Translator backed by ``deep_translator``; reports no detected source."""

    def __init__(self, max_chars: int = MAX_TEXT_CHARS) -> None:
        self.max_chars = max_chars

    def _translate_sync(self, text: str, target_language: str, source_language: str) -> str:
        translator = _get_translator(source_language, target_language)
        return translator.translate(text[: self.max_chars])

    async def translate(
        self, text: str, target_language: str, source_language: str = AUTO_DETECT
    ) -> TranslationResult:
        try:
            translated = await asyncio.to_thread(
                self._translate_sync, text, target_language, source_language
            )
        except Exception as exc:
            raise TranslationProviderError(describe_error(exc)) from exc
        if translated is None:
            raise MalformedResponseError("Invalid translation response")
        return TranslationResult(str(translated))


def build_provider(
    name: str = PROVIDER, client: Optional[httpx.AsyncClient] = None
) -> TranslationProvider:
    if name == "google":
        return GoogleTranslateProvider(client=client)
    if name == "deep":
        return DeepTranslatorProvider()
    raise ValueError(f"Unknown translation provider: {name!r}")
