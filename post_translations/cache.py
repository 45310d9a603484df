import asyncio
import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

from .config import FENCE_REQUESTS, SOURCE_LANG, TARGET_LANG
from .translation import TranslationProvider, TranslationProviderError
from .utils import describe_error, require_text

logger = logging.getLogger(__name__)


class TranslationStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class TranslationRecord:
    target_language: str
    status: TranslationStatus
    translated_text: str = ""
    source_language: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def pending(cls, target_language: str) -> "TranslationRecord":
        return cls(target_language, TranslationStatus.PENDING)

    @classmethod
    def success(
        cls, target_language: str, translated_text: str, source_language: Optional[str] = None
    ) -> "TranslationRecord":
        return cls(
            target_language,
            TranslationStatus.SUCCESS,
            translated_text=translated_text,
            source_language=source_language,
        )

    @classmethod
    def failed(cls, target_language: str, error_message: str) -> "TranslationRecord":
        return cls(target_language, TranslationStatus.FAILED, error_message=error_message)

    @property
    def is_complete(self) -> bool:
        return self.status is TranslationStatus.SUCCESS and bool(self.translated_text)

    def to_dict(self) -> dict:
        return {
            "translated_text": self.translated_text,
            "source_language": self.source_language,
            "target_language": self.target_language,
            "status": self.status.value,
            "error_message": self.error_message,
            "complete": self.is_complete,
        }


Listener = Callable[[str, Optional[TranslationRecord]], None]


class TranslationCache:
    """In-memory translations keyed by entity (e.g. a post URI).

    Every key moves through ``pending -> success | failed``; a new request
    for a key restarts it at ``pending`` and :meth:`clear` removes it.
    Provider failures never propagate to callers, they are stored on the
    record instead.

    Overlapping requests for one key are not merged: the last provider call
    to resolve wins, and a call that resolves after :meth:`clear` still
    writes its outcome. With ``fence_requests`` only the most recently
    issued request for a key may write, and a cleared key stays cleared.
    """

    def __init__(
        self,
        provider: TranslationProvider,
        fence_requests: bool = FENCE_REQUESTS,
        source_language: str = SOURCE_LANG,
        default_target: str = TARGET_LANG,
    ) -> None:
        self._provider = provider
        self.fence_requests = fence_requests
        self.source_language = source_language
        self.default_target = default_target
        self._store: Dict[str, TranslationRecord] = {}
        self._epochs: Dict[str, int] = {}
        self._counter = itertools.count(1)
        self._listeners: List[Listener] = []
        self._tasks: Set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    # ─── Reads ────────────────────────────────────────────────────────────────
    def get(self, key: str) -> Optional[TranslationRecord]:
        return self._store.get(key)

    def is_complete(self, key: str) -> bool:
        record = self._store.get(key)
        return record is not None and record.is_complete

    def snapshot(self) -> Dict[str, TranslationRecord]:
        return dict(self._store)

    # ─── Writes ───────────────────────────────────────────────────────────────
    async def request(self, key: str, text: str, target_language: Optional[str] = None) -> None:
        target, epoch = self._begin(key, text, target_language)
        await self._resolve(key, text, target, epoch)

    def schedule(
        self, key: str, text: str, target_language: Optional[str] = None
    ) -> "asyncio.Task[None]":
        """Mark ``key`` pending right away and translate in a background task."""
        loop = asyncio.get_running_loop()
        target, epoch = self._begin(key, text, target_language)
        task = loop.create_task(self._resolve(key, text, target, epoch))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def clear(self, key: str) -> None:
        self._epochs.pop(key, None)
        if self._store.pop(key, None) is not None:
            logger.debug("Cleared translation for %s", key)
            self._notify(key, None)

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ─── Observers ────────────────────────────────────────────────────────────
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, key: str, record: Optional[TranslationRecord]) -> None:
        for listener in list(self._listeners):
            try:
                listener(key, record)
            except Exception:
                logger.exception("Translation listener %r failed for %s", listener, key)

    # ─── Internals ────────────────────────────────────────────────────────────
    def _write(self, key: str, record: TranslationRecord) -> None:
        self._store[key] = record
        logger.debug("Translation %s -> %s", key, record.status.value)
        self._notify(key, record)

    def _begin(self, key: str, text: str, target_language: Optional[str]) -> Tuple[str, int]:
        require_text("key", key)
        require_text("text", text)
        target = self.default_target if target_language is None else target_language
        require_text("target_language", target)

        epoch = next(self._counter)
        self._epochs[key] = epoch
        self._write(key, TranslationRecord.pending(target))
        return target, epoch

    async def _resolve(self, key: str, text: str, target_language: str, epoch: int) -> None:
        try:
            result = await self._provider.translate(text, target_language, self.source_language)
        except TranslationProviderError as exc:
            logger.warning("Translation failed for %s: %s", key, exc)
            record = TranslationRecord.failed(target_language, describe_error(exc))
        except Exception as exc:
            logger.exception("Unexpected error while translating %s", key)
            record = TranslationRecord.failed(target_language, describe_error(exc))
        else:
            record = TranslationRecord.success(
                target_language, result.translated_text, result.detected_source_language
            )

        if self.fence_requests and self._epochs.get(key) != epoch:
            logger.debug("Discarding stale translation for %s", key)
            return
        self._write(key, record)
