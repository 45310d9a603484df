from typing import Optional

import httpx

from .config import GENERIC_ERROR_MESSAGE, HTTP_TIMEOUT, USER_AGENT


def _build_async_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"user-agent": USER_AGENT},
        timeout=HTTP_TIMEOUT if timeout is None else timeout,
        follow_redirects=True,
    )


def describe_error(exc: BaseException) -> str:
    """Human-readable message for a failed translation."""
    message = str(exc).strip()
    return message or GENERIC_ERROR_MESSAGE


def require_text(name: str, value) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string")
    return value
