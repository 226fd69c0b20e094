# fixture_forecast/net_retry.py
"""Centralized retry helper for network requests (shared across clients)."""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Iterable, Optional, Tuple

import requests
from requests import Response

from .config import API_BACKOFF_FACTOR, API_MAX_RETRIES, API_TIMEOUT, setup_logger
from .utils import (
    create_retry_session,
    request_with_retries as _request_with_retries,
    sanitize_error_message,
    scrub_url,
)

_logger = setup_logger(__name__)


def _normalize_status_list(status_forcelist: Iterable[int] | None) -> Tuple[int, ...]:
    if not status_forcelist:
        return tuple()
    return tuple(sorted(set(int(s) for s in status_forcelist)))


def _scrub(value: str) -> str:
    return sanitize_error_message(scrub_url(value)) if value.startswith("http") else sanitize_error_message(value)


@lru_cache(maxsize=16)
def _get_session(
    retries: int,
    backoff_factor: float,
    status_forcelist: Tuple[int, ...],
) -> requests.Session:
    return create_retry_session(
        max_retries=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
    )


def request_with_retries(
    method: str,
    url: str,
    *,
    retries: int = API_MAX_RETRIES,
    backoff_factor: float = API_BACKOFF_FACTOR,
    status_forcelist: Iterable[int] | None = (500, 502, 503, 504),
    timeout: float = API_TIMEOUT,
    logger: Optional[logging.Logger] = None,
    context: Optional[str] = None,
    session: Optional[Any] = None,  # anything with .request(...)
    **kwargs: Any,
) -> Response:
    """
    Perform an HTTP request with shared retry/backoff.
    - If `session` is provided it is used as-is.
    - Otherwise a cached retry-configured requests.Session is used.
    """
    normalized_statuses = _normalize_status_list(status_forcelist)
    session_obj = session or _get_session(retries, backoff_factor, normalized_statuses)

    return _request_with_retries(
        session_obj,
        method,
        url,
        timeout=timeout,
        max_retries=retries,
        backoff_factor=backoff_factor,
        status_forcelist=normalized_statuses,
        logger=logger or _logger,
        context=context or f"{method} {scrub_url(url)}",
        sanitize=_scrub,
        **kwargs,
    )


__all__ = ["request_with_retries"]
