"""
Utility functions for the fixture forecast engine
HTTP retry helpers and log sanitizing shared by the provider clients
"""

import logging
import re
import time
from typing import Any, Callable, Iterable, Optional
from urllib.parse import urlsplit, urlunsplit

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


logger = logging.getLogger(__name__)

_DEFAULT_ALLOWED_METHODS: frozenset[str] = frozenset(["HEAD", "GET", "OPTIONS"])
_DEFAULT_STATUS_FORCELIST: tuple[int, ...] = (429, 500, 502, 503, 504)


def sanitize_error_message(message):
    """
    Remove API keys from error messages to prevent security leaks.
    Handles patterns: apiKey=XXX, X-Auth-Token: XXX
    """
    if not message:
        return message

    sanitized = re.sub(r'apiKey=[A-Za-z0-9._-]+', 'apiKey=***', str(message))
    sanitized = re.sub(r'X-Auth-Token[\'":\s]+[A-Za-z0-9._-]+', 'X-Auth-Token: ***', sanitized)
    return sanitized


def scrub_url(url: Optional[str]) -> str:
    """Strip the querystring from a URL for logging."""
    if not url:
        return ""
    try:
        parts = urlsplit(url)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", parts.fragment))
    except ValueError:
        return url


def create_retry_session(
    max_retries: int,
    backoff_factor: float,
    status_forcelist: Iterable[int] | None = None,
) -> requests.Session:
    """Create a :class:`requests.Session` with retry adapters mounted.

    The adapter itself does not retry (``total=0``); attempts are driven by
    :func:`request_with_retries` so every retry is logged.
    """

    retry_adapter = HTTPAdapter(
        max_retries=Retry(
            total=0,
            connect=0,
            read=0,
            backoff_factor=backoff_factor,
            status_forcelist=tuple(status_forcelist or _DEFAULT_STATUS_FORCELIST),
            allowed_methods=_DEFAULT_ALLOWED_METHODS,
            raise_on_status=False,
        )
    )

    session = requests.Session()
    session.mount("https://", retry_adapter)
    session.mount("http://", retry_adapter)
    return session


def _sanitize_value(value: Any, sanitizer: Optional[Callable[[str], str]] = None) -> str:
    text = "" if value is None else str(value)
    if sanitizer is None:
        return text
    return sanitizer(text)


def request_with_retries(
    session: requests.Session,
    method: str,
    url: str,
    *,
    timeout: float,
    max_retries: int,
    backoff_factor: float,
    status_forcelist: Iterable[int] | None,
    logger,
    context: str,
    sanitize: Optional[Callable[[str], str]] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform an HTTP request, retrying timeouts, connection errors and `status_forcelist` codes.

    Raises the last :class:`requests.RequestException` once attempts are
    exhausted or a non-retryable error occurs.
    """

    statuses = tuple(status_forcelist or _DEFAULT_STATUS_FORCELIST)
    retry_state = Retry(
        total=max_retries,
        connect=max_retries,
        read=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=statuses,
        allowed_methods=_DEFAULT_ALLOWED_METHODS,
        raise_on_status=False,
    )

    attempts = 0
    last_exception: Optional[requests.exceptions.RequestException] = None

    while attempts < max(1, max_retries):
        attempts += 1
        response: Optional[requests.Response] = None

        try:
            response = session.request(method, url, timeout=timeout, **kwargs)
            if response.status_code in statuses:
                raise requests.exceptions.HTTPError(
                    f"{response.status_code} Server Error: {response.reason}",
                    response=response,
                )
            response.raise_for_status()
            return response
        except requests.exceptions.RequestException as exc:
            last_exception = exc
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            should_retry = attempts < max_retries and (
                isinstance(exc, (requests.exceptions.Timeout, requests.exceptions.ConnectionError))
                or status_code in statuses
            )

            if not should_retry:
                break

            retry_state = retry_state.increment(
                method=method,
                url=url,
                response=None,
                error=exc,
            )
            backoff = retry_state.get_backoff_time()

            logger.warning(
                "Retrying %s (%d/%d): %s - %s",
                context,
                attempts,
                max_retries,
                _sanitize_value(url, sanitize),
                _sanitize_value(exc, sanitize),
            )

            if backoff > 0:
                time.sleep(backoff)

    if last_exception is not None:
        logger.error(
            "Failed %s after %d attempts: %s",
            context,
            attempts,
            _sanitize_value(last_exception, sanitize),
        )
        raise last_exception

    raise RuntimeError("request_with_retries exited without attempting a request")
