"""GitHub release lookups used to resolve floating Electron versions."""

from __future__ import annotations

import random
import re
import time
import xml.etree.ElementTree as ET
from functools import wraps
from typing import Callable, TypeVar

import requests

from electron_stage.config import env
from electron_stage.core.logger import setup_logger

logger = setup_logger(__name__)

T = TypeVar("T")

LATEST_RELEASE_URL = "https://github.com/electron/electron/releases/latest"
NIGHTLY_FEED_URL = "https://github.com/electron/nightlies/releases.atom"

_ATOM_NS = "{http://www.w3.org/2005/Atom}"
_TAG_PATTERN = re.compile(r"/tag/v?([^/]+)$")


class ReleaseLookupError(Exception):
    """Raised when a release version cannot be read from GitHub."""

    pass


def _is_transient(error: requests.exceptions.RequestException) -> bool:
    if isinstance(error, requests.exceptions.HTTPError):
        return error.response is None or error.response.status_code >= 500
    return isinstance(error, (requests.exceptions.ConnectionError, requests.exceptions.Timeout))


def with_retry(attempts: int = 3, backoff: float = 1.0, max_backoff: float = 10.0) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry GitHub calls that failed on network trouble or a 5xx answer.

    Client errors (4xx) are raised at once. The wait doubles after each
    failure, capped at ``max_backoff`` and spread by up to half its length.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            attempt = 1
            while True:
                try:
                    return func(*args, **kwargs)
                except requests.exceptions.RequestException as e:
                    if attempt >= attempts or not _is_transient(e):
                        raise
                    wait = min(backoff * 2 ** (attempt - 1), max_backoff)
                    wait += random.uniform(0, wait / 2)
                    logger.debug("%s failed (%s), attempt %d/%d, waiting %.1fs", func.__name__, e, attempt, attempts, wait)
                    time.sleep(wait)
                attempt += 1

        return wrapper

    return decorator


def _strip_v(tag: str) -> str:
    return tag[1:] if tag.startswith("v") else tag


@with_retry()
def _get(url: str, accept: str) -> requests.Response:
    response = requests.get(url, headers={"Accept": accept}, timeout=env.HTTP_TIMEOUT)
    response.raise_for_status()
    return response


def fetch_latest_release_version() -> str:
    """Version of the latest stable Electron release."""
    response = _get(LATEST_RELEASE_URL, "application/json")
    try:
        tag = response.json()["tag_name"]
    except (ValueError, KeyError, TypeError) as e:
        raise ReleaseLookupError(f"Unexpected response from {LATEST_RELEASE_URL}: {e}") from e
    return _strip_v(str(tag))


def fetch_latest_nightly_version() -> str:
    """Version of the newest entry in the Electron nightlies feed."""
    response = _get(NIGHTLY_FEED_URL, "application/xml, application/atom+xml, text/xml, */*")
    try:
        root = ET.fromstring(response.content)
    except ET.ParseError as e:
        raise ReleaseLookupError(f"Cannot parse {NIGHTLY_FEED_URL}: {e}") from e

    entry = root.find(f"{_ATOM_NS}entry")
    if entry is None:
        raise ReleaseLookupError("No published versions on GitHub")
    link = entry.find(f"{_ATOM_NS}link")
    href = link.get("href", "") if link is not None else ""
    match = _TAG_PATTERN.search(href)
    if not match:
        raise ReleaseLookupError(f"Cannot read nightly version from link '{href}'")
    return _strip_v(match.group(1))
