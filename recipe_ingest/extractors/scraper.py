"""
Web page fetching.

Retrieves raw recipe page HTML over HTTP with a realistic browser identity,
enforcing content type and size limits.
"""
from __future__ import annotations

import ipaddress
import logging
import time
from typing import Callable, Mapping, NamedTuple, Protocol
from urllib.parse import urlparse

import cloudscraper
import requests

from ..const import (
    ALLOWED_CONTENT_TYPES,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_MAX_RESPONSE_SIZE,
)
from ..exceptions import FetchError

_LOGGER = logging.getLogger(__name__)

logging.getLogger("urllib3").setLevel(logging.WARNING)

RETRY_STATUSES = frozenset({403, 429, 500, 502, 503, 504})


class FetchResponse(NamedTuple):
    """A fetched page.

    Attributes:
        status: HTTP status code
        body: Decoded page body
        url: Final URL after redirects
    """

    status: int
    body: str
    url: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Fetcher(Protocol):
    def __call__(self, url: str, headers: Mapping[str, str], timeout: float) -> FetchResponse:
        ...


def validate_url(url: str) -> None:
    """Validate URL scheme and reject internal IP hosts.

    Raises:
        FetchError: If the URL is not a public HTTP/HTTPS address
    """
    if not url or not url.strip():
        raise FetchError("URL cannot be empty", url=url)

    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https"):
        raise FetchError("Only HTTP/HTTPS protocols allowed", url=url)
    if not parsed.hostname:
        raise FetchError("URL has no host", url=url)

    # Prevent SSRF to internal networks
    try:
        ip = ipaddress.ip_address(parsed.hostname)
    except ValueError:
        return  # Hostname is not an IP
    if ip.is_private or ip.is_loopback or ip.is_link_local:
        raise FetchError("Cannot access internal IP addresses", url=url)


def _decode(content: bytes, encoding: str | None) -> str:
    for candidate in (encoding, "utf-8"):
        if not candidate:
            continue
        try:
            return content.decode(candidate)
        except (LookupError, UnicodeDecodeError):
            continue
    return content.decode("latin-1")


class CloudscraperFetcher:
    """Fetches pages through a cloudscraper session for anti-bot protection."""

    def __init__(self, session: requests.Session | None = None,
                 max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE) -> None:
        """Initialize the fetcher.

        Args:
            session: Session to use; a cloudscraper session is created if omitted
            max_response_size: Maximum accepted body size in bytes
        """
        if session is None:
            session = cloudscraper.create_scraper(
                browser={
                    "browser": "chrome",
                    "platform": "windows",
                    "desktop": True,
                }
            )
            session.max_redirects = DEFAULT_MAX_REDIRECTS
        self.session = session
        self.max_response_size = max_response_size

    def __call__(self, url: str, headers: Mapping[str, str], timeout: float) -> FetchResponse:
        """Fetch one page.

        Non-success statuses are returned, not raised, so the caller can
        decide what a status means.

        Raises:
            FetchError: On transport failure, timeout, non-HTML content or an
                oversized body
        """
        _LOGGER.debug("Fetching %s", url)
        try:
            # Use stream=True to check headers before downloading
            response = self.session.get(
                url,
                headers=dict(headers),
                timeout=timeout,
                allow_redirects=True,
                stream=True,
            )
        except requests.exceptions.Timeout as err:
            raise FetchError(f"Timeout fetching {url}", url=url) from err
        except requests.exceptions.RequestException as err:
            raise FetchError(f"Error fetching {url}: {err}", url=url) from err

        try:
            final_url = response.url or url
            if not 200 <= response.status_code < 300:
                return FetchResponse(response.status_code, "", final_url)

            content_type = response.headers.get("content-type", "").lower()
            if not any(allowed in content_type for allowed in ALLOWED_CONTENT_TYPES):
                _LOGGER.warning("Invalid content type for %s: %s", url, content_type)
                raise FetchError(
                    f"Invalid content type: {content_type}. Only HTML/XHTML content is allowed.",
                    url=url, status=response.status_code)

            content_length = response.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > self.max_response_size:
                _LOGGER.warning("Response too large for %s: %s bytes", url, content_length)
                raise FetchError(
                    f"Response size ({content_length} bytes) exceeds maximum allowed size "
                    f"({self.max_response_size} bytes)", url=url, status=response.status_code)

            content = b""
            try:
                for chunk in response.iter_content(chunk_size=8192):
                    content += chunk
                    if len(content) > self.max_response_size:
                        _LOGGER.warning("Response exceeded size limit while downloading from %s", url)
                        raise FetchError(
                            f"Response size exceeds maximum allowed size ({self.max_response_size} bytes)",
                            url=url, status=response.status_code)
            except requests.exceptions.RequestException as err:
                raise FetchError(f"Error reading {url}: {err}", url=url) from err

            _LOGGER.debug("Fetched %d bytes from %s", len(content), url)
            return FetchResponse(response.status_code, _decode(content, response.encoding), final_url)
        finally:
            response.close()


def with_retry(fetcher: Fetcher, max_retries: int = 3,
               sleep: Callable[[float], None] | None = None) -> Fetcher:
    """Wrap a fetcher with exponential backoff.

    Retries transport errors and rate-limit or server error statuses
    (403, 429, 5xx), waiting 1s, 2s, 4s... between attempts. After the last
    attempt the final response is returned or the final error raised.

    Args:
        fetcher: The fetcher to wrap
        max_retries: Maximum number of attempts
        sleep: Function used to wait between attempts; time.sleep if omitted
    """
    wait = sleep or time.sleep

    def fetch(url: str, headers: Mapping[str, str], timeout: float) -> FetchResponse:
        for attempt in range(max_retries):
            last_attempt = attempt == max_retries - 1
            wait_time = 2 ** attempt
            try:
                response = fetcher(url, headers, timeout)
            except FetchError as err:
                if last_attempt or err.status is not None:
                    raise
                _LOGGER.warning("Error fetching %s: %s, retrying after %ds", url, err, wait_time)
                wait(wait_time)
                continue

            if response.status in RETRY_STATUSES and not last_attempt:
                _LOGGER.warning("Got %d for %s, retrying after %ds", response.status, url, wait_time)
                wait(wait_time)
                continue
            return response

        raise FetchError(f"Failed to fetch {url} after {max_retries} attempts", url=url)

    return fetch
