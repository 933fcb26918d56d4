"""Fetch artifact bytes for the analyzer and converters (internal)."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import httpx

from droidport.codes import Origin

logger = logging.getLogger(__name__)

USER_AGENT = "droidport"
DEFAULT_TIMEOUT = 30.0
MAX_REDIRECTS = 5


class FetchError(OSError):
    """Content could not be retrieved from a local path or URL."""

    def __init__(self, message: str, src: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.src = src
        self.status_code = status_code


def _headers() -> dict:
    headers = {"User-Agent": USER_AGENT}
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def http_get(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """GET a URL and return the decoded body.

    Raises:
        FetchError: transport failure or non-2xx status.
    """
    try:
        with httpx.Client(
            headers=_headers(),
            timeout=timeout,
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
        ) as client:
            response = client.get(url)
    except httpx.HTTPError as e:
        raise FetchError(f"Request failed for {url}: {e}", url) from e

    if response.status_code < 200 or response.status_code >= 300:
        raise FetchError(f"HTTP {response.status_code} for {url}", url, response.status_code)
    return response.text


def fetch_content(src: Union[str, Path], origin: Union[Origin, str] = Origin.LOCAL) -> str:
    """Return artifact text from a local path or a remote URL.

    This is the default fetch collaborator passed to the analyzer.

    Raises:
        FetchError: the content could not be read or decoded.
    """
    origin = Origin(origin)
    if origin == Origin.REMOTE:
        logger.debug("Fetching %s", src)
        return http_get(str(src))

    path = Path(src)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FetchError(f"Cannot read {path}: {e}", str(path)) from e
