"""HTTP fetch helper for source documents."""

from __future__ import annotations

import logging

import requests

from wxstrip.config import USER_AGENT
from wxstrip.sources.base import FetchError

LOGGER = logging.getLogger("wxstrip.sources.http")


def fetch_document(url: str, *, timeout: float = 30.0) -> bytes:
    """
    Download ``url`` and return the raw body.
    """

    if not url:
        raise FetchError("No URL configured for source document")
    LOGGER.info("Fetching %s", url.split("?", 1)[0])
    try:
        resp = requests.get(url, timeout=timeout, headers={"User-Agent": USER_AGENT})
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Fetching {url.split('?', 1)[0]} failed: {exc}") from exc
    return resp.content
