"""Request-triggered entry point returning the strip as base64 PNG."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from wxstrip.config import StripConfig
from wxstrip.runner import StripRunner

LOGGER = logging.getLogger("wxstrip.handler")

CONTENT_TYPE = "image/png"


def handler(event: Mapping[str, Any] | None = None, context: object = None) -> dict[str, Any]:
    """
    Build the strip and wrap it in a proxy-integration style response.

    Any fetch, parse or data error propagates; no partial image is returned.
    """

    runner = StripRunner(StripConfig.from_env())
    body = runner.base64_png()
    LOGGER.info("Returning %d base64 characters", len(body))
    return {
        "statusCode": 200,
        "headers": {"Content-Type": CONTENT_TYPE},
        "body": body,
        "isBase64Encoded": True,
    }
