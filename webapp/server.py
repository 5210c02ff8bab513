import base64
import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse, Response

from wxstrip.config import configure_logging
from wxstrip.handler import CONTENT_TYPE, handler
from wxstrip.pipeline import DataAvailabilityError
from wxstrip.sources import SourceError

configure_logging()
LOGGER = logging.getLogger("wxstrip.webapp")

app = FastAPI()


def _build_payload() -> dict:
    try:
        return handler()
    except (SourceError, DataAvailabilityError) as exc:
        LOGGER.warning("Strip build failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@app.get("/strip.png")
def strip_png():
    payload = _build_payload()
    return Response(content=base64.b64decode(payload["body"]), media_type=CONTENT_TYPE)


@app.get("/api/strip")
def strip_base64():
    """Base64 body with the image content type, as the function handler returns it."""

    payload = _build_payload()
    return Response(content=payload["body"], media_type=CONTENT_TYPE, headers={"X-Base64-Encoded": "true"})


@app.get("/api/health")
async def health():
    return JSONResponse(content={"status": "ok"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
