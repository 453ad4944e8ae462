# src/api/app.py

"""HTTP endpoint exposing the server-side metadata extraction.

Routes
------
POST    /api/fetch-metadata    Body: {"url": "...", "cookie": "..."?}
OPTIONS /api/fetch-metadata    CORS preflight, empty body
"""

import asyncio
import json
import logging
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from src.config.settings import Settings
from src.filters.url_normalizer import validate
from src.models.errors import ERROR_MESSAGES, ErrorKind, FetchError
from src.services.metadata_fetcher import MetadataFetcher

logger = logging.getLogger("link_card.api")

METADATA_PATH = "/api/fetch-metadata"


def _json(body: dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        body, status_code=status_code, headers=Settings.CORS_HEADERS
    )


def _fetch_error_response(exc: FetchError) -> JSONResponse:
    """Map a classified fetch failure onto the endpoint's wire format."""
    if exc.kind is ErrorKind.CREDENTIAL_REQUIRED:
        return _json(
            {
                "error": "COOKIE_REQUIRED",
                "message": ERROR_MESSAGES[ErrorKind.CREDENTIAL_REQUIRED],
            },
            503,
        )
    if exc.kind is ErrorKind.FETCH_FAILED:
        return _json(
            {"error": "Failed to fetch Amazon page"},
            exc.status_code or 502,
        )
    if exc.kind is ErrorKind.PARSE_FAILED:
        field_kind = exc.field_kind.value if exc.field_kind else None
        return _json(
            {
                "error": ErrorKind.PARSE_FAILED.value,
                "field": field_kind,
                "message": exc.user_message,
            },
            422,
        )
    return _json({"error": "Internal server error"}, 500)


def create_app(fetcher: MetadataFetcher | None = None) -> FastAPI:
    """Return a configured FastAPI application.

    A *fetcher* can be injected (tests); otherwise one is built on first
    use and shared by all requests.
    """
    app = FastAPI(
        title="Amazon Link Card API",
        description="Fetches Amazon product metadata for embeddable link cards.",
        version="1.0.0",
    )
    app.state.fetcher = fetcher

    def _get_fetcher() -> MetadataFetcher:
        if app.state.fetcher is None:
            app.state.fetcher = MetadataFetcher()
        return app.state.fetcher

    @app.options(METADATA_PATH)
    async def preflight() -> Response:
        return Response(headers=Settings.CORS_HEADERS)

    @app.post(METADATA_PATH)
    async def fetch_metadata(request: Request) -> JSONResponse:
        """Fetch *url* upstream and return its :class:`ProductMetadata`."""
        try:
            body = await request.json()
            if not isinstance(body, dict):
                body = {}
            url = body.get("url")
            cookie = body.get("cookie") or None

            if not url:
                return _json({"error": "URL is required"}, 400)

            check = validate(str(url))
            if not check.valid:
                return _json(
                    {
                        "error": ErrorKind.INVALID_URL.value,
                        "message": check.reason,
                    },
                    400,
                )

            metadata = await asyncio.to_thread(
                _get_fetcher().fetch_and_extract, str(url), cookie
            )
            return _json(metadata.to_dict())
        except FetchError as exc:
            logger.info("Fetch for %s failed: %s", request.url.path, exc.kind.value)
            return _fetch_error_response(exc)
        except json.JSONDecodeError:
            logger.warning("Request body is not valid JSON")
            return _json({"error": "Internal server error"}, 500)
        except Exception:
            logger.error("Unhandled error in metadata endpoint", exc_info=True)
            return _json({"error": "Internal server error"}, 500)

    return app
