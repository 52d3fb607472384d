"""
FastAPI application served on the secure listener.

Routes:
    /data/{id}  - record lookup, JSON body
    /simple     - fixed plain-text page

Handlers accept any HTTP method and answer errors with plain text.
"""

import logging
import re
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .data_access import RecordDataProvider

logger = logging.getLogger(__name__)

DATA_PREFIX = "/data/"
SIMPLE_PAGE = "This is a simple page!"
NOT_FOUND_BODY = "404 page not found"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def parse_record_id(raw: str) -> int:
    """
    Parse a record id from a path segment.

    Accepts an optional sign followed by ASCII digits, within the signed
    64-bit range SQLite stores integers in.

    Raises:
        ValueError: anything else (empty, whitespace, '1.5', '1_0', '1/2', ...)
    """
    if not _INT_RE.fullmatch(raw):
        raise ValueError(f"invalid record id: {raw!r}")
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"record id out of range: {raw!r}")
    return value


def clean_path(path: str) -> str:
    """
    Canonical form of a URL path: repeated slashes collapsed, `.` and `..`
    segments resolved, trailing slash kept.
    """
    if not path.startswith("/"):
        path = "/" + path
    parts = []
    for seg in path.split("/"):
        if seg in ("", "."):
            continue
        if seg == "..":
            if parts:
                parts.pop()
            continue
        parts.append(seg)
    cleaned = "/" + "/".join(parts)
    if path.endswith("/") and cleaned != "/":
        cleaned += "/"
    return cleaned


def get_data(request: Request) -> RecordDataProvider:
    """Record provider attached to the app by create_app."""
    return request.app.state.data


def create_app(data: RecordDataProvider) -> FastAPI:
    """
    Build the secure-listener application around a record provider.

    Routes are plain Starlette routes registered without a method list,
    so every HTTP method reaches the handler.
    """
    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        docs_url=settings.DOCS_URL,
        redoc_url=settings.REDOC_URL,
        openapi_url=settings.OPENAPI_URL,
        redirect_slashes=False,
    )
    app.state.data = data

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return PlainTextResponse(NOT_FOUND_BODY, status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.middleware("http")
    async def redirect_unclean_paths(request: Request, call_next):
        """301 to the canonical path, e.g. `/data//1` -> `/data/1`."""
        path = request.url.path
        if request.method != "CONNECT":
            cleaned = clean_path(path)
            if cleaned != path:
                location = quote(cleaned)
                if request.url.query:
                    location += "?" + request.url.query
                return Response(status_code=301, headers={"Location": location})
        return await call_next(request)

    # ----------------------------------------------------------------
    # Records
    # ----------------------------------------------------------------

    def data_root(request: Request):
        """Redirect the bare prefix to its subtree, like `/data` -> `/data/`."""
        location = DATA_PREFIX
        if request.url.query:
            location += "?" + request.url.query
        return Response(status_code=301, headers={"Location": location})

    def get_record(request: Request):
        """
        Look up a record by id.

        Returns:
            200 with {"id": ..., "value": ...} as application/json,
            400 for a non-integer id, 404 for an unknown id,
            500 when the database query fails.
        """
        logger.info(f"Request received: {request.url.path}")
        try:
            rid = parse_record_id(request.path_params["record_id"])
        except ValueError:
            return PlainTextResponse("Invalid ID", status_code=400)

        data = get_data(request)
        try:
            record = data.get_record(rid)
        except Exception as e:
            logger.error(f"Error fetching record {rid}: {e}")
            return PlainTextResponse("Database error", status_code=500)

        if record is None:
            return PlainTextResponse(NOT_FOUND_BODY, status_code=404)

        try:
            body = record.model_dump_json()
        except (TypeError, ValueError) as e:
            logger.error(f"Error encoding record {rid}: {e}")
            return Response(media_type="application/json")
        return Response(content=body, media_type="application/json")

    # ----------------------------------------------------------------
    # Static
    # ----------------------------------------------------------------

    def simple(request: Request):
        """Fixed plain-text page."""
        logger.info(f"Request received: {request.url.path}")
        return PlainTextResponse(SIMPLE_PAGE)

    app.add_route("/data", data_root)
    app.add_route("/data/{record_id:path}", get_record)
    app.add_route("/simple", simple)

    return app
