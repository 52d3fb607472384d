"""
Plaintext listener: redirects every request to the secure listener.

The target keeps the host, path and query of the request, forces the
https scheme and swaps the port for the HTTPS port. A Host header that
cannot be split into host and port is not rejected; the host part simply
ends up empty (https://:8443/...).
"""

import html
import logging

from fastapi import FastAPI, Request
from fastapi.responses import Response

from .config import settings

logger = logging.getLogger(__name__)


def split_host_port(hostport: str) -> tuple[str, str]:
    """
    Split "host:port", "[v6host]:port" into (host, port).

    Raises:
        ValueError: missing port, too many colons, or unbalanced brackets
    """
    i = hostport.rfind(":")
    if i < 0:
        raise ValueError(f"missing port in address: {hostport!r}")

    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address: {hostport!r}")
        if end + 1 == len(hostport):
            raise ValueError(f"missing port in address: {hostport!r}")
        if end + 1 != i:
            if hostport[end + 1] == ":":
                raise ValueError(f"too many colons in address: {hostport!r}")
            raise ValueError(f"missing port in address: {hostport!r}")
        host = hostport[1:end]
        if "[" in hostport[1:] or "]" in hostport[end + 1:]:
            raise ValueError(f"unexpected bracket in address: {hostport!r}")
    else:
        host = hostport[:i]
        if ":" in host:
            raise ValueError(f"too many colons in address: {hostport!r}")
        if "[" in hostport or "]" in hostport:
            raise ValueError(f"unexpected bracket in address: {hostport!r}")

    return host, hostport[i + 1:]


def join_host_port(host: str, port) -> str:
    """Inverse of split_host_port; IPv6 hosts get brackets."""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def build_https_url(host_header: str, path: str, query: str, https_port) -> str:
    """Compute the secure URL equivalent to a plaintext request."""
    try:
        host, _ = split_host_port(host_header)
    except ValueError:
        host = ""
    target = f"https://{join_host_port(host, https_port)}{path}"
    if query:
        target += "?" + query
    return target


def _request_target(request: Request) -> tuple[str, str]:
    """Path and query exactly as the client sent them."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        # some ASGI servers leave the query string on raw_path
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    return path, query


def create_redirect_app(https_port: int = None) -> FastAPI:
    """Build the plaintext-listener application."""
    app = FastAPI(
        title=f"{settings.API_TITLE} (redirect)",
        version=settings.API_VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.https_port = https_port or settings.HTTPS_PORT

    def redirect_to_https(request: Request):
        path, query = _request_target(request)
        target = build_https_url(
            request.headers.get("host", ""),
            path,
            query,
            request.app.state.https_port,
        )
        logger.info(f"Redirecting to: {target}")

        headers = {"Location": target}
        if request.method in ("GET", "HEAD"):
            body = f'<a href="{html.escape(target)}">Moved Permanently</a>.\n'
            return Response(
                content=body,
                status_code=301,
                headers=headers,
                media_type="text/html; charset=utf-8",
            )
        return Response(status_code=301, headers=headers)

    # no method list: every method is redirected
    app.add_route("/{full_path:path}", redirect_to_https)

    return app
