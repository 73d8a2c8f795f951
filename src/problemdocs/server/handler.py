"""ASGI handler: serves documentation pages from the route table.

The only component that touches raw ASGI scopes. Matches the escaped
request path against the router, calls the page handler, and sends
the Response back through ASGI send().
"""

import logging

from problemdocs._internal.asgi import HTTPScope, Receive, Scope, Send
from problemdocs.errors import HTTPError
from problemdocs.http.response import Response
from problemdocs.routing.router import Router
from problemdocs.server.sender import send_response

logger = logging.getLogger("problemdocs.server")


def error_response(exc: HTTPError) -> Response:
    """Plain-text response for a routing failure."""
    resp = Response(body=exc.detail or f"Error {exc.status}", status=exc.status)
    resp = resp.with_content_type("text/plain; charset=utf-8")
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


async def handle_request(
    scope: Scope,
    receive: Receive,  # noqa: ARG001
    send: Send,
    *,
    router: Router,
) -> None:
    """Process a single HTTP request against the documentation routes."""
    if scope["type"] != "http":
        return

    http_scope = HTTPScope.from_scope(scope)
    path = http_scope.escaped_path

    try:
        match = router.match(http_scope.method, path)
        response = match.route.handler()
    except HTTPError as exc:
        logger.debug("%d %s %s: %s", exc.status, http_scope.method, path, exc.detail)
        response = error_response(exc)
    except Exception:
        logger.exception("500 %s %s", http_scope.method, path)
        response = Response(
            body="Internal Server Error",
            status=500,
            content_type="text/plain; charset=utf-8",
        )

    await send_response(response, send, head=http_scope.method == "HEAD")
