from __future__ import annotations

import logging

from starlette.responses import PlainTextResponse

from asgi_accept_encoding.accept_encoding import AcceptEncoding
from asgi_accept_encoding.errors import HeaderValueError
from asgi_accept_encoding.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


class AcceptEncodingMiddleware:
    """
    Parses the request's Accept-Encoding header once and stores the result
    in ``scope["state"]``, where starlette exposes it as
    ``request.state.accept_encoding``.

    The stored value is None when the client sent no Accept-Encoding header.
    """

    def __init__(
        self,
        app: ASGIApp,
        state_key: str = "accept_encoding",
        reject_malformed: bool = True,
    ) -> None:
        self.app = app
        self.state_key = state_key
        self.reject_malformed = reject_malformed

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            accept_encoding = AcceptEncoding.from_scope(scope)
        except HeaderValueError as exc:
            if self.reject_malformed:
                logger.warning("Rejecting request with malformed Accept-Encoding: %s", exc)
                response = PlainTextResponse(
                    "Malformed Accept-Encoding header", status_code=400
                )
                await response(scope, receive, send)
                return
            logger.debug("Ignoring malformed Accept-Encoding: %s", exc)
            accept_encoding = None

        # NOTE: starlette's Request.state wraps this same dict
        scope.setdefault("state", {})[self.state_key] = accept_encoding

        await self.app(scope, receive, send)
