"""ASGI middleware capping the size of request bodies.

A declared ``Content-Length`` above the cap is refused before the application
runs. Bodies without one (chunked uploads) are counted as they are received;
once the cap is crossed the read fails and the 413 envelope replaces whatever
the application was about to send.
"""

from __future__ import annotations

from starlette.exceptions import HTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from favourites_api.schemas.error import ErrorType
from favourites_api.utils.error_responses import build_error_response, error_json_response

__all__ = ["BodySizeLimitMiddleware", "HTTP_413_CONTENT_TOO_LARGE", "RequestBodyTooLarge"]

HTTP_413_CONTENT_TOO_LARGE = 413


class RequestBodyTooLarge(HTTPException):
    """Raised from ``receive`` when the streamed body exceeds the cap.

    It is an ``HTTPException`` so FastAPI's body reader re-raises it instead of
    reporting a generic parse failure.
    """

    def __init__(self, limit: int) -> None:
        super().__init__(
            status_code=HTTP_413_CONTENT_TOO_LARGE,
            detail=f"Bodies are limited to {limit} bytes",
        )


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp, *, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = _declared_length(scope)
        if declared is not None and declared > self.max_body_bytes:
            await self._reject(scope, receive, send)
            return

        received = 0
        exceeded = False
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    exceeded = True
                    raise RequestBodyTooLarge(self.max_body_bytes)
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            if exceeded:
                # The application's own reply to the failed read is dropped.
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except RequestBodyTooLarge:
            if response_started:
                raise
        if exceeded and not response_started:
            await self._reject(scope, receive, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = error_json_response(
            build_error_response(
                error_type=ErrorType.PAYLOAD_TOO_LARGE,
                message="Request body too large",
                detail=f"Bodies are limited to {self.max_body_bytes} bytes",
                status_code=HTTP_413_CONTENT_TOO_LARGE,
                path=scope.get("path", ""),
            )
        )
        await response(scope, receive, send)


def _declared_length(scope: Scope) -> int | None:
    for name, value in scope.get("headers", []):
        if name == b"content-length":
            text = value.decode("latin-1").strip()
            return int(text) if text.isdigit() else None
    return None
