import uuid
from typing import Any, Dict

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.logging import correlation_id_context, request_metadata_context


class CorrelationContext:
    """Per-request identifiers that the log filter stamps on every record."""

    @staticmethod
    def generate_correlation_id() -> str:
        return f"notif_{uuid.uuid4().hex}"

    @staticmethod
    def set_correlation_id(correlation_id: str) -> str:
        correlation_id_context.set(correlation_id)
        return correlation_id

    @staticmethod
    def get_correlation_id() -> str:
        return correlation_id_context.get() or ""

    @staticmethod
    def set_request_metadata(metadata: Dict[str, Any]) -> None:
        request_metadata_context.set(metadata)

    @staticmethod
    def clear() -> None:
        correlation_id_context.set(None)
        request_metadata_context.set(None)


class CorrelationMiddleware:
    """Pure ASGI middleware, so SSE bodies stream through untouched.

    Reuses an upstream X-Correlation-ID / X-Request-ID when present and echoes
    the id back on the response. The gateway's X-User-Id is recorded as well so
    delivery logs can be traced per recipient.
    """

    CORRELATION_HEADER = "X-Correlation-ID"
    REQUEST_ID_HEADER = "X-Request-ID"
    USER_ID_HEADER = "X-User-Id"

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        correlation_id = CorrelationContext.set_correlation_id(
            headers.get(self.CORRELATION_HEADER)
            or headers.get(self.REQUEST_ID_HEADER)
            or CorrelationContext.generate_correlation_id()
        )

        client = scope.get("client")
        CorrelationContext.set_request_metadata({
            "method": scope["method"],
            "path": scope["path"],
            "client": {"host": client[0]} if client else None,
            "user_id": headers.get(self.USER_ID_HEADER),
        })

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[self.CORRELATION_HEADER] = correlation_id
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            CorrelationContext.clear()
