from starlette.types import ASGIApp, Message, Receive, Scope, Send
import uuid

from tacom.core.logging import request_id_ctx_var


class CorrelationIdMiddleware:
    """Attach or generate an X-Correlation-ID for each request and set it on a
    contextvar so log records can include it via RequestIdFilter.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        # Only act on HTTP requests
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        correlation_id = headers.get(b"x-correlation-id")
        if correlation_id is None:
            correlation_id = str(uuid.uuid4()).encode()

        token = request_id_ctx_var.set(correlation_id.decode("latin-1"))

        async def send_wrapper(message: Message):
            if message["type"] == "http.response.start":
                message["headers"] = list(message.get("headers", [])) + [(b"x-correlation-id", correlation_id)]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            request_id_ctx_var.reset(token)
