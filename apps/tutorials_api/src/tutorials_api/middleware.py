from typing import Final

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send
from tutorials_core.logging import new_request_id, request_id_scope

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"


class RequestIDMiddleware:
    """
    Bind every HTTP request to an id so its log lines can be traced.

    The id is taken from the incoming ``X-Request-ID`` header when present,
    generated otherwise, and echoed back on the response.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        self.app: Final[ASGIApp] = app
        self.header_name: Final[str] = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = Headers(scope=scope).get(self.header_name)
        request_id = incoming.strip() if incoming else ""
        request_id = request_id[:128] or new_request_id()

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers[self.header_name] = request_id
            await send(message)

        with request_id_scope(request_id):
            await self.app(scope, receive, send_with_request_id)
