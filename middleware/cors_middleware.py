from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send
from typing import List, Optional

class CORSMiddleware:
    """
    Adds CORS headers to every response and answers browser preflights.

    A bare OPTIONS request (no ``Access-Control-Request-Method``) is passed
    through so routes that handle OPTIONS themselves still see it.
    """

    def __init__(
        self,
        app: ASGIApp,
        allow_origins: Optional[List[str]] = None,
        allow_credentials: bool = False,
        allow_methods: Optional[List[str]] = None,
        allow_headers: Optional[List[str]] = None,
        max_age: int = 86400,
    ):
        self.app = app
        self.allow_origins = allow_origins or ["*"]
        self.allow_credentials = allow_credentials
        self.allow_methods = allow_methods or ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
        self.allow_headers = allow_headers or ["Authorization", "Content-Type"]
        self.max_age = max_age

    def _allowed_origin(self, origin: Optional[str]) -> Optional[str]:
        if "*" in self.allow_origins:
            return "*"
        if origin and origin in self.allow_origins:
            return origin
        return None

    def _cors_headers(self, origin: Optional[str]) -> List[tuple]:
        allowed = self._allowed_origin(origin)
        if allowed is None:
            return []
        headers = [
            (b"access-control-allow-origin", allowed.encode()),
            (b"access-control-allow-methods", ", ".join(self.allow_methods).encode()),
            (b"access-control-allow-headers", ", ".join(self.allow_headers).encode()),
        ]
        if self.allow_credentials and allowed != "*":
            headers.append((b"access-control-allow-credentials", b"true"))
        return headers

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_headers = {k.lower(): v for k, v in scope.get("headers", [])}
        origin = request_headers.get(b"origin")
        origin = origin.decode() if origin else None
        cors_headers = self._cors_headers(origin)

        # Browser preflight
        if scope["method"] == "OPTIONS" and b"access-control-request-method" in request_headers:
            response = Response(status_code=200)
            for key, value in cors_headers:
                response.headers[key.decode()] = value.decode()
            response.headers["access-control-max-age"] = str(self.max_age)
            await response(scope, receive, send)
            return

        async def send_wrapper(message):
            if message["type"] == "http.response.start" and cors_headers:
                names = {key for key, _ in cors_headers}
                message["headers"] = [
                    (k, v) for k, v in message.get("headers", [])
                    if k.lower() not in names
                ] + cors_headers
            await send(message)

        await self.app(scope, receive, send_wrapper)
