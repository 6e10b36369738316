from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.types import ASGIApp
from utils.logger import logger
import time

class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request with its status code and duration."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        client = f"{request.client.host}:{request.client.port}" if request.client else "unknown"

        logger.info(f"REQUEST: {request.method} {request.url.path} FROM: {client}")
        logger.debug(f"USER_AGENT: {request.headers.get('user-agent', 'Unknown')}")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"ERROR in {request.method} {request.url.path} "
                f"after {time.perf_counter() - start_time:.3f}s: {e!r}"
            )
            raise

        duration = time.perf_counter() - start_time
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            f"RESPONSE: {response.status_code} for {request.method} {request.url.path} "
            f"DURATION: {duration:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{duration:.3f}"
        return response
