# course_nest/middleware.py
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("course_nest.requests")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request line and the status/latency it finished with"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client = request.client.host if request.client else "unknown"

        # body is left unread so handlers still get the stream
        logger.info(
            f"{request.method} {request.url.path} | "
            f"Client: {client} | "
            f"Query: {dict(request.query_params)}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{request.method} {request.url.path} failed | "
                f"Error: {str(e)} | "
                f"Time: {time.time() - start_time:.3f}s"
            )
            raise

        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} | "
            f"Time: {time.time() - start_time:.3f}s"
        )
        return response
