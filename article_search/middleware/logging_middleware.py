import time
import logging
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging every API request in a narrative format.
    Errors escaping the routes are logged with request context and re-raised.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        if self._should_skip_logging(request.url.path):
            return await call_next(request)

        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled error during {request.method} {request.url.path} "
                f"params={dict(request.query_params)}: {type(e).__name__}: {e}"
            )
            raise

        process_time = time.time() - start_time
        logger.info(self._create_narrative(request, response, process_time))

        return response

    def _should_skip_logging(self, path: str) -> bool:
        return path in SKIP_PATHS

    def _create_narrative(
        self, request: Request, response: Response, process_time: float
    ) -> str:
        """
        Create a narrative description of the request.

        Args:
            request: The FastAPI request object
            response: The response object
            process_time: Request processing time in seconds

        Returns:
            Narrative description
        """
        narrative = f"Client made a {request.method} request to {request.url.path}"

        if request.query_params:
            params_str = ", ".join(f"{k}={v}" for k, v in request.query_params.items())
            narrative += f" with parameters: {params_str}"

        if 200 <= response.status_code < 300:
            narrative += f" and received a successful response ({response.status_code})"
        elif 400 <= response.status_code < 500:
            narrative += f" but had a client error ({response.status_code})"
        elif 500 <= response.status_code < 600:
            narrative += f" but encountered a server error ({response.status_code})"

        narrative += f" in {round(process_time * 1000, 2)} ms"
        return narrative
