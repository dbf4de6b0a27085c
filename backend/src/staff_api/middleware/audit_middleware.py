"""Request provenance and outcome logging for mutating requests."""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from staff_api.security.rate_limit import get_real_client_ip

logger = logging.getLogger(__name__)


class AuditMiddleware(BaseHTTPMiddleware):
    """Store caller IP and user agent on the request and log mutation outcomes.

    Audit entries themselves are written by the services after a successful
    operation; this middleware only supplies provenance.
    """

    # Methods that modify data
    AUDIT_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

    # Paths to exclude from audit logging
    EXCLUDED_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        """Process the request and log audit information.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response from downstream handler
        """
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = get_real_client_ip(request)
        request.state.client_ip = client_ip
        request.state.user_agent = request.headers.get("user-agent", "")

        response = await call_next(request)

        if request.method in self.AUDIT_METHODS:
            if response.status_code < 400:
                logger.info(
                    "Audit: %s %s status=%s ip=%s",
                    request.method, request.url.path, response.status_code, client_ip,
                )
            else:
                logger.warning(
                    "Audit: %s %s status=%s ip=%s",
                    request.method, request.url.path, response.status_code, client_ip,
                )

        return response
