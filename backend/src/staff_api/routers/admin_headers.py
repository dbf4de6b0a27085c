"""Response headers attached to every admin operation."""

from fastapi import Response

ADMIN_RESPONSE_HEADERS = {
    "X-Admin-Operation": "true",
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


async def admin_response_headers(response: Response) -> None:
    """Mark the response as an uncacheable admin operation."""
    for name, value in ADMIN_RESPONSE_HEADERS.items():
        response.headers[name] = value
