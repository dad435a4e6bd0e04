"""CORS middleware.

The gateway is called straight from browsers, so every response (errors and
streams included) carries permissive CORS headers, and preflight ``OPTIONS``
requests are answered directly for any path.
"""

import logging

from fastapi import Request, Response

logger = logging.getLogger("workers-gateway")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


async def cors_middleware(request: Request, call_next) -> Response:  # type: ignore
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    response = await call_next(request)
    for key, value in CORS_HEADERS.items():
        response.headers[key] = value
    return response
