from typing import Iterable

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import logger
from app.features.auth.gate import Authenticator, AuthError


USER_ID_HEADER = b"x-user-id"


class AuthGateMiddleware(BaseHTTPMiddleware):
    """
    Authenticates every request under a protected path prefix.

    On success the resolved identity is stored on `request.state.identity`
    and the caller's id is injected as `X-User-ID`, replacing any value the
    client sent. On failure the request is answered with 401 and never
    reaches a route handler.
    """

    def __init__(self, app, authenticator: Authenticator, protected_prefixes: Iterable[str]):
        super().__init__(app)
        self.authenticator = authenticator
        self.protected_prefixes = tuple(p.rstrip("/") for p in protected_prefixes)

    def is_protected(self, path: str) -> bool:
        path = path.rstrip("/") or "/"
        return any(path == prefix or path.startswith(prefix + "/") for prefix in self.protected_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS" or not self.is_protected(request.url.path):
            return await call_next(request)

        try:
            identity = await self.authenticator.resolve(request)
        except AuthError as e:
            logger.debug(f"Rejected {request.method} {request.url.path}: {e.detail}")
            return JSONResponse(
                status_code=e.status_code,
                content={"detail": e.detail},
                headers=e.headers,
            )

        request.state.identity = identity
        headers = [(k, v) for k, v in request.scope["headers"] if k.lower() != USER_ID_HEADER]
        headers.append((USER_ID_HEADER, identity.user_id.encode("latin-1")))
        request.scope["headers"] = headers

        return await call_next(request)
