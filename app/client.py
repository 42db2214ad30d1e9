"""
Python client for the Clinic Management API.

The caller's credentials live on an explicit `ClinicSession` that is passed
to the client, so several sessions (for example two doctors) can be used
side by side.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from app.core.logging import logger


@dataclass
class ApiResponse:
    """Outcome of an API call. Exactly one of data or error is set for JSON responses."""

    status: int
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass
class ClinicSession:
    """Where to reach the API and who is calling it."""

    base_url: str = "http://localhost:8000"
    api_prefix: str = "/api"
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def login(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = user

    def clear(self) -> None:
        self.token = None
        self.user = None

    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{self.api_prefix}{path}"


class ClinicApiClient:
    """Issues requests with the session's bearer token and wraps every outcome in ApiResponse."""

    def __init__(self, session: ClinicSession, http: Optional[httpx.Client] = None):
        self.session = session
        self._owns_http = http is None
        self.http = http or httpx.Client(timeout=30.0)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "ClinicApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ============== Requests ==============

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = {"Content-Type": "application/json", **self.session.auth_headers()}
        return self.http.request(method, self.session.url(path), headers=headers, **kwargs)

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        try:
            response = self._send(method, path, json=json, params=params)
        except httpx.RequestError as e:
            logger.error(f"API {method} {path} failed: {e}")
            return ApiResponse(status=500, error="Network error")

        return self._handle_response(response)

    @staticmethod
    def _handle_response(response: httpx.Response) -> ApiResponse:
        status = response.status_code
        content_type = response.headers.get("content-type", "")

        if "application/json" not in content_type:
            text = response.text
            return ApiResponse(
                status=status,
                data=text if response.is_success else None,
                error=None if response.is_success else (text or "Unknown error"),
            )

        try:
            body = response.json()
        except ValueError:
            return ApiResponse(status=status, error="Failed to parse server response")

        if response.is_success:
            return ApiResponse(status=status, data=body)

        detail = body.get("detail") if isinstance(body, dict) else None
        return ApiResponse(status=status, error=str(detail) if detail else "Unknown error")

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Any = None) -> ApiResponse:
        return self.request("POST", path, json=data)

    def put(self, path: str, data: Any = None) -> ApiResponse:
        return self.request("PUT", path, json=data)

    def patch(self, path: str, data: Any = None) -> ApiResponse:
        return self.request("PATCH", path, json=data)

    def delete(self, path: str, data: Any = None) -> ApiResponse:
        return self.request("DELETE", path, json=data)

    def download(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """Fetch a file. On success data is the raw bytes."""
        try:
            response = self._send("GET", path, params=params)
        except httpx.RequestError as e:
            logger.error(f"API download {path} failed: {e}")
            return ApiResponse(status=500, error="Network error")

        if not response.is_success:
            return self._handle_response(response)
        return ApiResponse(status=response.status_code, data=response.content)

    # ============== Session ==============

    def _start_session(self, response: ApiResponse) -> ApiResponse:
        if response.ok:
            self.session.login(response.data["token"], response.data["user"])
        return response

    def login(self, email: str, password: str) -> ApiResponse:
        return self._start_session(self.post("/auth/login", {"email": email, "password": password}))

    def register(self, email: str, password: str, first_name: str, last_name: str) -> ApiResponse:
        return self._start_session(self.post("/auth/register", {
            "email": email,
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
        }))

    def logout(self) -> None:
        self.session.clear()
