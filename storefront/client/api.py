# storefront/client/api.py
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx answer from the API (or a request refused client-side)."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class TokenStore:
    """
    In-memory holder of the bearer token and the signed-in user.

    Logging out is just clearing it: the server keeps no sessions.
    """

    token: str | None = None
    user: dict[str, Any] | None = field(default=None)

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.token = token
        self.user = user

    def clear(self) -> None:
        self.token = None
        self.user = None


class ApiClient:
    """
    JSON client for the storefront API.

    Either pass `base_url` or a ready `httpx.Client` (for example a
    FastAPI TestClient, which is an httpx.Client).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        http: httpx.Client | None = None,
        tokens: TokenStore | None = None,
        timeout: float = 10.0,
    ):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.tokens = tokens or TokenStore()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.tokens.token:
            headers["Authorization"] = f"Bearer {self.tokens.token}"
        return headers

    def _handle_response(self, response: httpx.Response) -> Any:
        if response.is_success:
            return response.json()

        try:
            message = response.json().get("error")
        except ValueError:
            message = None
        message = message or f"HTTP {response.status_code}"
        logger.debug("API %s %s failed: %s", response.request.method, response.request.url, message)
        raise ApiError(message, response.status_code)

    def request(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = self.http.request(
                method,
                endpoint,
                json=data,
                params=params,
                headers=self._headers(),
            )
        except httpx.TimeoutException:
            logger.error("Timeout on %s %s", method, endpoint)
            raise ApiError("Request timed out")
        except httpx.HTTPError as e:
            logger.error("Network error on %s %s: %s", method, endpoint, e)
            raise ApiError(f"Network error: {e}")
        return self._handle_response(response)

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, data: Any = None) -> Any:
        return self.request("POST", endpoint, data=data)

    def put(self, endpoint: str, data: Any = None) -> Any:
        return self.request("PUT", endpoint, data=data)

    def delete(self, endpoint: str) -> Any:
        return self.request("DELETE", endpoint)

    def close(self) -> None:
        self.http.close()
