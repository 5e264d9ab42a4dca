# storefront/client/auth.py
from typing import Any

from storefront.client.api import ApiClient


class AuthSession:
    """Client-side auth state backed by the API client's token store."""

    def __init__(self, api: ApiClient):
        self.api = api

    def _store(self, response: dict[str, Any]) -> dict[str, Any]:
        if response.get("token"):
            self.api.tokens.save(response["token"], response["user"])
        return response

    def signup(self, name: str, email: str, password: str) -> dict[str, Any]:
        return self._store(
            self.api.post("/auth/signup", {"name": name, "email": email, "password": password})
        )

    def login(self, email: str, password: str) -> dict[str, Any]:
        return self._store(self.api.post("/auth/login", {"email": email, "password": password}))

    def logout(self) -> None:
        # no server call: tokens simply expire
        self.api.tokens.clear()

    @property
    def token(self) -> str | None:
        return self.api.tokens.token

    @property
    def user(self) -> dict[str, Any] | None:
        return self.api.tokens.user

    def is_authenticated(self) -> bool:
        return bool(self.api.tokens.token)
