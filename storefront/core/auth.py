# storefront/core/auth.py
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from storefront.core.deps import get_auth_service
from storefront.core.errors import AuthError
from storefront.models.user import User
from storefront.services.auth_service import AuthService

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header does not raise
#   FastAPI's own 403; require_auth answers 401 in the app's error format.
bearer_scheme = HTTPBearer(auto_error=False)


def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Enforce authentication.

    Flow:
      1. No `Authorization: Bearer <token>` header => 401.
      2. Verify signature/expiry and resolve the user id from the token.
      3. Load the user; a token for a missing user => 401.

    Returns:
        The authenticated User.

    Raises:
        AuthError(401): if the token is missing, invalid or expired.
    """
    if credentials is None:
        raise AuthError("Access token required")

    return auth_service.get_authenticated_user(credentials.credentials)
