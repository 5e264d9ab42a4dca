# storefront/routers/auth.py
from fastapi import APIRouter, Depends, status

from storefront.core.deps import get_auth_service
from storefront.schemas.user import AuthResponse, LoginRequest, SignupRequest, UserRead
from storefront.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def signup(
    payload: SignupRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Create an account and return a bearer token.

    - 400 on invalid name/email/password
    - 409 if the email is already registered
    """
    token, user = service.signup(payload)
    return AuthResponse(
        message="User created successfully",
        token=token,
        user=UserRead.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Exchange email + password for a bearer token.

    Logout has no endpoint: clients simply discard the token.
    """
    token, user = service.login(payload)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserRead.model_validate(user),
    )
