# storefront/core/deps.py
from fastapi import Depends, Request
from sqlmodel import Session

from storefront.core.config import Settings
from storefront.database import get_session
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService
from storefront.services.item_service import ItemService


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_auth_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    return AuthService(session, settings)


def get_item_service(session: Session = Depends(get_session)) -> ItemService:
    return ItemService(session)


def get_cart_service(session: Session = Depends(get_session)) -> CartService:
    return CartService(session)
