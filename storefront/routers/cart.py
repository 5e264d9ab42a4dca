# storefront/routers/cart.py
from fastapi import APIRouter, Depends, Response, status

from storefront.core.auth import require_auth
from storefront.core.deps import get_cart_service
from storefront.models.user import User
from storefront.schemas.cart import (
    CartAddRequest,
    CartItemResponse,
    CartRemoveRequest,
    CartSummary,
)
from storefront.schemas.common import MessageResponse
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartSummary)
def get_my_cart(
    service: CartService = Depends(get_cart_service),
    current_user: User = Depends(require_auth),
):
    """
    Get current user's cart: lines (newest first), total and itemCount.
    """
    return service.get_cart(current_user.id)


@router.post("/add", response_model=CartItemResponse)
def add_to_cart(
    payload: CartAddRequest,
    response: Response,
    service: CartService = Depends(get_cart_service),
    current_user: User = Depends(require_auth),
):
    """
    Add an item to the current user's cart.

    - 201 when a new line was created
    - 200 when the quantity was merged into an existing line
    """
    line, created = service.add_item(current_user.id, payload.item_id, payload.quantity)
    if created:
        response.status_code = status.HTTP_201_CREATED
        message = "Item added to cart successfully"
    else:
        message = "Cart updated successfully"
    return CartItemResponse(message=message, cart_item=line)


@router.post("/remove", response_model=CartItemResponse | MessageResponse)
def remove_from_cart(
    payload: CartRemoveRequest,
    service: CartService = Depends(get_cart_service),
    current_user: User = Depends(require_auth),
):
    """
    Remove one unit of an item, or the whole line with removeAll=true.

    Returns the updated line, or only a message once the line is gone.
    """
    line = service.remove_item(current_user.id, payload.item_id, payload.remove_all)
    if line is None:
        return MessageResponse(message="Item removed from cart successfully")
    return CartItemResponse(message="Cart updated successfully", cart_item=line)
