# storefront/routers/items.py
from decimal import Decimal

from fastapi import APIRouter, Depends, Path, Query, status

from storefront.core.auth import require_auth
from storefront.core.deps import get_item_service
from storefront.schemas.common import MAX_INT, MessageResponse
from storefront.schemas.item import (
    ItemCreate,
    ItemFilters,
    ItemListResponse,
    ItemRead,
    ItemResponse,
    ItemUpdate,
)
from storefront.services.item_service import ItemService

router = APIRouter(prefix="/items", tags=["Items"])


# -------- Public endpoints --------


@router.get("", response_model=ItemListResponse)
def list_items(
    category: str | None = Query(default=None, min_length=1),
    min_price: Decimal | None = Query(default=None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(default=None, alias="maxPrice", ge=0),
    service: ItemService = Depends(get_item_service),
):
    """
    List items, newest first.

    - category: case-insensitive substring match
    - minPrice / maxPrice: inclusive bounds
    """
    filters = ItemFilters(category=category, min_price=min_price, max_price=max_price)
    items = service.list_items(filters)
    return ItemListResponse(
        items=[ItemRead.model_validate(it) for it in items],
        count=len(items),
    )


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(
    item_id: int = Path(ge=1, le=MAX_INT),
    service: ItemService = Depends(get_item_service),
):
    """
    Get a single item by id.
    """
    return ItemResponse(item=ItemRead.model_validate(service.get_item(item_id)))


# -------- Authenticated endpoints --------


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
def create_item(
    payload: ItemCreate,
    service: ItemService = Depends(get_item_service),
):
    """
    Create a new item (any authenticated user).
    """
    item = service.create_item(payload)
    return ItemResponse(
        message="Item created successfully",
        item=ItemRead.model_validate(item),
    )


@router.put(
    "/{item_id}",
    response_model=ItemResponse,
    dependencies=[Depends(require_auth)],
)
def update_item(
    payload: ItemUpdate,
    item_id: int = Path(ge=1, le=MAX_INT),
    service: ItemService = Depends(get_item_service),
):
    """
    Update an existing item. Only the fields sent are changed.
    """
    item = service.update_item(item_id, payload)
    return ItemResponse(
        message="Item updated successfully",
        item=ItemRead.model_validate(item),
    )


@router.delete(
    "/{item_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_auth)],
)
def delete_item(
    item_id: int = Path(ge=1, le=MAX_INT),
    service: ItemService = Depends(get_item_service),
):
    """
    Delete an item (and any cart lines pointing at it).
    """
    service.delete_item(item_id)
    return MessageResponse(message="Item deleted successfully")
