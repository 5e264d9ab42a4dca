# storefront/client/catalog.py
from typing import Any

from storefront.client.api import ApiClient


class CatalogClient:
    def __init__(self, api: ApiClient):
        self.api = api

    def list_items(
        self,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {}
        if category:
            params["category"] = category
        if min_price is not None:
            params["minPrice"] = min_price
        if max_price is not None:
            params["maxPrice"] = max_price
        return self.api.get("/items", params=params or None)["items"]

    def get_item(self, item_id: int) -> dict[str, Any]:
        return self.api.get(f"/items/{item_id}")["item"]
