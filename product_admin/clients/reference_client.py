"""
Reference Client
Fetches the server-managed color, size and category vocabularies.
"""

from typing import List, Optional

from pydantic import RootModel

from product_admin.clients.admin_api_client import AdminApiClient
from product_admin.clients.product_client import parse_model, payload_of
from product_admin.core.errors import ErrorResponse
from product_admin.models.variant import VariantColor, VariantSize
from product_admin.models.vocabulary import CategoryNode


class _Colors(RootModel[List[VariantColor]]):
    pass


class _Sizes(RootModel[List[VariantSize]]):
    pass


class _CategoryTree(RootModel[List[CategoryNode]]):
    pass


class ReferenceClient:
    """Client for the active color, size and category endpoints"""

    def __init__(self, api: Optional[AdminApiClient] = None):
        self.api = api or AdminApiClient()

    async def _fetch_list(self, endpoint: str, model, operation: str) -> list:
        response = await self.api.get(endpoint)
        body = payload_of(response.unwrap())
        if body is None:
            return []
        if not isinstance(body, list):
            raise ErrorResponse(f"Unexpected response from server ({operation})", status_code=502)
        return parse_model(model, body, operation).root

    async def get_active_colors(self) -> List[VariantColor]:
        return await self._fetch_list("/colors/active", _Colors, "get_active_colors")

    async def get_active_sizes(self) -> List[VariantSize]:
        return await self._fetch_list("/sizes/active", _Sizes, "get_active_sizes")

    async def get_category_tree(self) -> List[CategoryNode]:
        return await self._fetch_list("/categories/active-tree", _CategoryTree, "get_category_tree")
