"""
Product Catalog Service

Performs the product list calls and dispatches their outcome to the
AdminStore. Callers never see exceptions; failures end up in the store's
``error`` field and, for user actions, as notices.
"""

from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from product_admin.clients.product_client import ProductClient, payload_of
from product_admin.core.errors import ErrorResponse, error_response_handler
from product_admin.core.logger import logger
from product_admin.models.product import ProductSummary, SavedDetail
from product_admin.models.results import OperationResult
from product_admin.services.notifier import Notifier
from product_admin.state.actions import (
    CurrentProductLoaded,
    FetchProductsFailed,
    FetchProductsRequested,
    FetchProductsSilentRequested,
    FetchProductsSucceeded,
    FiltersChanged,
    FiltersReset,
    ProductCreated,
    ProductDeleted,
    ProductOperationFailed,
)
from product_admin.state.store import AdminStore


class ProductCatalogService:
    """Product list operations backed by the admin store"""

    def __init__(
        self,
        store: Optional[AdminStore] = None,
        product_client: Optional[ProductClient] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.store = store or AdminStore()
        self.product_client = product_client or ProductClient()
        self.notifier = notifier or Notifier()

    async def fetch_products(
        self,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        silent: bool = False,
    ) -> OperationResult:
        """
        Load one page of products with the current filters.

        Args:
            page: Page to load, defaults to the current page
            page_size: Page size, defaults to the current page size
            silent: Background refresh that leaves the loading flag untouched
        """
        pagination = self.store.state.pagination
        page = pagination.page if page is None else page
        page_size = pagination.page_size if page_size is None else page_size

        if silent:
            self.store.dispatch(FetchProductsSilentRequested(page=page, page_size=page_size))
        else:
            self.store.dispatch(FetchProductsRequested(page=page, page_size=page_size))

        try:
            response = await self.product_client.list_products(
                self.store.state.filters, page, page_size
            )
        except ErrorResponse as e:
            message = e.message or "Failed to fetch products"
            self.store.dispatch(FetchProductsFailed(error=message))
            logger.error(
                f"Failed to fetch products: {message}",
                metadata={"event": "products_fetch_error", "page": page, "status_code": e.status_code},
            )
            return OperationResult.failure(message, status_code=e.status_code)

        self.store.dispatch(
            FetchProductsSucceeded(products=tuple(response.items), pagination=response.pagination())
        )
        return OperationResult.success(data=response)

    async def refresh(self) -> OperationResult:
        return await self.fetch_products(silent=True)

    async def load_product(self, product_id: int) -> OperationResult:
        try:
            product = await self.product_client.get_product(product_id)
        except ErrorResponse as e:
            self.store.dispatch(ProductOperationFailed(error=e.message))
            return error_response_handler(e, self.notifier, title="Failed to load product")
        self.store.dispatch(CurrentProductLoaded(product=product))
        return OperationResult.success(data=product)

    async def delete_product(self, product_id: int) -> OperationResult:
        try:
            await self.product_client.delete_product(product_id)
        except ErrorResponse as e:
            self.store.dispatch(ProductOperationFailed(error=e.message))
            return error_response_handler(e, self.notifier)

        self.store.dispatch(ProductDeleted(product_id=product_id))
        self.notifier.show_success("Product deleted successfully!")
        logger.info(
            f"Product {product_id} deleted",
            metadata={"event": "product_deleted", "product_id": product_id},
        )
        return OperationResult.success("Product deleted successfully!")

    async def set_filters(self, **changes: Any) -> OperationResult:
        """Merge filter changes and reload from the first page"""
        try:
            self.store.dispatch(FiltersChanged(changes=changes))
        except ValidationError as e:
            message = "Invalid product filters"
            logger.error(message, error=e, metadata={"event": "filters_invalid", "changes": changes})
            return OperationResult.failure(message)
        return await self.fetch_products(page=0)

    async def reset_filters(self) -> OperationResult:
        self.store.dispatch(FiltersReset())
        return await self.fetch_products(page=0)

    def product_created(self, created: Dict[str, Any]) -> None:
        """Editor callback: put a newly created product at the top of the list"""
        try:
            product = ProductSummary.model_validate(payload_of(created))
        except ValidationError:
            logger.debug(
                "Created product payload is not a product summary",
                metadata={"event": "product_created_unparsed"},
            )
            return
        self.store.dispatch(ProductCreated(product=product))

    async def detail_changed(
        self, changed: Union[SavedDetail, Dict[str, Any], None] = None
    ) -> OperationResult:
        """
        Resolver and detail creator callback: refresh the list in the background.

        Accepts the resolver's ``SavedDetail`` or the creator's raw response body.
        """
        if isinstance(changed, SavedDetail):
            detail_id = changed.detail_id
        else:
            body = payload_of(changed)
            detail_id = body.get("id") if isinstance(body, dict) else None
        logger.debug(
            "Refreshing products after detail change",
            metadata={"event": "detail_changed", "detail_id": detail_id},
        )
        return await self.refresh()
