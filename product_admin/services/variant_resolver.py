"""
Color/Size Query-Swap Resolver

Edits one persisted SKU row of an existing product. The color x size grid
of a real product is sparse, so every color or size pick is resolved by the
server into the concrete detail row (id, price, quantity, images) instead of
being assumed locally.

One resolution may be in flight per session. Every request is tagged with a
sequence number and a response is only applied if its tag is still the
latest one issued.
"""

import inspect
import math
from enum import Enum
from typing import Any, Callable, List, Optional

from product_admin.clients.product_client import ProductClient
from product_admin.core.errors import ErrorResponse, error_response_handler
from product_admin.core.logger import logger
from product_admin.models.product import DetailUpdate, ProductDetailQueryResponse, SavedDetail
from product_admin.models.results import OperationResult
from product_admin.services.notifier import Notifier
from product_admin.services.vocabulary_service import VocabularyService


class ResolverState(str, Enum):
    EMPTY = "empty"
    IDLE = "idle"
    RESOLVING = "resolving"
    SAVING = "saving"
    CLOSED = "closed"


STALE_RESPONSE = "Discarded stale response"


class VariantQueryResolver:
    """Single-flight editing session for one product detail row"""

    def __init__(
        self,
        product_client: Optional[ProductClient] = None,
        vocabulary_service: Optional[VocabularyService] = None,
        notifier: Optional[Notifier] = None,
        on_saved: Optional[Callable[[SavedDetail], Any]] = None,
    ):
        self.product_client = product_client or ProductClient()
        self.vocabulary_service = vocabulary_service or VocabularyService()
        self.notifier = notifier or Notifier()
        self.on_saved = on_saved

        self.state = ResolverState.EMPTY
        self.detail_id: Optional[int] = None
        self.selected_color = ""
        self.selected_size = ""
        self.price: float = 0.0
        self.quantity: float = 0
        self.images: List[str] = []
        self.image_index = 0
        self.view: Optional[ProductDetailQueryResponse] = None
        self._sequence = 0

    @property
    def current_image(self) -> Optional[str]:
        if 0 <= self.image_index < len(self.images):
            return self.images[self.image_index]
        return None

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def _is_stale(self, sequence: int) -> bool:
        if sequence != self._sequence or self.state is ResolverState.CLOSED:
            logger.debug(
                "Discarding stale resolver response",
                metadata={"event": "resolver_stale_response", "sequence": sequence, "latest": self._sequence},
            )
            return True
        return False

    def _reject(self, operation: str) -> OperationResult:
        logger.debug(
            f"Resolver busy, {operation} ignored",
            metadata={"event": "resolver_rejected", "operation": operation, "state": self.state.value},
        )
        return OperationResult.failure(f"Cannot {operation} while {self.state.value}")

    def _adopt(self, row: ProductDetailQueryResponse) -> None:
        self.view = row
        if row.detail_id is not None:
            self.detail_id = row.detail_id

    async def open(
        self,
        detail_id: int,
        initial_price: Optional[float] = None,
        initial_quantity: Optional[int] = None,
    ) -> OperationResult:
        """
        Load the detail row and select its first available color.

        Args:
            detail_id: Detail row being edited
            initial_price: Price to show instead of the server value
            initial_quantity: Quantity to show instead of the server value

        Returns:
            OperationResult; failures are also surfaced through the notifier
        """
        if self.state in (ResolverState.RESOLVING, ResolverState.SAVING):
            return self._reject("open")

        sequence = self._next_sequence()
        self.state = ResolverState.RESOLVING
        self.detail_id = detail_id
        try:
            view = await self.product_client.get_product_view(detail_id)
            first_color = next(iter(view.variant_colors), None) or view.active_color
            if not first_color:
                raise ErrorResponse("No colors found for this product", status_code=404)
            row = await self.product_client.get_product_by_color_public(
                detail_id, first_color, view.active_size
            )
        except ErrorResponse as e:
            if self._is_stale(sequence):
                return OperationResult.failure(STALE_RESPONSE)
            self.state = ResolverState.EMPTY
            return error_response_handler(e, self.notifier, title="Failed to load product detail")

        if self._is_stale(sequence):
            return OperationResult.failure(STALE_RESPONSE)

        self._adopt(row)
        self.selected_color = row.active_color or first_color
        self.selected_size = row.active_size or ""
        self.price = initial_price if initial_price is not None else row.price
        self.quantity = (
            initial_quantity if initial_quantity is not None else row.quantity_for(self.selected_size)
        )
        self.images = list(row.images)
        self.image_index = 0
        self.state = ResolverState.IDLE

        logger.info(
            "Product detail loaded",
            metadata={
                "event": "resolver_opened",
                "detail_id": self.detail_id,
                "color": self.selected_color,
                "size": self.selected_size,
            },
        )
        return OperationResult.success(data=row)

    async def change_color(self, color: str) -> OperationResult:
        if self.state is not ResolverState.IDLE:
            return self._reject("change color")

        sequence = self._next_sequence()
        self.state = ResolverState.RESOLVING
        try:
            row = await self.product_client.get_sizes_by_color(self.detail_id, color)
        except ErrorResponse as e:
            if self._is_stale(sequence):
                return OperationResult.failure(STALE_RESPONSE)
            self.state = ResolverState.IDLE
            return error_response_handler(e, self.notifier, title="Failed to change color")

        if self._is_stale(sequence):
            return OperationResult.failure(STALE_RESPONSE)

        self._adopt(row)
        self.selected_color = color
        self.selected_size = row.first_size
        self.price = row.price
        self.quantity = row.quantity_for(self.selected_size)
        self.images = list(row.images)
        self.image_index = 0
        self.state = ResolverState.IDLE

        logger.info(
            f"Color changed to {color}",
            metadata={
                "event": "resolver_color_changed",
                "detail_id": self.detail_id,
                "size": self.selected_size,
                "available_sizes": list(row.map_size_to_quantity),
            },
        )
        return OperationResult.success(data=row)

    async def change_size(self, size: str) -> OperationResult:
        if self.state is not ResolverState.IDLE:
            return self._reject("change size")

        sequence = self._next_sequence()
        self.state = ResolverState.RESOLVING
        try:
            row = await self.product_client.get_product_by_color_public(
                self.detail_id, self.selected_color, size
            )
        except ErrorResponse as e:
            if self._is_stale(sequence):
                return OperationResult.failure(STALE_RESPONSE)
            self.state = ResolverState.IDLE
            return error_response_handler(e, self.notifier, title="Failed to change size")

        if self._is_stale(sequence):
            return OperationResult.failure(STALE_RESPONSE)

        self._adopt(row)
        self.selected_size = row.active_size or size
        self.price = row.price
        self.quantity = row.quantity_for(size)
        self.state = ResolverState.IDLE

        logger.info(
            f"Size changed to {self.selected_size}",
            metadata={"event": "resolver_size_changed", "detail_id": self.detail_id},
        )
        return OperationResult.success(data=row)

    def set_price(self, price: float) -> bool:
        if self.state is not ResolverState.IDLE:
            return False
        self.price = price
        return True

    def set_quantity(self, quantity: float) -> bool:
        if self.state is not ResolverState.IDLE:
            return False
        self.quantity = quantity
        return True

    def select_image(self, index: int) -> bool:
        if not 0 <= index < len(self.images):
            return False
        self.image_index = index
        return True

    def _local_error(self, message: str) -> OperationResult:
        self.notifier.show_error(message)
        return OperationResult.failure(message)

    async def save(self) -> OperationResult:
        """
        Persist price and quantity for the selected color/size row.

        Color and size names are resolved to ids through the reference
        vocabulary; an unknown name fails the save before any request.
        """
        if self.state is not ResolverState.IDLE:
            return self._reject("save")
        if self.detail_id is None:
            return self._local_error("No product detail selected")

        price, quantity = self.price, self.quantity
        if (
            not isinstance(price, (int, float))
            or isinstance(price, bool)
            or not math.isfinite(price)
            or price <= 0
        ):
            return self._local_error("Price must be a positive number")
        if isinstance(quantity, float) and quantity.is_integer():
            quantity = int(quantity)
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 0:
            return self._local_error("Quantity must be an integer >= 0")

        detail_id = self.detail_id
        sequence = self._next_sequence()
        self.state = ResolverState.SAVING

        vocabulary = await self.vocabulary_service.load()
        if self._is_stale(sequence):
            return OperationResult.failure(STALE_RESPONSE)
        color_id = vocabulary.color_id(self.selected_color)
        size_id = vocabulary.size_id(self.selected_size)
        if color_id is None or size_id is None:
            self.state = ResolverState.IDLE
            if color_id is None:
                return self._local_error(f"Unknown color: {self.selected_color or '(none)'}")
            return self._local_error(f"Unknown size: {self.selected_size or '(none)'}")

        try:
            await self.product_client.update_product_detail(
                detail_id,
                DetailUpdate(price=price, quantity=quantity, color_id=color_id, size_id=size_id),
            )
        except ErrorResponse as e:
            if self._is_stale(sequence):
                return OperationResult.failure(STALE_RESPONSE)
            self.state = ResolverState.IDLE
            return error_response_handler(e, self.notifier)

        if self._is_stale(sequence):
            return OperationResult.failure(STALE_RESPONSE)

        saved = SavedDetail(detail_id=detail_id, price=price, quantity=quantity)
        self.state = ResolverState.CLOSED
        self.notifier.show_success("Product detail updated successfully")
        logger.info(
            "Product detail updated",
            metadata={"event": "resolver_saved", "detail_id": detail_id, "color_id": color_id, "size_id": size_id},
        )
        if self.on_saved is not None:
            outcome = self.on_saved(saved)
            if inspect.isawaitable(outcome):
                await outcome
        return OperationResult.success("Product detail updated successfully", data=saved)

    def close(self) -> None:
        """End the session; any response still in flight is discarded"""
        self._sequence += 1
        self.state = ResolverState.CLOSED
