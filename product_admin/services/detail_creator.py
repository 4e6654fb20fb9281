"""
Product Detail Creator
Adds one (color, size) SKU row with its own images to an existing product.
"""

import inspect
import math
from typing import Any, Callable, List, Optional

from product_admin.clients.product_client import ProductClient
from product_admin.core.config import config
from product_admin.core.errors import ErrorResponse, error_response_handler
from product_admin.core.logger import logger
from product_admin.models.files import StagedFile
from product_admin.models.product import NewDetailSubmission
from product_admin.models.results import OperationResult, ValidationResult
from product_admin.services.notifier import Notifier
from product_admin.services.preview_registry import PreviewRegistry
from product_admin.services.variant_editor import MSG_IMAGE_TOO_LARGE, MSG_NOT_IMAGE


class ProductDetailCreator:
    """Create-product-detail form for one product"""

    def __init__(
        self,
        product_id: int,
        product_client: Optional[ProductClient] = None,
        notifier: Optional[Notifier] = None,
        registry: Optional[PreviewRegistry] = None,
        on_created: Optional[Callable[[dict], Any]] = None,
    ):
        self.product_id = product_id
        self.product_client = product_client or ProductClient()
        self.notifier = notifier or Notifier()
        self.registry = registry or PreviewRegistry()
        self.on_created = on_created

        self.color_id: Optional[int] = None
        self.size_id: Optional[int] = None
        self.price: float = 0.0
        self.quantity: float = 0
        self.previews: List[str] = []
        self.busy = False

    def __enter__(self) -> "ProductDetailCreator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def images(self) -> List[StagedFile]:
        return [self.registry.file_for(handle) for handle in self.previews]

    def select_color(self, color_id: Optional[int]) -> None:
        self.color_id = color_id

    def select_size(self, size_id: Optional[int]) -> None:
        self.size_id = size_id

    def set_price(self, price: float) -> None:
        self.price = price

    def set_quantity(self, quantity: float) -> None:
        self.quantity = quantity

    def add_images(self, files: List[StagedFile]) -> OperationResult:
        """Stage image files; the batch is rejected as a whole on any violation"""
        if not files:
            return OperationResult.success()

        limit = config.max_images_per_variant
        rejection = None
        if len(self.previews) + len(files) > limit:
            rejection = f"Maximum {limit} images allowed per product detail"
        elif any(not file.is_image for file in files):
            rejection = MSG_NOT_IMAGE
        elif any(file.size > config.max_image_size_bytes for file in files):
            rejection = MSG_IMAGE_TOO_LARGE

        if rejection:
            self.notifier.show_error(rejection)
            return OperationResult.failure(rejection)

        handles = [self.registry.acquire(file) for file in files]
        self.previews.extend(handles)
        self.notifier.show_success(f"{len(files)} image(s) added")
        return OperationResult.success(data=handles)

    def remove_image(self, index: int) -> bool:
        if not 0 <= index < len(self.previews):
            return False
        self.registry.release(self.previews.pop(index))
        return True

    def validate(self) -> ValidationResult:
        result = ValidationResult()
        if not self.color_id or not self.size_id:
            result.add("Please select both color and size")
        price = self.price
        if not isinstance(price, (int, float)) or not math.isfinite(price) or price <= 0:
            result.add("Price must be greater than 0")
        quantity = self.quantity
        if not isinstance(quantity, (int, float)) or not math.isfinite(quantity) or quantity < 0:
            result.add("Quantity cannot be negative")
        elif not float(quantity).is_integer():
            result.add("Quantity must be a whole number")
        if not self.previews:
            result.add("Please upload at least one image")
        if len(self.previews) > config.max_images_per_variant:
            result.add(f"Maximum {config.max_images_per_variant} images allowed")
        return result

    async def submit(self) -> OperationResult:
        if self.busy:
            return OperationResult.failure("Product detail creation already in progress")

        validation = self.validate()
        if not validation.ok:
            self.notifier.show_error(validation.first_error)
            return OperationResult(ok=False, message=validation.first_error, data=validation.errors)

        detail = NewDetailSubmission(
            color_id=self.color_id,
            size_id=self.size_id,
            price=float(self.price),
            quantity=int(self.quantity),
        )
        self.busy = True
        try:
            response = await self.product_client.create_product_detail(
                self.product_id, detail, self.images
            )
        except ErrorResponse as e:
            return error_response_handler(e, self.notifier, title="Failed to create product detail")
        finally:
            self.busy = False

        created = response.data if isinstance(response.data, dict) else {}
        logger.info(
            "Product detail created",
            metadata={
                "event": "product_detail_created",
                "product_id": self.product_id,
                "color_id": detail.color_id,
                "size_id": detail.size_id,
                "image_count": len(self.previews),
            },
        )
        self.reset()
        self.notifier.show_success("Product detail created successfully!")
        if self.on_created is not None:
            outcome = self.on_created(created)
            if inspect.isawaitable(outcome):
                await outcome
        return OperationResult.success("Product detail created successfully!", data=created)

    def reset(self) -> None:
        self.close()
        self.color_id = None
        self.size_id = None
        self.price = 0.0
        self.quantity = 0

    def close(self) -> None:
        self.registry.release_many(self.previews)
        self.previews = []
