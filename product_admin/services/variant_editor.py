"""
Variant Matrix Editor

Authoring state for a new product: one ProductDetail per selected color,
each carrying the sizes it is sold in and either per-size or color-level
pricing. Mutations keep ``sizes`` and ``size_variants`` in step; validation
and submission never raise to the caller.
"""

import math
from typing import Callable, Dict, List, Literal, Optional

from product_admin.clients.admin_api_client import MultipartFiles
from product_admin.clients.product_client import ProductClient, json_part
from product_admin.core.config import config
from product_admin.core.errors import ErrorResponse, error_response_handler
from product_admin.core.logger import logger
from product_admin.models.files import StagedFile
from product_admin.models.results import OperationResult, ValidationResult
from product_admin.models.variant import (
    PerColorPricing,
    PerSizePricing,
    ProductDetail,
    ProductDraft,
    ProductSubmission,
    DetailSubmission,
    SizeVariant,
    VariantColor,
)
from product_admin.services.notifier import Notifier
from product_admin.services.preview_registry import PreviewRegistry, is_preview_handle

PricingField = Literal["price", "quantity"]

MSG_TITLE_REQUIRED = "Product title is required"
MSG_DETAILS_REQUIRED = "At least one product detail must be created"
MSG_INVALID_COLOR = "Each product detail must have a valid color"
MSG_SIZES_REQUIRED = "Each color productDetail must have at least one size"
MSG_INVALID_VARIANT = "Each size variant must have a valid price (> 0) and quantity (integer >= 0)"
MSG_INVALID_PRICE = "Each color productDetail must have a valid price"
MSG_INVALID_QUANTITY = "Each color productDetail must have a valid quantity (integer >= 0)"
MSG_IMAGES_REQUIRED = "Each color productDetail must have at least one image"
MSG_CATEGORY_REQUIRED = "At least one categoryId is required"
MSG_NOT_IMAGE = "Please select only image files"
MSG_IMAGE_TOO_LARGE = "Each image must be less than 5MB"


def clamp_quantity(value: float) -> int:
    """Non-negative whole number; non-finite input becomes 0"""
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return max(0, math.floor(value))


def clamp_price(value: float) -> float:
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0.0
    return max(0.0, float(value))


def is_valid_price(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def is_valid_quantity(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class VariantMatrixEditor:
    """
    Create-product form backed by a ProductDraft.

    Staged image files are owned by a PreviewRegistry; a detail's ``images``
    list holds remote URLs and preview handles side by side.
    """

    def __init__(
        self,
        product_client: Optional[ProductClient] = None,
        notifier: Optional[Notifier] = None,
        registry: Optional[PreviewRegistry] = None,
        draft: Optional[ProductDraft] = None,
        on_created: Optional[Callable[[dict], None]] = None,
    ):
        self.product_client = product_client or ProductClient()
        self.notifier = notifier or Notifier()
        self.registry = registry or PreviewRegistry()
        self.draft = draft or ProductDraft()
        self.on_created = on_created
        self.busy = False

    def __enter__(self) -> "VariantMatrixEditor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def details(self) -> List[ProductDetail]:
        return self.draft.details

    def _detail(self, color_id: int) -> Optional[ProductDetail]:
        return self.draft.detail_for(color_id)

    def staged_files(self, color_id: int) -> List[StagedFile]:
        """Files awaiting upload for a color, in display order"""
        detail = self._detail(color_id)
        if detail is None:
            return []
        return [
            self.registry.file_for(image)
            for image in detail.images
            if self.registry.owns(image)
        ]

    def _staged_handles(self, detail: ProductDetail) -> List[str]:
        return [image for image in detail.images if self.registry.owns(image)]

    # Product-level fields

    def set_title(self, title: str) -> None:
        self.draft.title = title

    def set_description(self, description: str) -> None:
        self.draft.description = description

    def set_category(self, category_id: Optional[int]) -> None:
        self.draft.category_id = category_id

    def set_thumbnail(self, thumbnail: str) -> None:
        self.draft.thumbnail = thumbnail

    # Colors and sizes

    def add_color(self, color: VariantColor) -> ProductDetail:
        existing = self._detail(color.id)
        if existing is not None:
            return existing
        detail = ProductDetail(color=color)
        self.draft.details.append(detail)
        return detail

    def remove_color(self, color_id: int) -> bool:
        detail = self._detail(color_id)
        if detail is None:
            return False
        self.registry.release_many(self._staged_handles(detail))
        self.draft.details = [d for d in self.draft.details if d.color.id != color_id]
        return True

    @staticmethod
    def _materialize_variants(detail: ProductDetail) -> None:
        """Seed per-size variants for a detail that only carries color-level pricing"""
        if detail.size_variants or not detail.sizes:
            return
        detail.size_variants = [
            SizeVariant(size_id=size_id, price=detail.price or 0, quantity=detail.quantity or 0)
            for size_id in detail.sizes
        ]

    def toggle_size(self, color_id: int, size_id: int) -> bool:
        """
        Enable or disable a size for a color.

        Returns:
            True if the size is enabled after the call
        """
        detail = self._detail(color_id)
        if detail is None:
            return False

        self._materialize_variants(detail)
        if size_id in detail.sizes:
            detail.sizes = [s for s in detail.sizes if s != size_id]
            detail.size_variants = [v for v in detail.size_variants if v.size_id != size_id]
            return False

        detail.sizes = [*detail.sizes, size_id]
        detail.size_variants = [
            *detail.size_variants,
            SizeVariant(size_id=size_id, price=detail.price or 0, quantity=detail.quantity or 0),
        ]
        return True

    def set_size_variant_field(
        self, color_id: int, size_id: int, field: PricingField, value: float
    ) -> bool:
        detail = self._detail(color_id)
        if detail is None:
            return False
        variant = detail.variant_for(size_id)
        if variant is None:
            return False
        if field == "quantity":
            variant.quantity = clamp_quantity(value)
        elif field == "price":
            variant.price = clamp_price(value)
        else:
            raise ValueError(f"Unknown size variant field: {field}")
        return True

    def set_color_default(self, color_id: int, field: PricingField, value: float) -> bool:
        detail = self._detail(color_id)
        if detail is None:
            return False
        if field == "quantity":
            detail.quantity = clamp_quantity(value)
        elif field == "price":
            detail.price = clamp_price(value)
        else:
            raise ValueError(f"Unknown color field: {field}")
        return True

    # Images

    def add_images(self, color_id: int, files: List[StagedFile]) -> OperationResult:
        """
        Stage a batch of image files for a color.

        The batch is applied entirely or not at all. Rejections are reported
        through the notifier and the returned result.
        """
        detail = self._detail(color_id)
        if detail is None:
            return OperationResult.failure(f"Color {color_id} has not been added")
        if not files:
            return OperationResult.success()

        limit = config.max_images_per_variant
        staged = self._staged_handles(detail)
        rejection = None
        if len(staged) + len(files) > limit or len(detail.images) + len(files) > limit:
            rejection = f"Maximum {limit} images allowed per color productDetail"
        elif any(not file.is_image for file in files):
            rejection = MSG_NOT_IMAGE
        elif any(file.size > config.max_image_size_bytes for file in files):
            rejection = MSG_IMAGE_TOO_LARGE

        if rejection:
            logger.info(
                "Image batch rejected",
                metadata={
                    "event": "images_rejected",
                    "color_id": color_id,
                    "file_count": len(files),
                    "reason": rejection,
                },
            )
            self.notifier.show_error(rejection)
            return OperationResult.failure(rejection)

        handles = [self.registry.acquire(file) for file in files]
        detail.images = [*detail.images, *handles]
        self.notifier.show_success("Product detail image(s) added")
        return OperationResult.success(data=handles)

    def remove_image(self, color_id: int, index: int) -> bool:
        detail = self._detail(color_id)
        if detail is None or not 0 <= index < len(detail.images):
            return False
        image = detail.images[index]
        detail.images = [img for i, img in enumerate(detail.images) if i != index]
        if is_preview_handle(image):
            self.registry.release(image)
        return True

    # Validation and submission

    def validate(self) -> ValidationResult:
        result = ValidationResult()
        draft = self.draft

        if not draft.title.strip():
            result.add(MSG_TITLE_REQUIRED)
        if len(draft.title) > config.max_title_length:
            result.add(f"Product title must be {config.max_title_length} characters or less")

        if not draft.details:
            result.add(MSG_DETAILS_REQUIRED)
            return result

        for detail in draft.details:
            if detail.color is None or not isinstance(detail.color.id, int):
                result.add(MSG_INVALID_COLOR)

            if not detail.sizes:
                result.add(MSG_SIZES_REQUIRED)

            match detail.pricing:
                case PerSizePricing(variants=variants):
                    if any(
                        not is_valid_price(v.price) or not is_valid_quantity(v.quantity)
                        for v in variants.values()
                    ):
                        result.add(MSG_INVALID_VARIANT)
                case PerColorPricing(price=price, quantity=quantity):
                    if not is_valid_price(price):
                        result.add(MSG_INVALID_PRICE)
                    if not is_valid_quantity(quantity):
                        result.add(MSG_INVALID_QUANTITY)

            if not detail.images and not draft.thumbnail:
                result.add(MSG_IMAGES_REQUIRED)

            if len(self._staged_handles(detail)) > config.max_images_per_variant:
                result.add(f"Maximum {config.max_images_per_variant} images allowed per color variant")

        return result

    def build_submission(self) -> ProductSubmission:
        draft = self.draft
        return ProductSubmission(
            title=draft.title.strip(),
            description=draft.description.strip() or None,
            category_ids=[draft.category_id] if draft.category_id is not None else [],
            product_details=[
                DetailSubmission(color_id=detail.color.id, size_variants=detail.resolved_variants())
                for detail in draft.details
            ],
        )

    def build_multipart(self) -> MultipartFiles:
        """``product`` JSON part followed by each color's staged files under ``detail_<colorId>``"""
        files = [json_part("product", self.build_submission().to_payload())]
        for detail in self.draft.details:
            for file in self.staged_files(detail.color.id):
                files.append((f"detail_{detail.color.id}", file.as_part()))
        return files

    def _staged_file_counts(self) -> Dict[int, int]:
        return {d.color.id: len(self._staged_handles(d)) for d in self.draft.details}

    async def submit(self) -> OperationResult:
        """
        Validate and create the product.

        On success every staged preview is released and the form is reset.
        On failure the form is left exactly as it was.
        """
        if self.busy:
            return OperationResult.failure("Product submission already in progress")

        validation = self.validate()
        if not validation.ok:
            self.notifier.show_error(validation.first_error)
            return OperationResult(ok=False, message=validation.first_error, data=validation.errors)

        if self.draft.category_id is None:
            self.notifier.show_error(MSG_CATEGORY_REQUIRED)
            return OperationResult.failure(MSG_CATEGORY_REQUIRED)

        self.busy = True
        try:
            logger.info(
                f"Creating product: {self.draft.title.strip()}",
                metadata={
                    "event": "product_create_submit",
                    "color_count": len(self.draft.details),
                    "staged_files": self._staged_file_counts(),
                },
            )
            response = await self.product_client.create_product(self.build_multipart())
        except ErrorResponse as e:
            return error_response_handler(e, self.notifier)
        finally:
            self.busy = False

        created = response.data if isinstance(response.data, dict) else {}
        self.reset()
        self.notifier.show_success("Product created successfully!")
        logger.info(
            "Product created",
            metadata={"event": "product_created", "product_id": created.get("id")},
        )
        if self.on_created is not None:
            self.on_created(created)
        return OperationResult.success("Product created successfully!", data=created)

    def reset(self) -> None:
        self._release_previews()
        self.draft = ProductDraft()

    def close(self) -> None:
        self._release_previews()

    def _release_previews(self) -> int:
        released = 0
        for detail in self.draft.details:
            released += self.registry.release_many(self._staged_handles(detail))
        return released
