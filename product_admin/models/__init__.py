"""Data models for the product admin console."""

from product_admin.models.bulk_import import (
    CheckDetailRequest,
    CheckDetailResponse,
    ImportRow,
    ImportStage,
    ProductGroup,
    RowEdit,
)
from product_admin.models.files import StagedFile, UploadedFile
from product_admin.models.product import (
    DetailUpdate,
    NewDetailSubmission,
    Pagination,
    ProductDetailQueryResponse,
    ProductFilters,
    ProductListResponse,
    ProductSummary,
    SavedDetail,
)
from product_admin.models.results import OperationResult, ValidationResult
from product_admin.models.variant import (
    PerColorPricing,
    PerSizePricing,
    ProductDetail,
    ProductDraft,
    ProductSubmission,
    SizeVariant,
    VariantColor,
    VariantSize,
)
from product_admin.models.vocabulary import CategoryNode, CategoryOption, Vocabulary

__all__ = [
    "CategoryNode",
    "CategoryOption",
    "CheckDetailRequest",
    "CheckDetailResponse",
    "DetailUpdate",
    "ImportRow",
    "ImportStage",
    "NewDetailSubmission",
    "OperationResult",
    "Pagination",
    "PerColorPricing",
    "PerSizePricing",
    "ProductDetail",
    "ProductDetailQueryResponse",
    "ProductDraft",
    "ProductFilters",
    "ProductGroup",
    "ProductListResponse",
    "ProductSubmission",
    "ProductSummary",
    "RowEdit",
    "SavedDetail",
    "SizeVariant",
    "StagedFile",
    "UploadedFile",
    "ValidationResult",
    "VariantColor",
    "VariantSize",
    "Vocabulary",
]
