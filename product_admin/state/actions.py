"""Actions accepted by the product list store."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from product_admin.models.product import Pagination, ProductSummary


@dataclass(frozen=True)
class FetchProductsRequested:
    page: Optional[int] = None
    page_size: Optional[int] = None


@dataclass(frozen=True)
class FetchProductsSilentRequested:
    """Background refresh; the loading flag is left alone"""
    page: Optional[int] = None
    page_size: Optional[int] = None


@dataclass(frozen=True)
class FetchProductsSucceeded:
    products: Tuple[ProductSummary, ...]
    pagination: Pagination


@dataclass(frozen=True)
class FetchProductsFailed:
    error: str


@dataclass(frozen=True)
class CurrentProductLoaded:
    product: ProductSummary


@dataclass(frozen=True)
class CurrentProductCleared:
    pass


@dataclass(frozen=True)
class ProductCreated:
    product: ProductSummary


@dataclass(frozen=True)
class ProductUpdated:
    product: ProductSummary


@dataclass(frozen=True)
class ProductDeleted:
    product_id: int


@dataclass(frozen=True)
class ProductOperationFailed:
    error: str


@dataclass(frozen=True)
class FiltersChanged:
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FiltersReset:
    pass


@dataclass(frozen=True)
class ErrorCleared:
    pass


Action = Union[
    FetchProductsRequested,
    FetchProductsSilentRequested,
    FetchProductsSucceeded,
    FetchProductsFailed,
    CurrentProductLoaded,
    CurrentProductCleared,
    ProductCreated,
    ProductUpdated,
    ProductDeleted,
    ProductOperationFailed,
    FiltersChanged,
    FiltersReset,
    ErrorCleared,
]
