"""
Product list state and its reducer.

``reduce`` is pure: it never mutates the incoming state and returns the same
object when an action does not apply.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from product_admin.models.product import Pagination, ProductFilters, ProductSummary
from product_admin.state.actions import (
    Action,
    CurrentProductCleared,
    CurrentProductLoaded,
    ErrorCleared,
    FetchProductsFailed,
    FetchProductsRequested,
    FetchProductsSilentRequested,
    FetchProductsSucceeded,
    FiltersChanged,
    FiltersReset,
    ProductCreated,
    ProductDeleted,
    ProductOperationFailed,
    ProductUpdated,
)


@dataclass(frozen=True)
class ProductListState:
    products: Tuple[ProductSummary, ...] = ()
    current_product: Optional[ProductSummary] = None
    loading: bool = False
    error: Optional[str] = None
    pagination: Pagination = field(default_factory=Pagination)
    filters: ProductFilters = field(default_factory=ProductFilters)


def _replace_product(products: Tuple[ProductSummary, ...], product: ProductSummary):
    return tuple(product if p.id == product.id else p for p in products)


def reduce(state: ProductListState, action: Action) -> ProductListState:
    match action:
        case FetchProductsRequested():
            return replace(state, loading=True, error=None)
        case FetchProductsSilentRequested():
            return replace(state, error=None)
        case FetchProductsSucceeded(products=products, pagination=pagination):
            return replace(
                state, loading=False, products=tuple(products), pagination=pagination, error=None
            )
        case FetchProductsFailed(error=error) | ProductOperationFailed(error=error):
            return replace(state, loading=False, error=error)
        case CurrentProductLoaded(product=product):
            return replace(state, loading=False, current_product=product, error=None)
        case CurrentProductCleared():
            return replace(state, current_product=None)
        case ProductCreated(product=product):
            return replace(state, loading=False, products=(product, *state.products), error=None)
        case ProductUpdated(product=product):
            current = state.current_product
            if current is not None and current.id == product.id:
                current = product
            return replace(
                state,
                loading=False,
                products=_replace_product(state.products, product),
                current_product=current,
                error=None,
            )
        case ProductDeleted(product_id=product_id):
            current = state.current_product
            if current is not None and current.id == product_id:
                current = None
            return replace(
                state,
                loading=False,
                products=tuple(p for p in state.products if p.id != product_id),
                current_product=current,
                error=None,
            )
        case FiltersChanged(changes=changes):
            filters = ProductFilters.model_validate({**state.filters.model_dump(), **changes})
            return replace(state, filters=filters)
        case FiltersReset():
            return replace(state, filters=ProductFilters())
        case ErrorCleared():
            return replace(state, error=None)
    return state
