"""Application state container for the product list."""

from product_admin.state.reducer import ProductListState, reduce
from product_admin.state.store import AdminStore

__all__ = ["AdminStore", "ProductListState", "reduce"]
