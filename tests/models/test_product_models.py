"""
Unit tests for product list, filter and detail query models.
"""

import pytest
from pydantic import ValidationError

from product_admin.models.product import (
    DetailUpdate,
    ProductDetailQueryResponse,
    ProductFilters,
    ProductListResponse,
)


class TestProductListResponse:
    """Test the paginated product list."""

    def test_pagination(self):
        response = ProductListResponse.model_validate({
            "items": [{"id": 1, "title": "Tee", "currentDetailId": 7}],
            "page": 2,
            "pageSize": 12,
            "totalItems": 40,
            "totalPages": 4,
            "hasNext": True,
            "hasPrevious": True,
        })
        assert response.items[0].current_detail_id == 7
        pagination = response.pagination()
        assert pagination.page == 2
        assert pagination.total_items == 40
        assert pagination.has_next is True
        assert not hasattr(pagination, "items")


class TestProductFilters:
    """Test list query parameters."""

    def test_default_query(self):
        assert ProductFilters().to_query(0, 12) == {
            "page": 0,
            "pageSize": 12,
            "isActive": "true",
            "sortBy": "createdAt",
            "sortDirection": "desc",
        }

    def test_query_with_filters(self):
        filters = ProductFilters(title="tee", category_slug="shirts", is_active=None, sort_by="title")
        params = filters.to_query(1, 24)
        assert params["title"] == "tee"
        assert params["categorySlug"] == "shirts"
        assert "isActive" not in params
        assert params["sortBy"] == "title"

    def test_rejects_unknown_sort(self):
        with pytest.raises(ValidationError):
            ProductFilters(sort_by="price")


class TestProductDetailQueryResponse:
    """Test the server-resolved detail row."""

    def test_reference_objects_become_names(self):
        row = ProductDetailQueryResponse.model_validate({
            "detailId": 3,
            "activeColor": {"id": 1, "name": "Red"},
            "activeSize": {"id": 11, "code": "M"},
            "variantColors": [{"name": "Red"}, "Blue"],
            "variantSizes": None,
        })
        assert row.active_color == "Red"
        assert row.active_size == "M"
        assert row.variant_colors == ["Red", "Blue"]
        assert row.variant_sizes == []

    def test_first_size_follows_response_order(self):
        row = ProductDetailQueryResponse.model_validate(
            {"mapSizeToQuantity": {"L": 2, "S": 0, "M": 5}}
        )
        assert row.first_size == "L"
        assert row.quantity_for("M") == 5
        assert row.quantity_for("XL") == 0
        assert row.quantity_for("") == 0

    def test_nulls(self):
        row = ProductDetailQueryResponse.model_validate(
            {"price": None, "quantity": None, "images": None, "mapSizeToQuantity": None}
        )
        assert row.price == 0
        assert row.images == []
        assert row.first_size == ""


class TestDetailUpdate:
    def test_payload(self):
        update = DetailUpdate(price=12.5, quantity=3, color_id=1, size_id=11)
        assert update.model_dump(by_alias=True) == {
            "price": 12.5, "quantity": 3, "colorId": 1, "sizeId": 11,
        }
