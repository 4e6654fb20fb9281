"""
Unit tests for bulk import models.
"""

import pytest
from pydantic import ValidationError

from product_admin.models.bulk_import import (
    CheckDetailRequest,
    CheckDetailResponse,
    CheckDetailRow,
    FileProductDetail,
    ImportRow,
    ImportStage,
    ProductGroup,
    RowEdit,
)


@pytest.fixture
def preview_group():
    """Product group as returned by the zip-preview endpoint"""
    return {
        "productTitle": "Basic Tee",
        "description": "Cotton tee",
        "category": "Men > Tops > Shirts",
        "productDetails": [
            {
                "productTitle": "Basic Tee",
                "category": "Men > Tops > Shirts",
                "color": "Red",
                "size": "M",
                "price": 19.99,
                "quantity": 10,
                "imageUrls": ["https://cdn.example.com/red.jpg"],
                "isError": False,
                "errorMessage": None,
                "rowNumber": 2,
            },
            {
                "productTitle": "Basic Tee",
                "category": "Men > Tops > Shirts",
                "color": "Purple",
                "size": "M",
                "price": 19.99,
                "quantity": 3,
                "imageUrls": None,
                "isError": True,
                "errorMessage": "Color not found: Purple",
            },
        ],
    }


class TestImportStage:
    """Test ImportStage enum."""

    def test_values(self):
        assert ImportStage.NO_FILE == "no_file"
        assert ImportStage.READY_TO_PREVIEW == "ready_to_preview"
        assert ImportStage.SAVE_FAILED == "save_failed"


class TestImportRow:
    """Test ImportRow parsing and serialization."""

    def test_parses_server_aliases(self, preview_group):
        row = ImportRow.model_validate(preview_group["productDetails"][0])
        assert row.product_title == "Basic Tee"
        assert row.image_urls == ["https://cdn.example.com/red.jpg"]
        assert row.is_error is False
        assert row.error_message is None

    def test_null_fields_become_empty(self, preview_group):
        row = ImportRow.model_validate(preview_group["productDetails"][1])
        assert row.image_urls == []
        assert row.is_error is True
        assert row.error_message == "Color not found: Purple"

    def test_accepts_error_alias(self):
        row = ImportRow.model_validate({"title": "Tee", "error": True})
        assert row.product_title == "Tee"
        assert row.is_error is True

    def test_unknown_fields_survive_round_trip(self, preview_group):
        """Test server-only fields are sent back unchanged."""
        row = ImportRow.model_validate(preview_group["productDetails"][0])
        payload = row.model_dump(by_alias=True)
        assert payload["rowNumber"] == 2
        assert payload["productTitle"] == "Basic Tee"
        assert payload["imageUrls"] == ["https://cdn.example.com/red.jpg"]
        assert payload["isError"] is False

    def test_title_key_is_kept(self):
        """Test a row that arrived with 'title' is sent back under 'title'"""
        row = ImportRow.model_validate({"title": "Tee", "color": "Red", "size": "M"})
        edited = row.model_copy(update={"product_title": "Basic Tee"})

        payload = edited.model_dump(by_alias=True)

        assert payload["title"] == "Basic Tee"
        assert "productTitle" not in payload
        assert edited.model_dump()["product_title"] == "Basic Tee"

    def test_group_title_key_is_kept(self):
        group = ProductGroup.model_validate({
            "title": "Tee",
            "productDetails": [{"productTitle": "Tee", "color": "Red", "size": "M"}],
        })

        payload = group.model_dump(by_alias=True)

        assert payload["title"] == "Tee"
        assert payload["productDetails"][0]["productTitle"] == "Tee"


class TestProductGroup:
    """Test ProductGroup."""

    def test_parses_details(self, preview_group):
        group = ProductGroup.model_validate(preview_group)
        assert group.product_title == "Basic Tee"
        assert len(group.product_details) == 2

    def test_has_errors(self, preview_group):
        group = ProductGroup.model_validate(preview_group)
        assert group.has_errors is True

        preview_group["productDetails"] = preview_group["productDetails"][:1]
        assert ProductGroup.model_validate(preview_group).has_errors is False

    def test_with_leaf_categories(self, preview_group):
        """Test breadcrumb categories are reduced to their leaf names."""
        group = ProductGroup.model_validate(preview_group)
        leaf = group.with_leaf_categories()

        assert leaf.category == "Shirts"
        assert all(row.category == "Shirts" for row in leaf.product_details)
        # Original untouched
        assert group.category == "Men > Tops > Shirts"
        assert group.product_details[0].category == "Men > Tops > Shirts"

    def test_null_details(self):
        group = ProductGroup.model_validate({"productTitle": "Tee", "productDetails": None})
        assert group.product_details == []
        assert group.has_errors is False


class TestRowEdit:
    """Test RowEdit form values."""

    def test_accepts_alias_and_name(self):
        by_alias = RowEdit.model_validate({"title": "Tee", "imageUrls": ["https://a/b.jpg"]})
        by_name = RowEdit(title="Tee", image_urls=["https://a/b.jpg"])
        assert by_alias.image_urls == by_name.image_urls

    def test_rejects_non_numeric_price(self):
        with pytest.raises(ValidationError):
            RowEdit.model_validate({"title": "Tee", "price": "cheap"})


class TestCheckDetail:
    """Test check-detail request and response."""

    def test_request_payload(self):
        request = CheckDetailRequest(
            product_title="Tee",
            detail=CheckDetailRow(product_title="Tee", color="Red", size="M", category="Shirts"),
            file_product_details=[FileProductDetail(product_title="Tee", color="Blue", size="L")],
        )
        assert request.to_payload() == {
            "productTitle": "Tee",
            "detail": {"productTitle": "Tee", "color": "Red", "size": "M", "category": "Shirts"},
            "fileProductDetails": [{"productTitle": "Tee", "color": "Blue", "size": "L"}],
        }

    def test_response_parsing(self):
        response = CheckDetailResponse.model_validate(
            {"error": True, "errorMessage": "Duplicate color and size in file"}
        )
        assert response.error is True
        assert response.error_message == "Duplicate color and size in file"

    def test_response_null_error(self):
        response = CheckDetailResponse.model_validate({"error": None})
        assert response.error is False
        assert response.error_message is None
