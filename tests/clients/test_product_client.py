"""Unit tests for ProductClient and ReferenceClient"""
import json

import pytest
from unittest.mock import AsyncMock

from product_admin.clients.admin_api_client import AdminApiClient, ApiResponse
from product_admin.clients.product_client import ProductClient, json_part, payload_of
from product_admin.clients.reference_client import ReferenceClient
from product_admin.core.errors import ErrorResponse
from product_admin.models.bulk_import import CheckDetailRequest, CheckDetailRow, ProductGroup
from product_admin.models.product import DetailUpdate, NewDetailSubmission, ProductFilters


def ok(data):
    return ApiResponse(success=True, data=data, status_code=200)


class TestHelpers:
    """Test multipart and body helpers"""

    def test_json_part(self):
        name, (filename, content, content_type) = json_part("product", {"title": "Tee"})
        assert name == "product"
        assert filename == "product.json"
        assert json.loads(content) == {"title": "Tee"}
        assert content_type == "application/json"

    def test_payload_of(self):
        assert payload_of({"data": {"id": 1}, "message": "ok"}) == {"id": 1}
        assert payload_of({"data": [1]}) == [1]
        assert payload_of({"id": 1, "data": "text"}) == {"id": 1, "data": "text"}
        assert payload_of([1, 2]) == [1, 2]


class TestProductClient:
    """Test ProductClient endpoint wiring"""

    @pytest.fixture
    def mock_api(self):
        return AsyncMock(spec=AdminApiClient)

    @pytest.fixture
    def client(self, mock_api):
        return ProductClient(mock_api)

    @pytest.mark.asyncio
    async def test_list_products(self, client, mock_api):
        mock_api.get.return_value = ok({
            "items": [{"id": 1, "title": "Tee"}],
            "page": 0,
            "pageSize": 12,
            "totalItems": 1,
            "totalPages": 1,
        })

        response = await client.list_products(ProductFilters(title="tee"), 0, 12)

        assert response.items[0].title == "Tee"
        endpoint = mock_api.get.call_args.args[0]
        params = mock_api.get.call_args.kwargs["params"]
        assert endpoint == "/products/admin"
        assert params["title"] == "tee"
        assert params["pageSize"] == 12

    @pytest.mark.asyncio
    async def test_failure_raises_error_response(self, client, mock_api):
        mock_api.get.return_value = ApiResponse(success=False, message="Unauthorized", status_code=401)

        with pytest.raises(ErrorResponse) as exc_info:
            await client.get_product(1)

        assert exc_info.value.message == "Unauthorized"
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_unexpected_shape_raises(self, client, mock_api):
        mock_api.get.return_value = ok({"unexpected": True})

        with pytest.raises(ErrorResponse) as exc_info:
            await client.get_product(1)

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_sizes_by_color(self, client, mock_api):
        mock_api.get.return_value = ok({"detailId": 8, "mapSizeToQuantity": {"S": 1}})

        row = await client.get_sizes_by_color(3, "Blue")

        assert row.detail_id == 8
        mock_api.get.assert_awaited_once_with("/products/public/3/sizes", params={"color": "Blue"})

    @pytest.mark.asyncio
    async def test_variant_without_size(self, client, mock_api):
        mock_api.get.return_value = ok({"detailId": 3})

        await client.get_product_by_color_public(3, "Red")

        mock_api.get.assert_awaited_once_with("/products/public/3/variant", params={"color": "Red"})

    @pytest.mark.asyncio
    async def test_update_product_detail(self, client, mock_api):
        mock_api.put.return_value = ok({"message": "updated"})

        await client.update_product_detail(
            3, DetailUpdate(price=10.0, quantity=2, color_id=1, size_id=11)
        )

        mock_api.put.assert_awaited_once_with(
            "/products/admin/details/3",
            {"price": 10.0, "quantity": 2, "colorId": 1, "sizeId": 11},
        )

    @pytest.mark.asyncio
    async def test_create_product_detail(self, client, mock_api, make_image):
        mock_api.post_multipart.return_value = ok({"id": 4})

        await client.create_product_detail(
            7,
            NewDetailSubmission(color_id=1, size_id=11, price=9.5, quantity=3),
            [make_image("a.jpg"), make_image("b.jpg")],
        )

        endpoint, files = mock_api.post_multipart.call_args.args
        assert endpoint == "/products/admin/7/details"
        assert [name for name, _ in files] == ["detail", "images", "images"]
        assert json.loads(files[0][1][1]) == {"colorId": 1, "sizeId": 11, "price": 9.5, "quantity": 3}

    @pytest.mark.asyncio
    async def test_import_preview(self, client, mock_api, make_upload):
        mock_api.post_multipart.return_value = ok([
            {"productTitle": "Tee", "productDetails": [{"color": "Red", "size": "M"}]}
        ])

        groups = await client.import_preview(
            make_upload("products.csv", "a;b"),
            [make_upload("a.zip"), make_upload("b.zip")],
        )

        assert groups[0].product_details[0].color == "Red"
        endpoint, files = mock_api.post_multipart.call_args.args
        assert endpoint == "/products/import/zip-preview"
        assert [name for name, _ in files] == ["file", "zips", "zips"]

    @pytest.mark.asyncio
    async def test_import_preview_rejects_non_list(self, client, mock_api, make_upload):
        mock_api.post_multipart.return_value = ok({"message": "done"})

        with pytest.raises(ErrorResponse):
            await client.import_preview(make_upload("p.csv"), [make_upload("a.zip")])

    @pytest.mark.asyncio
    async def test_check_detail(self, client, mock_api):
        mock_api.post.return_value = ok({"error": True, "errorMessage": "Duplicate"})
        request = CheckDetailRequest(
            product_title="Tee",
            detail=CheckDetailRow(product_title="Tee", color="Red", size="M"),
        )

        response = await client.check_detail(request)

        assert response.error is True
        assert mock_api.post.call_args.args[0] == "/products/import/check-detail"
        assert mock_api.post.call_args.args[1]["productTitle"] == "Tee"

    @pytest.mark.asyncio
    async def test_import_save_sends_aliases(self, client, mock_api):
        mock_api.post.return_value = ok({"message": "saved"})
        group = ProductGroup.model_validate(
            {"productTitle": "Tee", "productDetails": [{"color": "Red", "size": "M", "imageUrls": []}]}
        )

        await client.import_save([group])

        endpoint, body = mock_api.post.call_args.args
        assert endpoint == "/products/import/zip-save"
        assert body[0]["productTitle"] == "Tee"
        assert body[0]["productDetails"][0]["isError"] is False


class TestReferenceClient:
    """Test ReferenceClient"""

    @pytest.fixture
    def mock_api(self):
        return AsyncMock(spec=AdminApiClient)

    @pytest.mark.asyncio
    async def test_active_colors_wrapped_in_data(self, mock_api):
        mock_api.get.return_value = ok({"data": [{"id": 1, "name": "Red", "hexCode": "#F00"}]})

        colors = await ReferenceClient(mock_api).get_active_colors()

        assert colors[0].name == "Red"
        mock_api.get.assert_awaited_once_with("/colors/active")

    @pytest.mark.asyncio
    async def test_category_tree(self, mock_api):
        mock_api.get.return_value = ok([{"id": 1, "name": "Men", "children": [{"id": 2, "name": "Tops"}]}])

        tree = await ReferenceClient(mock_api).get_category_tree()

        assert tree[0].children[0].name == "Tops"

    @pytest.mark.asyncio
    async def test_empty_body(self, mock_api):
        mock_api.get.return_value = ok(None)
        assert await ReferenceClient(mock_api).get_active_sizes() == []

    @pytest.mark.asyncio
    async def test_non_list_body(self, mock_api):
        mock_api.get.return_value = ok({"message": "nope"})
        with pytest.raises(ErrorResponse):
            await ReferenceClient(mock_api).get_active_sizes()
