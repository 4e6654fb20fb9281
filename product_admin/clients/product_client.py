"""
Product Client
Typed wrapper over the admin API for product, product detail and bulk
import endpoints. Failed calls raise ErrorResponse for the calling service
to handle at its operation boundary.
"""

import json
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from product_admin.clients.admin_api_client import AdminApiClient, ApiResponse, MultipartFiles
from product_admin.core.errors import ErrorResponse
from product_admin.core.logger import logger
from product_admin.models.bulk_import import CheckDetailRequest, CheckDetailResponse, ProductGroup
from product_admin.models.files import StagedFile, UploadedFile
from product_admin.models.product import (
    DetailUpdate,
    NewDetailSubmission,
    ProductDetailQueryResponse,
    ProductFilters,
    ProductListResponse,
    ProductSummary,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def json_part(name: str, payload: Any) -> tuple:
    """Multipart field carrying a JSON document"""
    return (name, (f"{name}.json", json.dumps(payload).encode("utf-8"), "application/json"))


def file_part(name: str, file: StagedFile) -> tuple:
    return (name, file.as_part())


def payload_of(body: Any) -> Any:
    """Unwrap ``{"data": ...}`` bodies; other bodies are returned as they are"""
    if isinstance(body, dict) and "data" in body and isinstance(body["data"], (dict, list)):
        return body["data"]
    return body


def parse_model(model: Type[ModelT], body: Any, operation: str) -> ModelT:
    """
    Validate a response body against a model.

    Raises:
        ErrorResponse: If the body does not match the expected shape
    """
    try:
        return model.model_validate(payload_of(body))
    except ValidationError as e:
        logger.error(
            f"Unexpected response shape for {operation}",
            error=e,
            metadata={"event": "api_response_invalid", "operation": operation},
        )
        raise ErrorResponse(f"Unexpected response from server ({operation})", status_code=502)


class ProductClient:
    """Client for the /products endpoints"""

    endpoint = "/products"

    def __init__(self, api: Optional[AdminApiClient] = None):
        self.api = api or AdminApiClient()

    # Product list and lifecycle

    async def list_products(
        self, filters: ProductFilters, page: int = 0, page_size: int = 12
    ) -> ProductListResponse:
        response = await self.api.get(
            f"{self.endpoint}/admin", params=filters.to_query(page, page_size)
        )
        return parse_model(ProductListResponse, response.unwrap(), "list_products")

    async def get_product(self, product_id: int) -> ProductSummary:
        response = await self.api.get(f"{self.endpoint}/{product_id}")
        return parse_model(ProductSummary, response.unwrap(), "get_product")

    async def delete_product(self, product_id: int) -> ApiResponse:
        response = await self.api.delete(f"{self.endpoint}/admin/{product_id}")
        response.unwrap()
        return response

    async def create_product(self, files: MultipartFiles) -> ApiResponse:
        """
        Create a product from a multipart body.

        Args:
            files: ``product`` JSON part followed by ``detail_<colorId>`` image parts

        Returns:
            The successful API response

        Raises:
            ErrorResponse: If the server rejects the product
        """
        response = await self.api.post_multipart(f"{self.endpoint}/admin", files)
        response.unwrap()
        return response

    async def create_product_detail(
        self, product_id: int, detail: NewDetailSubmission, images: List[StagedFile]
    ) -> ApiResponse:
        files = [json_part("detail", detail.model_dump(by_alias=True))]
        files.extend(file_part("images", image) for image in images)
        response = await self.api.post_multipart(
            f"{self.endpoint}/admin/{product_id}/details", files
        )
        response.unwrap()
        return response

    # Single SKU row resolution

    async def get_product_view(self, detail_id: int) -> ProductDetailQueryResponse:
        response = await self.api.get(f"{self.endpoint}/public/{detail_id}")
        return parse_model(ProductDetailQueryResponse, response.unwrap(), "get_product_view")

    async def get_sizes_by_color(self, detail_id: int, color: str) -> ProductDetailQueryResponse:
        response = await self.api.get(
            f"{self.endpoint}/public/{detail_id}/sizes", params={"color": color}
        )
        return parse_model(ProductDetailQueryResponse, response.unwrap(), "get_sizes_by_color")

    async def get_product_by_color_public(
        self, detail_id: int, color: str, size: Optional[str] = None
    ) -> ProductDetailQueryResponse:
        params = {"color": color}
        if size:
            params["size"] = size
        response = await self.api.get(
            f"{self.endpoint}/public/{detail_id}/variant", params=params
        )
        return parse_model(
            ProductDetailQueryResponse, response.unwrap(), "get_product_by_color_public"
        )

    async def update_product_detail(self, detail_id: int, update: DetailUpdate) -> ApiResponse:
        response = await self.api.put(
            f"{self.endpoint}/admin/details/{detail_id}", update.model_dump(by_alias=True)
        )
        response.unwrap()
        return response

    # Bulk import

    async def import_preview(
        self, csv_file: UploadedFile, zips: List[UploadedFile]
    ) -> List[ProductGroup]:
        files = [file_part("file", csv_file)]
        files.extend(file_part("zips", archive) for archive in zips)
        response = await self.api.post_multipart(f"{self.endpoint}/import/zip-preview", files)
        body = payload_of(response.unwrap()) or []
        if not isinstance(body, list):
            raise ErrorResponse("Unexpected response from server (import_preview)", status_code=502)
        try:
            return [ProductGroup.model_validate(group) for group in body]
        except ValidationError as e:
            logger.error(
                "Unexpected import preview shape",
                error=e,
                metadata={"event": "api_response_invalid", "operation": "import_preview"},
            )
            raise ErrorResponse("Unexpected response from server (import_preview)", status_code=502)

    async def check_detail(self, request: CheckDetailRequest) -> CheckDetailResponse:
        response = await self.api.post(
            f"{self.endpoint}/import/check-detail", request.to_payload()
        )
        return parse_model(CheckDetailResponse, response.unwrap(), "check_detail")

    async def import_save(self, groups: List[ProductGroup]) -> ApiResponse:
        body = [group.model_dump(by_alias=True) for group in groups]
        response = await self.api.post(f"{self.endpoint}/import/zip-save", body)
        response.unwrap()
        return response
