"""
Product models as returned by the admin and public product endpoints.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from product_admin.models.variant import VariantColor, VariantSize


class ProductSummary(BaseModel):
    """Product row in the admin product list"""
    id: int
    title: str
    current_detail_id: Optional[int] = Field(default=None, alias="currentDetailId")
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    category_id: Optional[int] = Field(default=None, alias="categoryId")
    variant_colors: List[VariantColor] = Field(default_factory=list, alias="variantColors")
    variant_sizes: List[VariantSize] = Field(default_factory=list, alias="variantSizes")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    class Config:
        populate_by_name = True


class Pagination(BaseModel):
    page: int = 0
    page_size: int = Field(default=12, alias="pageSize")
    total_items: int = Field(default=0, alias="totalItems")
    total_pages: int = Field(default=0, alias="totalPages")
    has_next: bool = Field(default=False, alias="hasNext")
    has_previous: bool = Field(default=False, alias="hasPrevious")

    class Config:
        populate_by_name = True
        frozen = True


class ProductListResponse(Pagination):
    items: List[ProductSummary] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        frozen = True

    def pagination(self) -> Pagination:
        return Pagination(**self.model_dump(exclude={"items"}))


class ProductFilters(BaseModel):
    """Query filters of the admin product list"""
    title: str = ""
    category_slug: str = Field(default="", alias="categorySlug")
    is_active: Optional[bool] = Field(default=True, alias="isActive")
    sort_by: Literal["createdAt", "updatedAt", "title"] = Field(default="createdAt", alias="sortBy")
    sort_direction: Literal["asc", "desc"] = Field(default="desc", alias="sortDirection")

    class Config:
        populate_by_name = True
        frozen = True

    def to_query(self, page: int, page_size: int) -> Dict[str, Any]:
        """Query parameters for GET /products/admin; empty filters are omitted"""
        params: Dict[str, Any] = {"page": page, "pageSize": page_size}
        if self.title:
            params["title"] = self.title
        if self.category_slug:
            params["categorySlug"] = self.category_slug
        if self.is_active is not None:
            params["isActive"] = str(self.is_active).lower()
        params["sortBy"] = self.sort_by
        params["sortDirection"] = self.sort_direction
        return params


class ProductDetailQueryResponse(BaseModel):
    """Single concrete SKU row resolved by the server for a (color, size) pair"""
    detail_id: Optional[int] = Field(default=None, alias="detailId")
    product_id: Optional[int] = Field(default=None, alias="productId")
    title: Optional[str] = None
    active_color: Optional[str] = Field(default=None, alias="activeColor")
    active_size: Optional[str] = Field(default=None, alias="activeSize")
    variant_colors: List[str] = Field(default_factory=list, alias="variantColors")
    variant_sizes: List[str] = Field(default_factory=list, alias="variantSizes")
    price: float = 0.0
    quantity: int = 0
    map_size_to_quantity: Dict[str, int] = Field(default_factory=dict, alias="mapSizeToQuantity")
    images: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @field_validator("active_color", "active_size", mode="before")
    @classmethod
    def reference_to_name(cls, v):
        # Some endpoints return the full color/size object instead of its name
        if isinstance(v, dict):
            return v.get("name") or v.get("code")
        return v

    @field_validator("variant_colors", "variant_sizes", mode="before")
    @classmethod
    def references_to_names(cls, v):
        if v is None:
            return []
        return [
            (item.get("name") or item.get("code")) if isinstance(item, dict) else item
            for item in v
        ]

    @field_validator("images", "map_size_to_quantity", mode="before")
    @classmethod
    def none_is_empty(cls, v, info):
        if v is None:
            return {} if info.field_name == "map_size_to_quantity" else []
        return v

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def none_is_zero(cls, v):
        return 0 if v is None else v

    @property
    def first_size(self) -> str:
        """First size key in response order, or an empty string"""
        return next(iter(self.map_size_to_quantity), "")

    def quantity_for(self, size: Optional[str]) -> int:
        if not size:
            return 0
        return self.map_size_to_quantity.get(size, 0) or 0


class DetailUpdate(BaseModel):
    """Body of PUT /products/admin/details/{detailId}"""
    price: float
    quantity: int
    color_id: int = Field(..., alias="colorId")
    size_id: int = Field(..., alias="sizeId")

    class Config:
        populate_by_name = True


class SavedDetail(BaseModel):
    """Payload handed back to the caller after a detail row is saved"""
    detail_id: int = Field(..., alias="detailId")
    price: float
    quantity: int

    class Config:
        populate_by_name = True


class NewDetailSubmission(BaseModel):
    """JSON part of the create-product-detail multipart request"""
    color_id: int = Field(..., alias="colorId")
    size_id: int = Field(..., alias="sizeId")
    price: float
    quantity: int

    class Config:
        populate_by_name = True
