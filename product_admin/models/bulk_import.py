"""
Bulk Import Models

Models for the CSV + ZIP product import preview, per-row re-validation and
the final batch save.
"""

from enum import Enum
from typing import List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    PrivateAttr,
    field_validator,
    model_serializer,
    model_validator,
)

from product_admin.models.vocabulary import leaf_category_name


class ImportStage(str, Enum):
    """Import flow stage"""
    NO_FILE = "no_file"
    FILE_SELECTED = "file_selected"
    READY_TO_PREVIEW = "ready_to_preview"  # CSV plus at least one ZIP
    PREVIEWING = "previewing"
    PREVIEWED = "previewed"
    SAVING = "saving"
    SAVED = "saved"
    SAVE_FAILED = "save_failed"


class TitleKeyMixin(BaseModel):
    """Writes the title back under the key the server used, ``productTitle`` or ``title``"""
    _title_key: str = PrivateAttr(default="productTitle")

    @model_validator(mode="wrap")
    @classmethod
    def remember_title_key(cls, data, handler):
        model = handler(data)
        if isinstance(data, dict) and "title" in data and "productTitle" not in data:
            model._title_key = "title"
        return model

    @model_serializer(mode="wrap")
    def restore_title_key(self, handler, info):
        data = handler(self)
        if info.by_alias and self._title_key != "productTitle" and "productTitle" in data:
            data[self._title_key] = data.pop("productTitle")
        return data


class ImportRow(TitleKeyMixin):
    """One CSV row (one color + size of a product) after server-side parsing"""
    product_title: str = Field(
        default="",
        validation_alias=AliasChoices("productTitle", "product_title", "title"),
        serialization_alias="productTitle",
    )
    description: Optional[str] = None
    category: str = ""
    color: str = ""
    size: str = ""
    price: float = 0.0
    quantity: int = 0
    image_urls: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("imageUrls", "image_urls"),
        serialization_alias="imageUrls",
    )
    is_error: bool = Field(
        default=False,
        validation_alias=AliasChoices("isError", "is_error", "error"),
        serialization_alias="isError",
    )
    error_message: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("errorMessage", "error_message"),
        serialization_alias="errorMessage",
    )

    class Config:
        extra = "allow"  # server-provided fields survive the round trip to zip-save

    @field_validator("product_title", "category", "color", "size", mode="before")
    @classmethod
    def none_is_blank(cls, v):
        return "" if v is None else v

    @field_validator("image_urls", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        return [] if v is None else v

    @field_validator("is_error", mode="before")
    @classmethod
    def none_is_false(cls, v):
        return bool(v)


class ProductGroup(TitleKeyMixin):
    """Import rows sharing one product title"""
    product_title: str = Field(
        default="",
        validation_alias=AliasChoices("productTitle", "product_title", "title"),
        serialization_alias="productTitle",
    )
    description: Optional[str] = None
    category: str = ""
    product_details: List[ImportRow] = Field(
        default_factory=list,
        validation_alias=AliasChoices("productDetails", "product_details"),
        serialization_alias="productDetails",
    )

    class Config:
        extra = "allow"

    @field_validator("product_title", "category", mode="before")
    @classmethod
    def none_is_blank(cls, v):
        return "" if v is None else v

    @field_validator("product_details", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        return [] if v is None else v

    @property
    def has_errors(self) -> bool:
        return any(row.is_error for row in self.product_details)

    def with_leaf_categories(self) -> "ProductGroup":
        """Copy with breadcrumb categories reduced to their leaf names"""
        return self.model_copy(update={
            "category": leaf_category_name(self.category),
            "product_details": [
                row.model_copy(update={"category": leaf_category_name(row.category)})
                for row in self.product_details
            ],
        })


class RowEdit(BaseModel):
    """Values entered in the row edit form"""
    title: str = ""
    category: str = ""
    color: str = ""
    size: str = ""
    price: float = 0.0
    quantity: float = 0.0
    image_urls: List[str] = Field(default_factory=list, alias="imageUrls")

    class Config:
        populate_by_name = True


class FileProductDetail(BaseModel):
    """Sibling row used as duplicate-check context"""
    product_title: str = Field(..., serialization_alias="productTitle")
    color: str
    size: str


class CheckDetailRow(FileProductDetail):
    category: str = ""


class CheckDetailRequest(BaseModel):
    """Body of POST /products/import/check-detail"""
    product_title: str = Field(..., serialization_alias="productTitle")
    detail: CheckDetailRow
    file_product_details: List[FileProductDetail] = Field(
        default_factory=list, serialization_alias="fileProductDetails"
    )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class CheckDetailResponse(BaseModel):
    error: bool = False
    error_message: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("errorMessage", "error_message")
    )

    @field_validator("error", mode="before")
    @classmethod
    def none_is_false(cls, v):
        return bool(v)
