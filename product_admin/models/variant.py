"""
Product Variant Models

Color x size variant matrix used while authoring a product. Each color is a
ProductDetail; each enabled size of that color resolves to exactly one
SizeVariant (price, quantity), either authored per size or derived from the
color-level defaults.
"""

from typing import Dict, List, Literal, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator


class VariantColor(BaseModel):
    """Server-managed color reference data."""
    id: int
    name: str
    hex: str = Field(default="", validation_alias=AliasChoices("hex", "hexCode"))

    class Config:
        frozen = True
        populate_by_name = True

    @field_validator("hex", mode="before")
    @classmethod
    def none_hex_is_blank(cls, v):
        return v or ""


class VariantSize(BaseModel):
    """Server-managed size reference data."""
    id: int
    code: str
    label: str = ""

    class Config:
        frozen = True

    @field_validator("label", mode="before")
    @classmethod
    def none_label_is_blank(cls, v):
        return v or ""


class SizeVariant(BaseModel):
    """Price and stock for one size of one color"""
    size_id: int = Field(..., alias="sizeId")
    price: float = 0.0
    quantity: int = 0

    class Config:
        populate_by_name = True


class PerColorPricing(BaseModel):
    """Every enabled size uses the color-level price and quantity"""
    kind: Literal["per_color"] = "per_color"
    price: float
    quantity: int


class PerSizePricing(BaseModel):
    """Each enabled size carries its own price and quantity"""
    kind: Literal["per_size"] = "per_size"
    variants: Dict[int, SizeVariant]


Pricing = Union[PerColorPricing, PerSizePricing]


class ProductDetail(BaseModel):
    """One color variant of a product being created or edited"""
    color: VariantColor
    sizes: List[int] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    size_variants: List[SizeVariant] = Field(default_factory=list, alias="sizeVariants")
    price: float = 0.0
    quantity: int = 0

    class Config:
        populate_by_name = True

    @field_validator("sizes", "images", "size_variants", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        return [] if v is None else v

    @property
    def pricing(self) -> Pricing:
        """Authored per-size variants win over the color-level defaults"""
        if self.size_variants:
            return PerSizePricing(variants={v.size_id: v for v in self.size_variants})
        return PerColorPricing(price=self.price, quantity=self.quantity)

    def variant_for(self, size_id: int) -> Optional[SizeVariant]:
        for variant in self.size_variants:
            if variant.size_id == size_id:
                return variant
        return None

    def resolved_variants(self) -> List[SizeVariant]:
        """Concrete (size, price, quantity) rows this color submits"""
        match self.pricing:
            case PerSizePricing(variants=variants):
                return [v.model_copy() for v in variants.values()]
            case PerColorPricing(price=price, quantity=quantity):
                return [
                    SizeVariant(size_id=size_id, price=price, quantity=quantity)
                    for size_id in self.sizes
                ]


class ProductDraft(BaseModel):
    """Create-product form state"""
    title: str = ""
    description: str = ""
    category_id: Optional[int] = Field(default=None, alias="categoryId")
    thumbnail: str = ""
    details: List[ProductDetail] = Field(default_factory=list, alias="productDetails")

    class Config:
        populate_by_name = True

    def detail_for(self, color_id: int) -> Optional[ProductDetail]:
        for detail in self.details:
            if detail.color.id == color_id:
                return detail
        return None

    def grid(self) -> Dict[Tuple[int, int], SizeVariant]:
        """Sparse (color_id, size_id) -> variant view of the whole product"""
        cells: Dict[Tuple[int, int], SizeVariant] = {}
        for detail in self.details:
            for variant in detail.resolved_variants():
                cells[(detail.color.id, variant.size_id)] = variant
        return cells


class DetailSubmission(BaseModel):
    color_id: int = Field(..., alias="colorId")
    size_variants: List[SizeVariant] = Field(default_factory=list, alias="sizeVariants")

    class Config:
        populate_by_name = True


class ProductSubmission(BaseModel):
    """JSON part of the create-product multipart request"""
    title: str
    description: Optional[str] = None
    category_ids: List[int] = Field(default_factory=list, alias="categoryIds")
    product_details: List[DetailSubmission] = Field(default_factory=list, alias="productDetails")

    class Config:
        populate_by_name = True

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
