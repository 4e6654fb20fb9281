"""
Reference vocabulary: the colors, sizes and categories an import row or a
variant may use. Fetched once per session and treated as read-only.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from product_admin.models.variant import VariantColor, VariantSize

CATEGORY_PATH_SEPARATOR = " > "


def leaf_category_name(category: Optional[str]) -> str:
    """'Men > Tops > Shirts' -> 'Shirts'; plain names pass through trimmed"""
    if not category:
        return ""
    return category.split(">")[-1].strip()


class CategoryNode(BaseModel):
    """Node of the active category tree"""
    id: Optional[int] = None
    name: str
    slug: Optional[str] = None
    children: List["CategoryNode"] = Field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


class CategoryOption(BaseModel):
    """Selectable leaf category with its breadcrumb label"""
    id: Optional[int] = None
    name: str
    label: str


def flatten_leaf_categories(nodes: List[CategoryNode]) -> List[CategoryOption]:
    """
    Collect every leaf category with its full breadcrumb label.

    Labels are sorted case-insensitively so the option list is stable.
    """
    options: List[CategoryOption] = []

    def walk(children: List[CategoryNode], parents: List[str]) -> None:
        for node in children:
            path = [*parents, node.name]
            if node.is_leaf:
                options.append(
                    CategoryOption(id=node.id, name=node.name, label=CATEGORY_PATH_SEPARATOR.join(path))
                )
            else:
                walk(node.children, path)

    walk(nodes, [])
    options.sort(key=lambda option: option.label.casefold())
    return options


class Vocabulary(BaseModel):
    colors: List[VariantColor] = Field(default_factory=list)
    sizes: List[VariantSize] = Field(default_factory=list)
    categories: List[CategoryOption] = Field(default_factory=list)

    def _color_index(self) -> Dict[str, int]:
        return {color.name.strip().casefold(): color.id for color in self.colors}

    def _size_index(self) -> Dict[str, int]:
        return {size.code.strip().casefold(): size.id for size in self.sizes}

    def color_id(self, name: Optional[str]) -> Optional[int]:
        if not name:
            return None
        return self._color_index().get(name.strip().casefold())

    def size_id(self, code: Optional[str]) -> Optional[int]:
        if not code:
            return None
        return self._size_index().get(code.strip().casefold())

    def allows_color(self, name: Optional[str]) -> bool:
        return self.color_id(name) is not None

    def allows_size(self, code: Optional[str]) -> bool:
        return self.size_id(code) is not None

    @property
    def category_labels(self) -> List[str]:
        return [option.label for option in self.categories]

    def allows_category(self, category: Optional[str]) -> bool:
        leaf = leaf_category_name(category).casefold()
        return any(option.name.casefold() == leaf for option in self.categories)
