"""Editor, resolver, import and catalog services."""

from product_admin.services.detail_creator import ProductDetailCreator
from product_admin.services.import_session import ImportSession
from product_admin.services.notifier import Notice, Notifier
from product_admin.services.preview_registry import PreviewRegistry
from product_admin.services.product_catalog_service import ProductCatalogService
from product_admin.services.variant_editor import VariantMatrixEditor
from product_admin.services.variant_resolver import ResolverState, VariantQueryResolver
from product_admin.services.vocabulary_service import VocabularyService

__all__ = [
    "ImportSession",
    "Notice",
    "Notifier",
    "PreviewRegistry",
    "ProductCatalogService",
    "ProductDetailCreator",
    "ResolverState",
    "VariantMatrixEditor",
    "VariantQueryResolver",
    "VocabularyService",
]
