"""Shared test fixtures"""
import pytest
from unittest.mock import AsyncMock

from product_admin.clients.product_client import ProductClient
from product_admin.models.files import StagedFile
from product_admin.models.variant import VariantColor, VariantSize
from product_admin.models.vocabulary import CategoryOption, Vocabulary
from product_admin.services.notifier import Notifier
from product_admin.services.preview_registry import PreviewRegistry
from product_admin.services.vocabulary_service import VocabularyService


@pytest.fixture
def red():
    return VariantColor(id=1, name="Red", hex="#FF0000")


@pytest.fixture
def blue():
    return VariantColor(id=2, name="Blue", hex="#0000FF")


@pytest.fixture
def sizes():
    """S, M, L in display order"""
    return [
        VariantSize(id=10, code="S", label="Small"),
        VariantSize(id=11, code="M", label="Medium"),
        VariantSize(id=12, code="L", label="Large"),
    ]


@pytest.fixture
def vocabulary(red, blue, sizes):
    return Vocabulary(
        colors=[red, blue],
        sizes=sizes,
        categories=[
            CategoryOption(id=5, name="Shirts", label="Men > Tops > Shirts"),
            CategoryOption(id=6, name="Jeans", label="Men > Bottoms > Jeans"),
        ],
    )


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def registry():
    return PreviewRegistry()


@pytest.fixture
def mock_product_client():
    """ProductClient with every endpoint mocked"""
    return AsyncMock(spec=ProductClient)


@pytest.fixture
def mock_vocabulary_service(vocabulary):
    service = AsyncMock(spec=VocabularyService)
    service.load.return_value = vocabulary
    return service


@pytest.fixture
def make_image():
    """Factory for staged image files"""
    def _make(name="photo.jpg", content_type="image/jpeg", size=1024):
        return StagedFile(filename=name, content_type=content_type, content=b"x" * size)
    return _make


@pytest.fixture
def make_upload():
    """Factory for CSV and ZIP uploads"""
    def _make(name, content=b"", content_type="application/octet-stream"):
        if isinstance(content, str):
            content = content.encode("utf-8")
        return StagedFile(filename=name, content_type=content_type, content=content)
    return _make


@pytest.fixture
def sample_csv():
    return (
        "Product Title,Description,Category,Color,IMG,Size,Quantity,Price\n"
        "Basic Tee,Cotton tee,Men > Tops > Shirts,Red,tee.zip/red.jpg,M,10,19.99\n"
        "Basic Tee,Cotton tee,Men > Tops > Shirts,Blue,tee.zip/blue.jpg,L,5,21.50\n"
    )
