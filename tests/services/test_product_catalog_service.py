"""Unit tests for ProductCatalogService"""
import pytest

from product_admin.clients.admin_api_client import ApiResponse
from product_admin.core.errors import ErrorResponse
from product_admin.models.product import ProductFilters, ProductListResponse, ProductSummary
from product_admin.state.store import AdminStore
from product_admin.services.detail_creator import ProductDetailCreator
from product_admin.services.product_catalog_service import ProductCatalogService
from product_admin.services.variant_resolver import ResolverState, VariantQueryResolver


def list_response(*titles, page=0, total_pages=1):
    return ProductListResponse.model_validate({
        "items": [{"id": i + 1, "title": title} for i, title in enumerate(titles)],
        "page": page,
        "pageSize": 12,
        "totalItems": len(titles),
        "totalPages": total_pages,
    })


class TestProductCatalogService:
    """Test product list operations and their store transitions"""

    @pytest.fixture
    def store(self):
        return AdminStore()

    @pytest.fixture
    def service(self, store, mock_product_client, notifier):
        return ProductCatalogService(store=store, product_client=mock_product_client, notifier=notifier)

    @pytest.mark.asyncio
    async def test_fetch_products(self, service, store, mock_product_client):
        mock_product_client.list_products.return_value = list_response("Tee", "Jeans", page=1, total_pages=3)
        loading_states = []
        store.subscribe(lambda state, action: loading_states.append(state.loading))

        result = await service.fetch_products(page=1)

        assert result.ok is True
        assert [p.title for p in store.state.products] == ["Tee", "Jeans"]
        assert store.state.pagination.page == 1
        assert store.state.pagination.total_pages == 3
        assert loading_states == [True, False]
        mock_product_client.list_products.assert_awaited_once_with(ProductFilters(), 1, 12)

    @pytest.mark.asyncio
    async def test_fetch_failure_sets_error(self, service, store, mock_product_client, notifier):
        mock_product_client.list_products.side_effect = ErrorResponse("Unauthorized", 401)

        result = await service.fetch_products()

        assert result.ok is False
        assert store.state.error == "Unauthorized"
        assert store.state.loading is False
        assert notifier.notices == []

    @pytest.mark.asyncio
    async def test_refresh_is_silent(self, service, store, mock_product_client):
        mock_product_client.list_products.return_value = list_response("Tee")
        loading_states = []
        store.subscribe(lambda state, action: loading_states.append(state.loading))

        await service.refresh()

        assert True not in loading_states

    @pytest.mark.asyncio
    async def test_delete_product(self, service, store, mock_product_client, notifier):
        mock_product_client.list_products.return_value = list_response("Tee", "Jeans")
        mock_product_client.delete_product.return_value = ApiResponse(success=True)
        await service.fetch_products()

        result = await service.delete_product(1)

        assert result.ok is True
        assert [p.id for p in store.state.products] == [2]
        assert notifier.last.title == "Product deleted successfully!"

    @pytest.mark.asyncio
    async def test_delete_failure(self, service, store, mock_product_client, notifier):
        mock_product_client.delete_product.side_effect = ErrorResponse("Product has orders", 409)

        result = await service.delete_product(1)

        assert result.ok is False
        assert store.state.error == "Product has orders"
        assert notifier.last.title == "Product has orders"

    @pytest.mark.asyncio
    async def test_load_product(self, service, store, mock_product_client):
        mock_product_client.get_product.return_value = ProductSummary(id=3, title="Tee")

        await service.load_product(3)

        assert store.state.current_product.id == 3

    @pytest.mark.asyncio
    async def test_set_filters_reloads_first_page(self, service, store, mock_product_client):
        mock_product_client.list_products.return_value = list_response("Tee")

        result = await service.set_filters(title="tee", sort_direction="asc")

        assert result.ok is True
        filters = store.state.filters
        assert filters.title == "tee"
        assert filters.sort_direction == "asc"
        assert mock_product_client.list_products.call_args.args[1] == 0

    @pytest.mark.asyncio
    async def test_invalid_filters(self, service, store, mock_product_client):
        result = await service.set_filters(sort_by="price")

        assert result.ok is False
        assert result.message == "Invalid product filters"
        assert store.state.filters == ProductFilters()
        mock_product_client.list_products.assert_not_called()

    @pytest.mark.asyncio
    async def test_reset_filters(self, service, store, mock_product_client):
        mock_product_client.list_products.return_value = list_response()
        await service.set_filters(title="tee")

        await service.reset_filters()

        assert store.state.filters == ProductFilters()

    def test_product_created_prepends(self, service, store):
        service.product_created({"data": {"id": 9, "title": "New Tee"}})
        service.product_created({"message": "created"})

        assert [p.id for p in store.state.products] == [9]

    @pytest.mark.asyncio
    async def test_detail_changed_refreshes(self, service, mock_product_client):
        mock_product_client.list_products.return_value = list_response("Tee")

        await service.detail_changed()

        mock_product_client.list_products.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_resolver_save_refreshes_list(
        self, service, store, mock_product_client, mock_vocabulary_service, notifier
    ):
        """Test the resolver's save callback runs the background refresh"""
        mock_product_client.update_product_detail.return_value = ApiResponse(success=True, data={})
        mock_product_client.list_products.return_value = list_response("Tee")
        resolver = VariantQueryResolver(
            product_client=mock_product_client,
            vocabulary_service=mock_vocabulary_service,
            notifier=notifier,
            on_saved=service.detail_changed,
        )
        resolver.state = ResolverState.IDLE
        resolver.detail_id = 3
        resolver.selected_color = "Red"
        resolver.selected_size = "M"
        resolver.price = 20.0
        resolver.quantity = 2

        result = await resolver.save()

        assert result.ok is True
        mock_product_client.list_products.assert_awaited_once()
        assert [p.title for p in store.state.products] == ["Tee"]

    @pytest.mark.asyncio
    async def test_detail_creator_refreshes_list(
        self, service, mock_product_client, notifier, registry, make_image
    ):
        mock_product_client.create_product_detail.return_value = ApiResponse(success=True, data={"id": 30})
        mock_product_client.list_products.return_value = list_response("Tee")
        creator = ProductDetailCreator(
            7,
            product_client=mock_product_client,
            notifier=notifier,
            registry=registry,
            on_created=service.detail_changed,
        )
        creator.select_color(1)
        creator.select_size(11)
        creator.set_price(15.0)
        creator.set_quantity(3)
        creator.add_images([make_image("a.jpg")])

        result = await creator.submit()

        assert result.ok is True
        mock_product_client.list_products.assert_awaited_once()
