"""Clients for the admin REST API."""

from product_admin.clients.admin_api_client import AdminApiClient, ApiResponse
from product_admin.clients.product_client import ProductClient
from product_admin.clients.reference_client import ReferenceClient

__all__ = ["AdminApiClient", "ApiResponse", "ProductClient", "ReferenceClient"]
