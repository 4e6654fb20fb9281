"""
Admin API Client
HTTP client for the admin REST API with correlation ID propagation.
Every call resolves to an ApiResponse envelope; transport and HTTP errors
are reported in the envelope instead of being raised.
"""

import time
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel

from product_admin.core.config import config
from product_admin.core.errors import ErrorResponse
from product_admin.core.logger import logger
from product_admin.utils.correlation_id import create_headers_with_correlation_id

# (field name, (filename, content, content type)) as accepted by httpx
MultipartFiles = List[Tuple[str, Tuple[str, bytes, str]]]

SLOW_REQUEST_MS = 2000


class ApiResponse(BaseModel):
    """Envelope returned for every admin API call"""
    success: bool
    data: Any = None
    message: Optional[str] = None
    status_code: Optional[int] = None

    def unwrap(self) -> Any:
        """
        Return the payload of a successful response.

        Raises:
            ErrorResponse: If the call failed
        """
        if not self.success:
            raise ErrorResponse(
                self.message or "Request failed",
                status_code=self.status_code or 500,
            )
        return self.data


class AdminApiClient:
    """HTTP client for the admin REST API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        access_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or config.api_base_url).rstrip("/")
        self.timeout = timeout or config.request_timeout
        self.access_token = access_token if access_token is not None else config.admin_access_token
        self._transport = transport

    def _get_headers(
        self, additional_headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, str]:
        """Create headers with correlation ID and the admin bearer token"""
        headers = create_headers_with_correlation_id(
            header_name=config.correlation_id_header
        )
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if additional_headers:
            headers.update(additional_headers)
        return headers

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[MultipartFiles] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> ApiResponse:
        start_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    method,
                    self._url(endpoint),
                    params=params,
                    json=json,
                    data=data,
                    files=files,
                    headers=self._get_headers(headers),
                )
        except httpx.HTTPError as e:
            logger.error(
                f"Request failed: {method} {endpoint}",
                error=e,
                metadata={"event": "api_request_error", "method": method, "endpoint": endpoint},
            )
            return ApiResponse(success=False, message=str(e) or "Network error occurred")
        finally:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            logger.performance(
                f"{method} {endpoint}",
                duration_ms,
                threshold_ms=SLOW_REQUEST_MS,
                metadata={"event": "api_request"},
            )

        return self._handle_response(response, method, endpoint)

    def _handle_response(self, response: httpx.Response, method: str, endpoint: str) -> ApiResponse:
        """Translate an HTTP response into the envelope"""
        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = response.text

        message = body.get("message") if isinstance(body, dict) else None

        if not response.is_success:
            logger.warning(
                f"API returned {response.status_code}: {method} {endpoint}",
                metadata={
                    "event": "api_http_error",
                    "status_code": response.status_code,
                    "endpoint": endpoint,
                },
            )
            return ApiResponse(
                success=False,
                message=message or f"HTTP Error: {response.status_code}",
                status_code=response.status_code,
            )

        return ApiResponse(
            success=True,
            data=body,
            message=message,
            status_code=response.status_code,
        )

    async def get(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> ApiResponse:
        return await self._request("GET", endpoint, params=params, headers=headers)

    async def post(
        self, endpoint: str, body: Any = None, headers: Optional[Dict[str, str]] = None
    ) -> ApiResponse:
        return await self._request("POST", endpoint, json=body, headers=headers)

    async def put(
        self, endpoint: str, body: Any = None, headers: Optional[Dict[str, str]] = None
    ) -> ApiResponse:
        return await self._request("PUT", endpoint, json=body, headers=headers)

    async def patch(
        self, endpoint: str, body: Any = None, headers: Optional[Dict[str, str]] = None
    ) -> ApiResponse:
        return await self._request("PATCH", endpoint, json=body, headers=headers)

    async def delete(
        self, endpoint: str, headers: Optional[Dict[str, str]] = None
    ) -> ApiResponse:
        return await self._request("DELETE", endpoint, headers=headers)

    async def post_multipart(
        self,
        endpoint: str,
        files: MultipartFiles,
        headers: Optional[Dict[str, str]] = None,
    ) -> ApiResponse:
        """POST a multipart/form-data body; JSON parts are passed as files with an application/json type"""
        return await self._request("POST", endpoint, files=files, headers=headers)
