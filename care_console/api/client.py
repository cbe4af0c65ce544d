"""REST client for the remote customer data store."""

from typing import Any, Protocol

import httpx
import pydantic

from care_console.config import get_settings
from care_console.exceptions import (
    ConflictError,
    CustomerNotFoundError,
    PersistenceError,
)
from care_console.models.customer import Customer
from care_console.models.ledger import CustomerUpdate
from care_console.utils.logging import get_logger

logger = get_logger(__name__)


class CustomerStore(Protocol):
    """What the profile actions need from persistence."""

    async def get_customer(self, customer_id: str) -> Customer: ...

    async def update_customer(
        self,
        customer_id: str,
        update: CustomerUpdate,
        *,
        expected_version: int,
        action_detail: str,
    ) -> Customer: ...


class ConsoleApiClient:
    """Customer CRUD over the data store's REST interface.

    Updates carry the version the caller read; the store answers 409 when
    another write got there first. Requests are never retried.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token if token is not None else settings.api_token
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport
        self.http_client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Open the underlying HTTP connection pool."""
        if self.http_client is None:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"

            self.http_client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
            logger.info("api_client_connected", base_url=self.base_url)

    async def disconnect(self) -> None:
        """Close the HTTP connection pool."""
        if self.http_client:
            await self.http_client.aclose()
            self.http_client = None
            logger.info("api_client_disconnected")

    async def __aenter__(self) -> "ConsoleApiClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    # Customers

    async def list_customers(self) -> list[Customer]:
        """Fetch every customer."""
        data = await self._request("GET", "/v1/customers")

        # The store answers with either a list or an id -> customer map
        if isinstance(data, dict):
            data = list(data.values())

        if data is None:
            return []
        if not isinstance(data, list):
            raise PersistenceError("API_BAD_RESPONSE", path="/v1/customers")
        return [self._parse_customer(item, "/v1/customers") for item in data]

    async def get_customer(self, customer_id: str) -> Customer:
        """Fetch one customer."""
        data = await self._request("GET", f"/v1/customers/{customer_id}", customer_id=customer_id)
        return self._parse_customer(data, f"/v1/customers/{customer_id}")

    async def create_customer(self, customer: Customer) -> Customer:
        """Register a new customer."""
        data = await self._request("POST", "/v1/customers", json=customer.to_wire())
        if not data:
            return await self.get_customer(customer.id)
        return self._parse_customer(data, "/v1/customers")

    async def update_customer(
        self,
        customer_id: str,
        update: CustomerUpdate,
        *,
        expected_version: int,
        action_detail: str,
    ) -> Customer:
        """
        Persist a partial update.

        Args:
            customer_id: Customer to update
            update: Fields to write
            expected_version: Version of the snapshot the update was built from
            action_detail: Human-readable description for the store's audit trail

        Returns:
            The authoritative customer after the write

        Raises:
            ConflictError: If the stored version moved on
            PersistenceError: If the store failed or could not be reached
        """
        payload = update.to_wire()
        payload["version"] = expected_version
        payload["actionDetail"] = action_detail

        data = await self._request(
            "PUT",
            f"/v1/customers/{customer_id}",
            json=payload,
            customer_id=customer_id,
            expected_version=expected_version,
        )

        if not data:
            return await self.get_customer(customer_id)
        return self._parse_customer(data, f"/v1/customers/{customer_id}")

    async def delete_customer(self, customer_id: str) -> None:
        """Delete a customer together with its history and impressions."""
        await self._request("DELETE", f"/v1/customers/{customer_id}", customer_id=customer_id)
        logger.info("customer_deleted", customer_id=customer_id)

    # Transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        customer_id: str | None = None,
        expected_version: int | None = None,
    ) -> Any:
        """Send a request and unwrap the ``data`` envelope."""
        if not self.http_client:
            await self.connect()

        try:
            response = await self.http_client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.warning("api_timeout", method=method, path=path)
            raise PersistenceError("API_TIMEOUT", path=path) from e
        except httpx.RequestError as e:
            logger.warning("api_unreachable", method=method, path=path, error=str(e))
            raise PersistenceError("API_UNREACHABLE", path=path) from e

        logger.debug("api_request", method=method, path=path, status=response.status_code)

        if response.status_code == 409 and customer_id is not None:
            raise ConflictError(
                customer_id,
                expected_version if expected_version is not None else -1,
                message=self._error_message(response),
            )
        if response.status_code == 404 and customer_id is not None:
            raise CustomerNotFoundError(customer_id)
        if response.is_error:
            message = self._error_message(response)
            logger.warning(
                "api_error",
                method=method,
                path=path,
                status=response.status_code,
                message=message,
            )
            raise PersistenceError(
                "API_ERROR",
                message=message,
                status=response.status_code,
                path=path,
            )

        if response.status_code == 204 or not response.content:
            return None

        try:
            body = response.json()
        except ValueError as e:
            logger.warning("api_bad_response", method=method, path=path, status=response.status_code)
            raise PersistenceError("API_BAD_RESPONSE", path=path) from e

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    @staticmethod
    def _parse_customer(data: Any, path: str) -> Customer:
        """Validate a customer payload from the store."""
        try:
            return Customer.model_validate(data)
        except pydantic.ValidationError as e:
            logger.warning("api_bad_response", path=path, errors=e.error_count())
            raise PersistenceError("API_BAD_RESPONSE", path=path) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str | None:
        """Pull the store's message out of an error response."""
        try:
            body = response.json()
        except ValueError:
            return response.text or None

        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return None

