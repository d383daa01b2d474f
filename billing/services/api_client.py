# services/api_client.py
"""HTTP client for the bag shop billing service.

All calls go through one ``httpx.AsyncClient``. Authenticated requests carry
the current session credential as a bearer token; the credential is looked up
on every request through an injected provider, so the client never owns
session state itself.
"""

import logging
from typing import Any, Callable, Optional

import httpx

logger = logging.getLogger(__name__)

CredentialProvider = Callable[[], Optional[str]]


class BillingError(Exception):
    """Base class for every failure raised by the billing client."""


class NetworkError(BillingError):
    """Transport failure, unreadable body, or an unexpected HTTP status."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class AuthenticationError(BillingError):
    """Login rejected by the service.

    The message is deliberately generic; the service's reason is only logged.
    """

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class ValidationError(BillingError):
    """The service refused the request body (HTTP 422)."""

    def __init__(self, message: str, details: Any = None):
        self.details = details
        super().__init__(message)


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        raise NetworkError(
            f"Unreadable response from {response.request.url}", response.status_code
        ) from e


def _handle_response(response: httpx.Response) -> Any:
    """Return the decoded body of a successful response or raise a typed error."""
    if response.is_success:
        return _decode(response)

    if response.status_code == 422:
        try:
            details = response.json().get("detail")
        except (ValueError, AttributeError):
            details = None
        raise ValidationError("Request rejected by billing service", details)

    raise NetworkError(
        f"{response.request.method} {response.request.url.path} "
        f"failed with HTTP {response.status_code}",
        response.status_code,
    )


class ApiClient:
    def __init__(
        self,
        base_url: str,
        credential_provider: CredentialProvider = lambda: None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._credential_provider = credential_provider
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _auth_headers(self) -> dict[str, str]:
        token = self._credential_provider()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def _send(self, method: str, path: str, *, auth: bool = True, headers=None, **kwargs) -> httpx.Response:
        merged = dict(self._auth_headers()) if auth else {}
        if headers:
            merged.update(headers)
        try:
            return await self._client.request(method, path, headers=merged, **kwargs)
        except httpx.RequestError as e:
            logger.error("Billing service unavailable (%s %s): %s", method, path, e)
            raise NetworkError(str(e)) from e

    # Generic capability set

    async def get(self, path: str, params: dict | None = None) -> Any:
        response = await self._send("GET", path, params=params)
        return _handle_response(response)

    async def post(self, path: str, json: Any = None, headers: dict | None = None, auth: bool = True) -> Any:
        response = await self._send("POST", path, json=json, headers=headers, auth=auth)
        return _handle_response(response)

    async def put(self, path: str, json: Any = None) -> Any:
        response = await self._send("PUT", path, json=json)
        return _handle_response(response)

    async def delete(self, path: str) -> Any:
        response = await self._send("DELETE", path)
        return _handle_response(response)

    # Authentication

    async def authenticate(self, username: str, password: str) -> str:
        """Exchange credentials for an access token.

        Raises:
            AuthenticationError: the service rejected the credentials
            NetworkError: the service could not be reached
        """
        response = await self._send(
            "POST",
            "/auth/login",
            auth=False,
            data={"username": username, "password": password},
        )
        if not response.is_success:
            logger.info("Login rejected with HTTP %s", response.status_code)
            raise AuthenticationError()
        try:
            token = _decode(response)["access_token"]
        except (TypeError, KeyError, NetworkError) as e:
            logger.warning("Login response carried no access token")
            raise AuthenticationError() from e
        if not token:
            raise AuthenticationError()
        return token

    async def me(self) -> dict:
        return await self.get("/auth/me")

    async def seed_admin(self) -> Any:
        return await self.post("/seed/admin", auth=False)

    # Resources

    async def dashboard(self) -> dict:
        return await self.get("/dashboard")

    async def list_bags(self, query: str = "") -> list[dict]:
        return await self.get("/bags", params={"q": query} if query else None)

    async def create_bag(self, fields: dict) -> dict:
        return await self.post("/bags", json=fields)

    async def update_bag(self, bag_id: str, fields: dict) -> dict:
        return await self.put(f"/bags/{bag_id}", json=fields)

    async def delete_bag(self, bag_id: str) -> Any:
        return await self.delete(f"/bags/{bag_id}")

    async def list_customers(self) -> list[dict]:
        return await self.get("/customers")

    async def create_customer(self, fields: dict) -> dict:
        return await self.post("/customers", json=fields)

    async def list_orders(self) -> list[dict]:
        return await self.get("/orders")

    async def create_order(self, payload: dict, idempotency_key: str | None = None) -> dict:
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else None
        return await self.post("/orders", json=payload, headers=headers)

    def invoice_url(self, order_id: str) -> str:
        return f"{self.base_url}/orders/{order_id}/invoice"

    async def fetch_invoice(self, order_id: str) -> bytes:
        response = await self._send("GET", f"/orders/{order_id}/invoice")
        if not response.is_success:
            _handle_response(response)
        return response.content
