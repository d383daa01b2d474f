"""Pytest configuration and shared fixtures for the billing client tests."""

import httpx
import pytest

from billing.app import BillingApp
from billing.data.repository import DataRepository
from billing.services.api_client import ApiClient
from billing.utils.config import Settings

BASE_URL = "http://billing.test"


class FakeBillingService:
    """In-memory stand-in for the remote billing service.

    Routes map (method, path) to a canned response or a handler. Handlers may
    be coroutines, which lets a test hold a response back and release it
    later. Every request is recorded for assertions.
    """

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def route(self, method, path, status=200, json=None, content=None, handler=None):
        if handler is None:
            def handler(request, status=status, json=json, content=content):
                if content is not None:
                    return httpx.Response(status, content=content)
                return httpx.Response(status, json=json)
        self.routes[(method, path)] = handler

    def calls(self, method, path) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def service():
    return FakeBillingService()


@pytest.fixture
def repo(tmp_path):
    return DataRepository(tmp_path / "storage")


@pytest.fixture
def make_client(service):
    """Build an ApiClient talking to the fake service with a fixed token."""

    def _make(token="tok-123"):
        return ApiClient(BASE_URL, credential_provider=lambda: token, transport=service.transport)

    return _make


@pytest.fixture
def settings(tmp_path):
    return Settings(
        base_url=BASE_URL,
        storage_dir=tmp_path / "storage",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def app(settings, service):
    return BillingApp(settings, transport=service.transport)


BAGS = [
    {"id": "b1", "sku": "TOTE-01", "name": "Canvas Tote", "sale_price": 10.0, "stock": 12},
    {"id": "b2", "sku": "CLUTCH-02", "name": "Evening Clutch", "sale_price": 5.0, "stock": 3},
]


@pytest.fixture
def bags():
    return [dict(b) for b in BAGS]


@pytest.fixture
def products(bags):
    from billing.models.product import Product

    return [Product.from_api(b) for b in bags]
