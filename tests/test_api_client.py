"""Tests for the HTTP layer: auth headers, error mapping, endpoints."""

import asyncio
import json

import httpx
import pytest

from billing.services.api_client import (
    ApiClient,
    AuthenticationError,
    NetworkError,
    ValidationError,
    _handle_response,
)

from conftest import BASE_URL


def response(status, **kwargs):
    return httpx.Response(status, request=httpx.Request("GET", f"{BASE_URL}/bags"), **kwargs)


class TestHandleResponse:
    def test_success_returns_json(self):
        assert _handle_response(response(200, json={"ok": True})) == {"ok": True}

    def test_empty_body_returns_none(self):
        assert _handle_response(response(204)) is None

    def test_422_maps_to_validation_error(self):
        with pytest.raises(ValidationError) as excinfo:
            _handle_response(response(422, json={"detail": [{"loc": ["sku"]}]}))

        assert excinfo.value.details == [{"loc": ["sku"]}]

    def test_other_status_maps_to_network_error(self):
        with pytest.raises(NetworkError) as excinfo:
            _handle_response(response(500, json={"detail": "boom"}))

        assert excinfo.value.status_code == 500

    def test_unparseable_success_body(self):
        with pytest.raises(NetworkError):
            _handle_response(response(200, content=b"<html>"))


class TestAuthentication:
    def test_returns_access_token(self, service, make_client):
        service.route("POST", "/auth/login", json={"access_token": "abc", "token_type": "bearer"})

        token = asyncio.run(make_client(token=None).authenticate("u", "p"))

        assert token == "abc"

    @pytest.mark.parametrize(
        "status,body",
        [(401, {"detail": "Incorrect username or password"}), (200, {}), (200, [])],
    )
    def test_rejections_are_generic(self, service, make_client, status, body):
        service.route("POST", "/auth/login", status=status, json=body)

        with pytest.raises(AuthenticationError) as excinfo:
            asyncio.run(make_client().authenticate("u", "p"))

        assert str(excinfo.value) == "Invalid credentials"

    def test_login_never_sends_existing_credential(self, service, make_client):
        service.route("POST", "/auth/login", json={"access_token": "abc"})

        asyncio.run(make_client(token="old").authenticate("u", "p"))

        assert "Authorization" not in service.requests[0].headers


class TestResources:
    def test_bearer_header_on_authenticated_calls(self, service, make_client, bags):
        service.route("GET", "/bags", json=bags)

        asyncio.run(make_client().list_bags())

        assert service.requests[0].headers["Authorization"] == "Bearer tok-123"

    def test_no_header_without_credential(self, service, make_client):
        service.route("GET", "/customers", json=[])

        asyncio.run(make_client(token=None).list_customers())

        assert "Authorization" not in service.requests[0].headers

    def test_search_query_is_passed(self, service, make_client):
        service.route("GET", "/bags", json=[])

        asyncio.run(make_client().list_bags("tote"))

        assert service.requests[0].url.params["q"] == "tote"

    def test_update_and_delete_use_id_in_path(self, service, make_client):
        service.route("PUT", "/bags/b1", json={"id": "b1"})
        service.route("DELETE", "/bags/b1", json={"deleted": True})
        client = make_client()

        async def scenario():
            await client.update_bag("b1", {"name": "New"})
            await client.delete_bag("b1")

        asyncio.run(scenario())

        assert [r.method for r in service.requests] == ["PUT", "DELETE"]
        assert json.loads(service.requests[0].content) == {"name": "New"}

    def test_seed_admin_is_unauthenticated(self, service, make_client):
        service.route("POST", "/seed/admin", json={"created": False})

        asyncio.run(make_client().seed_admin())

        assert "Authorization" not in service.requests[0].headers

    def test_invoice_url_and_fetch(self, service, make_client):
        service.route("GET", "/orders/o-1/invoice", content=b"<html>INV-0001</html>")
        client = make_client()

        body = asyncio.run(client.fetch_invoice("o-1"))

        assert client.invoice_url("o-1") == f"{BASE_URL}/orders/o-1/invoice"
        assert body == b"<html>INV-0001</html>"

    def test_missing_invoice_raises(self, service, make_client):
        with pytest.raises(NetworkError) as excinfo:
            asyncio.run(make_client().fetch_invoice("nope"))

        assert excinfo.value.status_code == 404

    def test_transport_error_becomes_network_error(self, service, make_client):
        def unreachable(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        service.route("GET", "/dashboard", handler=unreachable)

        with pytest.raises(NetworkError):
            asyncio.run(make_client().dashboard())

    def test_context_manager_closes_client(self, service):
        async def scenario():
            async with ApiClient(BASE_URL, transport=service.transport) as client:
                pass
            return client

        client = asyncio.run(scenario())

        assert client._client.is_closed
