# services/order_service.py
import logging

from billing.models.order import Order
from billing.services.api_client import ApiClient, BillingError, NetworkError
from billing.utils.results import RequestVersions, Result

logger = logging.getLogger(__name__)

ORDERS = "orders"


def parse_orders(data) -> list[Order]:
    try:
        return [Order.from_api(o) for o in data or []]
    except (TypeError, ValueError, AttributeError) as e:
        raise NetworkError(f"Malformed order list: {e}") from e


class OrderService:
    # Keeps the recent-orders list and knows where each invoice lives.

    def __init__(self, api: ApiClient, versions: RequestVersions):
        self.api = api
        self.versions = versions
        self.orders: list[Order] = []

    async def refresh(self) -> Result[list[Order]]:
        version = self.versions.issue(ORDERS)
        try:
            orders = parse_orders(await self.api.list_orders())
        except BillingError as e:
            logger.warning("Could not load orders: %s", e)
            return Result.failure(e)

        if not self.versions.is_current(ORDERS, version):
            logger.debug("Discarding stale order list")
            return Result.discarded(orders)

        self.orders = orders
        return Result.success(orders)

    def invoice_url(self, order_id: str) -> str:
        return self.api.invoice_url(order_id)

    async def fetch_invoice(self, order_id: str) -> bytes:
        return await self.api.fetch_invoice(order_id)
