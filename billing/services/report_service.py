# services/report_service.py
import logging
from collections import Counter
from dataclasses import dataclass, field

from billing.models.order import Order
from billing.models.product import Product
from billing.services.api_client import ApiClient, BillingError, NetworkError
from billing.utils.results import RequestVersions, Result
# report_service.py is a service module (Service Layer)
# with the class name ReportService, responsible for the dashboard summary
# (aggregate cards, recent orders, low-stock bags) and local sales stats.

logger = logging.getLogger(__name__)

DASHBOARD = "dashboard"


@dataclass
class DashboardSummary:
    bags: int = 0
    customers: int = 0
    orders: int = 0
    revenue: float = 0.0
    recent_orders: list[Order] = field(default_factory=list)
    low_stock: list[Product] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "DashboardSummary":
        cards = data.get("cards") or {}
        return cls(
            bags=int(cards.get("bags") or 0),
            customers=int(cards.get("customers") or 0),
            orders=int(cards.get("orders") or 0),
            revenue=float(cards.get("revenue") or 0),
            recent_orders=[Order.from_api(o) for o in data.get("recent_orders") or []],
            low_stock=[Product.from_api(p) for p in data.get("low_stock") or []],
        )


class ReportService:
    def __init__(self, api: ApiClient, versions: RequestVersions):
        self.api = api
        self.versions = versions
        self.summary: DashboardSummary | None = None

    async def refresh(self) -> Result[DashboardSummary]:
        version = self.versions.issue(DASHBOARD)
        try:
            data = await self.api.dashboard()
            summary = DashboardSummary.from_api(data or {})
        except BillingError as e:
            logger.warning("Could not load dashboard: %s", e)
            return Result.failure(e)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Malformed dashboard payload: %s", e)
            return Result.failure(NetworkError(f"Malformed dashboard payload: {e}"))

        if not self.versions.is_current(DASHBOARD, version):
            return Result.discarded(summary)

        self.summary = summary
        logger.info(
            "Dashboard loaded: %d orders, revenue %.2f", summary.orders, summary.revenue
        )
        return Result.success(summary)

    def sales_summary(self, orders: list[Order]) -> dict:
        # Revenue plus the 5 best-selling bags by units, from orders already
        # loaded on the client. Counter.most_common(5) gives the top five.
        revenue = sum(o.total for o in orders)
        counter = Counter()
        for o in orders:
            for it in o.items:
                counter[it.get("bag_id")] += it.get("quantity") or 0
        top5 = counter.most_common(5)
        return {"revenue": round(revenue, 2), "top5": top5}

    def low_stock(self, products: list[Product], threshold: int = 5) -> list[Product]:
        # Bags at or below the threshold, for when no dashboard is loaded.
        return [p for p in products if p.stock <= threshold]
