# services/catalog_service.py
import logging

from billing.models.product import Product
from billing.services.api_client import ApiClient, BillingError, NetworkError
from billing.utils.results import RequestVersions, Result

logger = logging.getLogger(__name__)

BAGS = "bags"


def parse_products(data) -> list[Product]:
    try:
        return [Product.from_api(p) for p in data or []]
    except (TypeError, ValueError, AttributeError) as e:
        raise NetworkError(f"Malformed product list: {e}") from e


class CatalogService:
    # CRUD wrapper for the bag catalog; keeps the last loaded list in memory.

    def __init__(self, api: ApiClient, versions: RequestVersions):
        self.api = api
        self.versions = versions
        self.products: list[Product] = []
        self.query = ""

    def get(self, product_id) -> Product | None:
        for p in self.products:
            if p.id == product_id:
                return p
        return None

    async def load(self, query: str | None = None) -> Result[list[Product]]:
        if query is not None:
            self.query = query
        version = self.versions.issue(BAGS)
        try:
            products = parse_products(await self.api.list_bags(self.query))
        except BillingError as e:
            logger.warning("Could not load catalog: %s", e)
            return Result.failure(e)

        if not self.versions.is_current(BAGS, version):
            logger.debug("Discarding stale catalog response")
            return Result.discarded(products)

        self.products = products
        return Result.success(products)

    async def save(self, fields: dict, product_id: str | None = None) -> Result[Product]:
        # POST for a new bag, PUT when editing an existing one
        try:
            if product_id is None:
                data = await self.api.create_bag(fields)
            else:
                data = await self.api.update_bag(product_id, fields)
            product = Product.from_api(data or {})
        except BillingError as e:
            logger.warning("Could not save bag %s: %s", product_id or fields.get("sku"), e)
            return Result.failure(e)

        logger.info("Saved bag %s", product.sku)
        await self.load()
        return Result.success(product)

    async def delete(self, product_id: str) -> Result[None]:
        try:
            await self.api.delete_bag(product_id)
        except BillingError as e:
            logger.warning("Could not delete bag %s: %s", product_id, e)
            return Result.failure(e)

        logger.info("Deleted bag %s", product_id)
        await self.load()
        return Result.success()
