# services/customer_service.py
import logging

from billing.models.customer import Customer
from billing.services.api_client import ApiClient, BillingError, NetworkError
from billing.utils.results import RequestVersions, Result

logger = logging.getLogger(__name__)

CUSTOMERS = "customers"


class CustomerService:
    def __init__(self, api: ApiClient, versions: RequestVersions):
        self.api = api
        self.versions = versions
        self.customers: list[Customer] = []

    def find(self, name: str) -> Customer | None:
        # Case-insensitive lookup by display name.
        wanted = name.strip().lower()
        for c in self.customers:
            if c.name.strip().lower() == wanted:
                return c
        return None

    async def load(self) -> Result[list[Customer]]:
        version = self.versions.issue(CUSTOMERS)
        try:
            data = await self.api.list_customers()
            customers = [Customer.from_api(c) for c in data or []]
        except BillingError as e:
            logger.warning("Could not load customers: %s", e)
            return Result.failure(e)
        except (TypeError, AttributeError) as e:
            logger.warning("Malformed customer list: %s", e)
            return Result.failure(NetworkError(f"Malformed customer list: {e}"))

        if not self.versions.is_current(CUSTOMERS, version):
            return Result.discarded(customers)

        self.customers = customers
        return Result.success(customers)

    async def save(self, fields: dict) -> Result[Customer]:
        try:
            customer = Customer.from_api(await self.api.create_customer(fields) or {})
        except BillingError as e:
            logger.warning("Could not create customer %s: %s", fields.get("name"), e)
            return Result.failure(e)

        logger.info("Created customer %s", customer.name)
        await self.load()
        return Result.success(customer)
