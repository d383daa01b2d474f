"""
Composition root and command-line entry point for the bag shop billing client.

BillingApp wires settings, logging, local storage, the HTTP client and the
services together, the same way for the CLI below and for any other front end.
The CLI keeps I/O out of the services: it parses arguments, calls BillingApp
and prints plain text.
"""

import argparse
import asyncio
import sys
import webbrowser

import httpx

from billing.data.repository import DataRepository
from billing.models.order import Order, OrderDraft
from billing.models.session import Session
from billing.services.api_client import ApiClient, AuthenticationError, BillingError
from billing.services.catalog_service import CatalogService
from billing.services.checkout_service import CheckoutService, SubmissionError
from billing.services.customer_service import CustomerService
from billing.services.order_service import OrderService
from billing.services.pricing_service import format_money
from billing.services.report_service import ReportService
from billing.services.session_service import SessionStore
from billing.utils.config import Settings
from billing.utils.logger import setup_logger
from billing.utils.results import RequestVersions, Result

LOGIN_FAILED = "Invalid credentials"


class BillingApp:
    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        # core services / data
        self.settings = settings or Settings.from_env()
        self.logger = setup_logger(self.settings.log_dir)
        self.repo = DataRepository(self.settings.storage_dir)
        self.versions = RequestVersions()

        self.session = SessionStore(self.repo, self.versions)
        self.api = ApiClient(
            self.settings.base_url,
            credential_provider=lambda: self.session.credential,
            timeout=self.settings.timeout,
            transport=transport,
        )
        self.session.bind(self.api)

        self.catalog = CatalogService(self.api, self.versions)
        self.customers = CustomerService(self.api, self.versions)
        self.order_service = OrderService(self.api, self.versions)
        self.reports = ReportService(self.api, self.versions)
        self.checkout = CheckoutService(self.api, self.order_service)

        # One draft order in memory
        self.draft = OrderDraft()

    async def start(self) -> Session:
        session = self.session.rehydrate()
        await self.seed_admin()
        if session.is_authenticated:
            self.session.schedule_profile()
        return session

    async def close(self) -> None:
        task = self.session.profile_task
        if task is not None and not task.done():
            await task
        await self.api.aclose()

    async def seed_admin(self) -> Result:
        # Demo convenience only; the service may not expose it at all.
        try:
            await self.api.seed_admin()
        except BillingError as e:
            self.logger.debug("Admin seed skipped: %s", e)
            return Result.failure(e)
        return Result.success()

    async def login(self, email: str, password: str) -> Result[Session]:
        # Login boundary: every failure turns into the same generic message.
        try:
            session = await self.session.login(email, password)
        except AuthenticationError as e:
            return Result.failure(e)
        except BillingError:
            return Result.failure(AuthenticationError(LOGIN_FAILED))
        return Result.success(session)

    def logout(self) -> None:
        self.session.logout()
        self.draft.reset()

    async def load_order_screen(self) -> tuple[Result, Result]:
        # catalog and recent orders are independent, fetch them together
        return await asyncio.gather(self.catalog.load(), self.order_service.refresh())

    async def place_order(self) -> Order:
        return await self.checkout.submit(self.draft)


def _print_order(order: Order) -> None:
    label = order.invoice_number or order.id
    print(f"{label}  items: {len(order.items)}  total: {format_money(order.total)}")


async def _run(args: argparse.Namespace) -> int:
    app = BillingApp()
    try:
        session = await app.start()

        if args.command == "login":
            result = await app.login(args.email, args.password)
            if not result.ok:
                print(LOGIN_FAILED)
                return 1
            await app.session.profile_task
            profile = app.session.current_session().profile
            print(f"Signed in as {profile.email if profile else args.email}")
            return 0

        if args.command == "logout":
            app.logout()
            print("Signed out")
            return 0

        if not session.is_authenticated:
            print("Not signed in. Run 'login' first.")
            return 1

        if args.command == "whoami":
            await app.session.profile_task
            profile = app.session.current_session().profile
            print(profile.email if profile else "(profile unavailable)")

        elif args.command == "dashboard":
            summary = (await app.reports.refresh()).unwrap()
            print(f"Bags: {summary.bags}  Customers: {summary.customers}  "
                  f"Orders: {summary.orders}  Revenue: {format_money(summary.revenue)}")
            for order in summary.recent_orders:
                _print_order(order)
            for bag in summary.low_stock:
                print(f"Low stock: {bag.name} ({bag.stock} left)")

        elif args.command == "bags":
            for bag in (await app.catalog.load(args.query)).unwrap():
                print(f"{bag.id}  {bag.sku}  {bag.name}  {format_money(bag.sale_price)}  stock {bag.stock}")

        elif args.command == "customers":
            for c in (await app.customers.load()).unwrap():
                print(f"{c.name}  {c.email}  {c.phone}")

        elif args.command == "orders":
            orders = (await app.order_service.refresh()).unwrap()
            for order in orders:
                _print_order(order)
            stats = app.reports.sales_summary(orders)
            print(f"Revenue: {format_money(stats['revenue'])}")

        elif args.command == "order":
            catalog, _ = await app.load_order_screen()
            catalog.unwrap()
            for bag_id in args.item:
                product = app.catalog.get(bag_id)
                if product is None:
                    print(f"Unknown bag: {bag_id}")
                    return 1
                app.draft.cart.add_product(product)
            app.draft.customer_name = args.customer
            app.draft.discount = args.discount
            app.draft.tax_rate = args.tax_rate
            if args.open_invoice:
                app.checkout.on_invoice(lambda ref: webbrowser.open_new_tab(ref.url))

            totals = app.draft.totals
            print(f"Subtotal {format_money(totals.subtotal)}  Tax {format_money(totals.tax)}  "
                  f"Total {format_money(totals.total)}")
            try:
                order = await app.place_order()
            except SubmissionError as e:
                print(str(e))
                return 1
            _print_order(order)
            print(f"Invoice: {app.checkout.last_invoice.url}")
        return 0
    except BillingError as e:
        app.logger.error("%s failed: %s", args.command, e)
        print(str(e))
        return 1
    finally:
        await app.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bagshop-billing", description="Bag shop billing client")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="sign in and remember the session")
    login.add_argument("email")
    login.add_argument("password")

    sub.add_parser("logout", help="forget the stored session")
    sub.add_parser("whoami", help="show the signed-in operator")
    sub.add_parser("dashboard", help="summary cards, recent orders, low stock")

    bags = sub.add_parser("bags", help="list the catalog")
    bags.add_argument("-q", "--query", default="")

    sub.add_parser("customers", help="list customers")
    sub.add_parser("orders", help="list recent orders")

    order = sub.add_parser("order", help="compose and submit an order")
    order.add_argument("--customer", default="")
    order.add_argument("--item", action="append", required=True, help="bag id, repeat to add more")
    order.add_argument("--discount", type=float, default=0.0)
    order.add_argument("--tax-rate", type=float, default=0.0)
    order.add_argument("--open-invoice", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
