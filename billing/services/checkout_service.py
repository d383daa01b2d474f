# services/checkout_service.py

import logging
import uuid
from typing import Callable

from billing.models.order import InvoiceRef, Order, OrderDraft
from billing.services.api_client import ApiClient, BillingError
from billing.services.order_service import OrderService

logger = logging.getLogger(__name__)

InvoiceHandler = Callable[[InvoiceRef], object]


class SubmissionError(BillingError):
    """The order was not created; the draft is left exactly as it was."""


class SubmissionInProgress(SubmissionError):
    def __init__(self):
        super().__init__("An order submission is already in flight")


class CheckoutService:
    def __init__(self, api: ApiClient, order_service: OrderService):
        self.api = api
        self.orders = order_service
        self.invoice_handlers: list[InvoiceHandler] = []
        self.last_invoice: InvoiceRef | None = None
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def on_invoice(self, handler: InvoiceHandler) -> None:
        self.invoice_handlers.append(handler)

    async def submit(self, draft: OrderDraft) -> Order:
        # Only one submission at a time; a double click must not create two orders.
        if self._in_flight:
            raise SubmissionInProgress()

        payload = draft.to_payload()
        # New key per attempt so the service can deduplicate a replayed request
        idempotency_key = str(uuid.uuid4())

        self._in_flight = True
        try:
            data = await self.api.create_order(payload, idempotency_key=idempotency_key)
            order = Order.from_api(data or {})
        except BillingError as e:
            logger.error("Order submission failed: %s", e)
            raise SubmissionError(f"Order was not created: {e}") from e
        except (TypeError, ValueError, AttributeError) as e:
            logger.error("Order submission returned an unusable body: %s", e)
            raise SubmissionError(f"Order was not created: {e}") from e
        finally:
            self._in_flight = False

        logger.info(
            "Order %s created for %r: %d lines, total %.2f",
            order.invoice_number or order.id,
            payload["customer_name"],
            len(payload["items"]),
            order.total,
        )

        draft.reset()

        refreshed = await self.orders.refresh()
        if refreshed.error is not None:
            logger.warning("Order %s saved but the order list did not refresh", order.id)

        invoice = InvoiceRef(order_id=order.id, url=self.orders.invoice_url(order.id))
        self.last_invoice = invoice
        for handler in self.invoice_handlers:
            handler(invoice)

        return order
