# models/order.py
from dataclasses import dataclass, field
from typing import Any

from billing.models.cart import Cart
from billing.services.pricing_service import Totals, as_number, compute_totals, to_money
# Order models: the draft being composed and the order the service confirmed.

PAYMENT_METHOD = "cash"


@dataclass
class OrderDraft:
    customer_name: str = ""
    cart: Cart = field(default_factory=Cart)
    discount: Any = 0.0
    tax_rate: Any = 0.0

    @property
    def lines(self):
        return self.cart.lines

    @property
    def totals(self) -> Totals:
        # derived on every read so it can never go stale
        return compute_totals(self.cart.lines, self.discount, self.tax_rate)

    def to_payload(self) -> dict:
        items = []
        for line in self.cart.to_api():
            line["unit_price"] = to_money(line["unit_price"])
            items.append(line)
        return {
            "customer_name": self.customer_name,
            "items": items,
            "discount": to_money(self.discount),
            "tax_rate": as_number(self.tax_rate),
            "payment_method": PAYMENT_METHOD,
        }

    def reset(self) -> None:
        self.cart.reset()
        self.customer_name = ""
        self.discount = 0.0
        self.tax_rate = 0.0


@dataclass
class Order:
    id: str
    invoice_number: str = ""
    items: list[dict] = field(default_factory=list)
    total: float = 0.0
    customer_name: str = ""
    subtotal: float = 0.0
    tax: float = 0.0
    discount: float = 0.0
    tax_rate: float = 0.0
    payment_method: str = PAYMENT_METHOD
    created_at: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Order":
        if not data.get("id"):
            raise ValueError("Order payload has no id")
        return cls(
            id=str(data["id"]),
            invoice_number=data.get("invoice_number") or "",
            items=list(data.get("items") or []),
            total=float(data.get("total") or 0),
            customer_name=data.get("customer_name") or "",
            subtotal=float(data.get("subtotal") or 0),
            tax=float(data.get("tax") or 0),
            discount=float(data.get("discount") or 0),
            tax_rate=float(data.get("tax_rate") or 0),
            payment_method=data.get("payment_method") or PAYMENT_METHOD,
            created_at=data.get("created_at"),
        )


@dataclass(frozen=True)
class InvoiceRef:
    order_id: str
    url: str
