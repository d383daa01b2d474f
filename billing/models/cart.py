# models/cart.py
from dataclasses import dataclass
from typing import Any, Sequence

from billing.models.product import Product
from billing.services.pricing_service import as_number
# Cart model holding the line items of the order being composed.

EDITABLE_FIELDS = ("product_id", "quantity", "unit_price")


@dataclass
class CartLine:
    product_id: Any
    quantity: Any = 1
    unit_price: Any = 0.0

    def to_api(self) -> dict:
        return {
            "bag_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
        }


class Cart:
    def __init__(self):
        self.lines: list[CartLine] = []

    def __len__(self) -> int:
        return len(self.lines)

    def find(self, product_id) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def add_product(self, product: Product) -> CartLine:
        # Same product again bumps the quantity; the price stays as first added.
        line = self.find(product.id)
        if line is not None:
            qty = line.quantity
            if isinstance(qty, bool) or not isinstance(qty, (int, float)):
                # an edited line may hold raw input; read it the way pricing does
                qty = as_number(qty)
            line.quantity = qty + 1
            return line
        line = CartLine(product.id, 1, product.sale_price)
        self.lines.append(line)
        return line

    def set_line_field(self, index: int, field: str, value) -> None:
        # No validation: whatever the operator typed goes straight to pricing.
        if field not in EDITABLE_FIELDS:
            raise KeyError(f"Not an editable cart field: {field}")
        setattr(self.lines[self._check_index(index)], field, value)

    def append_blank_line(self, catalog: Sequence[Product] = ()) -> CartLine:
        if catalog:
            first = catalog[0]
            line = CartLine(first.id, 1, first.sale_price or 0)
        else:
            line = CartLine(None, 1, 0)
        self.lines.append(line)
        return line

    def remove_line(self, index: int) -> CartLine:
        return self.lines.pop(self._check_index(index))

    def _check_index(self, index: int) -> int:
        # positions count from the top only
        if index < 0 or index >= len(self.lines):
            raise IndexError(f"No cart line at position {index}")
        return index

    def reset(self) -> None:
        self.lines.clear()

    def to_api(self) -> list[dict]:
        return [line.to_api() for line in self.lines]
