# models/product.py
from dataclasses import dataclass, asdict


def str_id(value):
    # services may send integer ids; the client compares them as strings
    return None if value is None else str(value)


# Product model representing a bag in the shop catalog.
@dataclass
class Product:
    id: str | None
    sku: str
    name: str
    sale_price: float
    stock: int = 0
    brand: str = ""
    category: str = ""
    cost_price: float = 0.0
    description: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Product":
        return cls(
            id=str_id(data.get("id")),
            sku=data.get("sku", ""),
            name=data.get("name", ""),
            sale_price=float(data.get("sale_price") or 0),
            stock=int(data.get("stock") or 0),
            brand=data.get("brand") or "",
            category=data.get("category") or "",
            cost_price=float(data.get("cost_price") or 0),
            description=data.get("description") or "",
        )

    def to_api(self) -> dict:
        # id is carried in the URL, never in the body
        data = asdict(self)
        del data["id"]
        return data
