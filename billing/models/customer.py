# models/customer.py
from dataclasses import dataclass

from billing.models.product import str_id
# Customer model as returned by the billing service.
@dataclass
class Customer:
    id: str | None
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Customer":
        return cls(
            id=str_id(data.get("id")),
            name=data.get("name", ""),
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            address=data.get("address") or "",
        )
