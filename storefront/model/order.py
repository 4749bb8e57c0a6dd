from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    ACTIVE = "Active"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        for s in cls:
            if s.value == value:
                return s
        raise ValueError(f"unknown order status: {value!r}")


@dataclass
class OrderItem:
    """Read view over one cart line as the client sent it.

    The storefront sends ``{name, qty, price}``; ``{name, quantity, unitPrice}`` is
    accepted as well.
    """
    name: str
    quantity: object
    unit_price: object

    @classmethod
    def from_dict(cls, d: dict) -> "OrderItem":
        qty = d.get("qty", d.get("quantity", 0))
        price = d.get("price", d.get("unitPrice", 0))
        return cls(name=d.get("name") or "", quantity=qty, unit_price=price)


@dataclass
class Order:
    id: str
    email: str
    total: Optional[str] = None
    product_name: Optional[str] = None
    items: list = field(default_factory=list)
    created_at: Optional[str] = None
    status: OrderStatus = OrderStatus.ACTIVE

    @property
    def is_cancelled(self) -> bool:
        return self.status is OrderStatus.CANCELLED

    def line_items(self):
        return [OrderItem.from_dict(i) for i in self.items if isinstance(i, dict)]

    @classmethod
    def from_dict(cls, d: dict) -> "Order":
        return cls(
            id=str(d.get("id") or ""),
            email=d.get("email") or "",
            total=d.get("total"),
            product_name=d.get("productName"),
            items=list(d.get("items") or []),
            created_at=d.get("date"),
            status=OrderStatus.parse(d.get("status") or OrderStatus.ACTIVE.value),
        )

    def as_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "productName": self.product_name,
            "items": self.items,
            "total": self.total,
            "date": self.created_at,
            "status": self.status.value,
        }


def utcnow_iso() -> str:
    # same shape as JavaScript's Date.toISOString(): millisecond precision, "Z" suffix
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
