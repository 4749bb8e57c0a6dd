# storefront/services/ledger.py
import logging
import time

from ..errors import AlreadyCancelledError, ConflictError, NotFoundError, StorageCorruptError, ValidationError
from ..model.order import Order, OrderStatus, utcnow_iso
from ..storage import ORDERS

log = logging.getLogger(__name__)


def next_order_id(existing_ids=()) -> str:
    # millisecond timestamp, bumped past any id already taken
    oid = int(time.time() * 1000)
    while str(oid) in existing_ids:
        oid += 1
    return str(oid)


def _decode(raw: dict) -> Order:
    try:
        return Order.from_dict(raw)
    except (ValueError, TypeError) as e:
        raise StorageCorruptError("Failed to parse orders") from e


def _matches(raw: dict, order_id: str, owner_email=None) -> bool:
    if str(raw.get("id")) != order_id:
        return False
    return owner_email is None or raw.get("email") == owner_email


class OrderLedger:
    """Owns the orders collection. Orders are appended and status-transitioned, never removed."""

    def __init__(self, store):
        self.store = store

    def _load_or_empty(self):
        try:
            return self.store.load(ORDERS)
        except StorageCorruptError as e:
            log.warning("orders collection unreadable (%s), starting from empty", e)
            return []

    def create_order(self, email, items=None, total=None, product_name=None) -> Order:
        if not email:
            raise ValidationError("Email is required")

        orders = self._load_or_empty()
        order = Order(
            id=next_order_id({str(o.get("id")) for o in orders if isinstance(o, dict)}),
            email=email,
            total=total,
            product_name=product_name,
            items=list(items or []),
            created_at=utcnow_iso(),
            status=OrderStatus.ACTIVE,
        )
        orders.append(order.as_dict())
        self.store.save(ORDERS, orders)
        log.info("order %s recorded for %s", order.id, email)
        return order

    def _records(self):
        orders = self.store.load(ORDERS)
        if not all(isinstance(o, dict) for o in orders):
            raise StorageCorruptError("Failed to parse orders")
        return orders

    def find_order(self, order_id, owner_email=None) -> Order:
        order_id = str(order_id)
        for raw in self._records():
            if _matches(raw, order_id, owner_email):
                return _decode(raw)
        raise NotFoundError("Order not found")

    def list_by_owner(self, email):
        orders = [o for o in self._records() if o.get("email") == email]
        return [_decode(o) for o in reversed(orders)]

    def list_all(self):
        return [_decode(o) for o in reversed(self._records())]

    def set_status(self, order_id, new_status, owner_email=None) -> Order:
        try:
            new_status = OrderStatus.parse(new_status)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        order_id = str(order_id)
        orders = self._records()
        raw = next((o for o in orders if _matches(o, order_id, owner_email)), None)
        if raw is None:
            raise NotFoundError("Order not found")

        current = _decode(raw).status
        if current is OrderStatus.CANCELLED:
            if new_status is OrderStatus.CANCELLED:
                raise AlreadyCancelledError()
            raise ConflictError("Cancelled orders cannot be reactivated")

        # mutate in place so unknown keys on the record survive the rewrite
        raw["status"] = new_status.value
        self.store.save(ORDERS, orders)
        return Order.from_dict(raw)
