# storefront/services/order_service.py
import logging
from dataclasses import dataclass

from ..errors import NotificationError, StorageReadError, StorageWriteError, ValidationError
from ..model.order import Order, OrderStatus, utcnow_iso
from .ledger import next_order_id

log = logging.getLogger(__name__)


@dataclass
class CancelResult:
    order: Order
    notified: bool


class OrderLifecycle:
    """Purchase and cancellation workflows: persist first, then notify.

    A notification failure never rolls back what was persisted. Purchase reports it
    to the caller; cancellations only log it.
    """

    def __init__(self, ledger, notifier):
        self.ledger = ledger
        self.notifier = notifier

    def purchase(self, email, product_name=None, cart=None, price_formatted=None) -> Order:
        if not email:
            raise ValidationError("Email is required")

        # recording the order must not decide the response
        order = None
        try:
            order = self.ledger.create_order(email, cart or [], price_formatted, product_name)
        except (StorageReadError, StorageWriteError) as e:
            log.error("failed to record order for %s: %s", email, e.message)
        if order is None:
            order = Order(
                id=next_order_id(),
                email=email,
                total=price_formatted,
                product_name=product_name,
                items=list(cart or []),
                created_at=utcnow_iso(),
            )

        # NotificationError propagates; the order stays recorded
        self.notifier.send_purchase_confirmation(email, order)
        log.info("purchase confirmation for order %s sent to %s", order.id, email)
        return order

    def _cancel(self, order_id, owner_email=None) -> CancelResult:
        by_admin = owner_email is None
        order = self.ledger.set_status(order_id, OrderStatus.CANCELLED, owner_email=owner_email)
        log.info("order %s cancelled (%s)", order.id, "admin" if by_admin else "owner")

        try:
            self.notifier.send_cancellation(order.email, order.id, order.total, by_admin=by_admin)
        except NotificationError as e:
            log.error("cancellation email for order %s failed: %s", order.id, e.message)
            return CancelResult(order, notified=False)
        return CancelResult(order, notified=True)

    def cancel(self, order_id, email) -> CancelResult:
        if not order_id or not email:
            raise ValidationError("Missing orderId or email")
        return self._cancel(str(order_id), owner_email=email)

    def admin_cancel(self, order_id) -> CancelResult:
        if not order_id:
            raise ValidationError("Missing orderId")
        return self._cancel(str(order_id))

    def list_for_owner(self, email):
        if not email:
            raise ValidationError("Email parameter required")
        return self.ledger.list_by_owner(email)

    def list_all(self):
        return self.ledger.list_all()
