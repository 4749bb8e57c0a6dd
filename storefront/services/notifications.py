# storefront/services/notifications.py
from jinja2 import Environment, PackageLoader, select_autoescape

from ..model.order import Order
from ..utils.money import line_display_price

CURRENCY_SIGN = "֏"

_env = Environment(
    loader=PackageLoader("storefront", "templates"),
    autoescape=select_autoescape(["html"]),
)


def _render(name, **ctx):
    return _env.get_template(name).render(**ctx)


class Notifier:
    """Transactional emails for the order lifecycle.

    Every send goes through ``Mailer.send`` and raises ``NotificationError`` on
    failure; whether that is fatal is up to the caller.
    """

    def __init__(self, mailer, shop_name="Yerevan Shop"):
        self.mailer = mailer
        self.shop_name = shop_name

    def render_purchase_confirmation(self, order: Order):
        lines = [
            {
                "name": item.name,
                "quantity": item.quantity,
                "price": line_display_price(item.unit_price, item.quantity),
            }
            for item in order.line_items()
        ]
        ctx = dict(order=order, lines=lines, currency=CURRENCY_SIGN, shop_name=self.shop_name)
        subject = f"Purchase Confirmation - {self.shop_name}"
        text = _render("email/purchase_confirmation.txt", **ctx)
        html = _render("email/purchase_confirmation.html", **ctx)
        return subject, text, html

    def send_purchase_confirmation(self, to_email, order: Order):
        subject, text, html = self.render_purchase_confirmation(order)
        self.mailer.send(to_email, subject, text, html)

    def render_cancellation(self, order_id, total, by_admin=False):
        if by_admin:
            subject = f"Order Cancelled by Admin - #{order_id}"
        else:
            subject = f"Order Cancelled - #{order_id}"
        ctx = dict(order_id=order_id, total=total, by_admin=by_admin)
        text = _render("email/order_cancelled.txt", **ctx)
        html = _render("email/order_cancelled.html", **ctx)
        return subject, text, html

    def send_cancellation(self, to_email, order_id, total, by_admin=False):
        subject, text, html = self.render_cancellation(order_id, total, by_admin)
        self.mailer.send(to_email, subject, text, html)
