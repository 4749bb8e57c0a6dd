# storefront/order/routes.py
from flask import current_app, request

from ..errors import NotificationError
from ..extensions import get_services
from ..utils.api import err, json_body, ok
from . import bp


@bp.post("/purchase")
def purchase():
    data = json_body()
    email = data.get("email")
    cart = data.get("cart")
    if not isinstance(cart, list):
        cart = []
    current_app.logger.info("New purchase request from %s (%d cart items)", email, len(cart))

    try:
        get_services().orders.purchase(
            email,
            product_name=data.get("productName"),
            cart=cart,
            price_formatted=data.get("priceFormatted"),
        )
    except NotificationError as e:
        current_app.logger.error("Error sending email: %s", e.message)
        return err("Error sending purchase confirmation: " + e.message, 500)

    return ok("Confirmation sent to your email!")


@bp.get("/orders")
def list_orders():
    """
    Query params:
      - email=...  (required, exact match)
    Newest order first.
    """
    orders = get_services().orders.list_for_owner(request.args.get("email"))
    return [o.as_dict() for o in orders]


@bp.post("/cancel-order")
def cancel_order():
    data = json_body()
    result = get_services().orders.cancel(data.get("orderId"), data.get("email"))
    if result.notified:
        return ok("Order cancelled and email sent")
    return ok("Order cancelled (Email failed)")
