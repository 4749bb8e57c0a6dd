# storefront/admin/routes.py

from ..extensions import get_services
from ..utils.api import json_body, ok
from . import bp


@bp.get("/admin/orders")
def list_all_orders():
    return [o.as_dict() for o in get_services().orders.list_all()]


@bp.post("/admin/cancel-order")
def admin_cancel_order():
    data = json_body()
    result = get_services().orders.admin_cancel(data.get("orderId"))
    if result.notified:
        return ok("Order cancelled by Admin")
    return ok("Order cancelled (Email failed)")
