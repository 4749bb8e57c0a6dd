# ------ storefront/model/__init__.py ------

from .order import Order, OrderItem, OrderStatus

__all__ = [
    "Order",
    "OrderItem",
    "OrderStatus",
]
