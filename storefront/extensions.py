# --- storefront/extensions.py ---
from dataclasses import dataclass

from flask import current_app
from flask_cors import CORS

from .services.ledger import OrderLedger
from .services.mailer import Mailer, MailSettings
from .services.notifications import Notifier
from .services.order_service import OrderLifecycle
from .storage import JsonStore

cors = CORS()


@dataclass
class Services:
    store: JsonStore
    mailer: Mailer
    notifier: Notifier
    ledger: OrderLedger
    orders: OrderLifecycle


def init_services(app, mail_transport=None) -> Services:
    store = JsonStore(app.config["DATA_DIR"])
    mailer = Mailer(MailSettings.from_config(app.config), transport=mail_transport)
    notifier = Notifier(mailer, shop_name=app.config["SHOP_NAME"])
    ledger = OrderLedger(store)
    services = Services(
        store=store,
        mailer=mailer,
        notifier=notifier,
        ledger=ledger,
        orders=OrderLifecycle(ledger, notifier),
    )
    app.extensions["storefront"] = services
    return services


def get_services() -> Services:
    return current_app.extensions["storefront"]
