import pytest

from storefront import create_app


class FakeTransport:
    """Stands in for the Gmail relay; records messages, or raises ``fail`` when set."""

    def __init__(self):
        self.sent = []
        self.verified = 0
        self.fail = None

    def verify(self):
        self.verified += 1
        if self.fail:
            raise self.fail

    def send(self, message):
        if self.fail:
            raise self.fail
        self.sent.append(message)


MAIL_CONFIG = {
    "MAIL_USER": "shop@example.com",
    "GOOGLE_CLIENT_ID": "client-id",
    "GOOGLE_CLIENT_SECRET": "client-secret",
    "GOOGLE_REFRESH_TOKEN": "refresh-token",
    "SHOP_NAME": "Yerevan Shop",
    "MAIL_SENDER_NAME": "Yerevan Shop",
}


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def app_config(tmp_path):
    return {
        "TESTING": True,
        "DATA_DIR": str(tmp_path / "data"),
        "IMAGES_DIR": str(tmp_path / "images"),
        "MAIL_VERIFY_ON_STARTUP": False,
        **MAIL_CONFIG,
    }


@pytest.fixture
def app(app_config, transport):
    return create_app(app_config, mail_transport=transport)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def services(app):
    return app.extensions["storefront"]


@pytest.fixture
def store(services):
    return services.store


def html_body(message):
    return message.get_body(("html",)).get_content()


def text_body(message):
    return message.get_body(("plain",)).get_content()
