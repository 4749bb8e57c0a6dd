import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default=False):
    v = os.environ.get(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


class Config:
    JSON_SORT_KEYS = False
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    PORT = int(os.environ.get("PORT", 4000))

    # None -> resolved against app.instance_path in init_app
    DATA_DIR = os.environ.get("STOREFRONT_DATA_DIR")
    IMAGES_DIR = os.environ.get("STOREFRONT_IMAGES_DIR")

    SHOP_NAME = os.environ.get("SHOP_NAME", "Yerevan Shop")

    # Gmail relay, OAuth2 refresh-token credentials
    MAIL_USER = os.environ.get("EMAIL", "")
    MAIL_SENDER_NAME = os.environ.get("MAIL_SENDER_NAME") or SHOP_NAME
    GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET", "")
    GOOGLE_REFRESH_TOKEN = os.environ.get("GOOGLE_REFRESH_TOKEN", "")
    MAIL_SMTP_HOST = os.environ.get("MAIL_SMTP_HOST", "smtp.gmail.com")
    MAIL_SMTP_PORT = int(os.environ.get("MAIL_SMTP_PORT", 465))
    MAIL_TOKEN_URI = os.environ.get("MAIL_TOKEN_URI", "https://oauth2.googleapis.com/token")
    MAIL_VERIFY_ON_STARTUP = _env_bool("MAIL_VERIFY_ON_STARTUP", True)

    @staticmethod
    def init_app(app):
        if not app.config.get("DATA_DIR"):
            app.config["DATA_DIR"] = app.instance_path
        os.makedirs(app.config["DATA_DIR"], exist_ok=True)
        if not app.config.get("IMAGES_DIR"):
            app.config["IMAGES_DIR"] = os.path.join(app.config["DATA_DIR"], "images")
        os.makedirs(app.config["IMAGES_DIR"], exist_ok=True)
        app.json.sort_keys = app.config["JSON_SORT_KEYS"]
