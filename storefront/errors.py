# --- storefront/errors.py ---
from flask import current_app, jsonify

from .utils.api import api_error


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        if status_code is not None:
            self.status_code = status_code


class ValidationError(StorefrontError):
    status_code = 400


class NotFoundError(StorefrontError):
    status_code = 404


class ConflictError(StorefrontError):
    status_code = 400


class AlreadyCancelledError(ConflictError):
    def __init__(self, message="Order is already cancelled"):
        super().__init__(message)


class StorageReadError(StorefrontError):
    pass


class StorageCorruptError(StorageReadError):
    pass


class StorageWriteError(StorefrontError):
    pass


class NotificationError(StorefrontError):
    pass


def register_error_handlers(app):
    @app.errorhandler(StorefrontError)
    def _handle_storefront_error(e: StorefrontError):
        if e.status_code >= 500:
            current_app.logger.error("%s: %s", type(e).__name__, e.message)
        else:
            current_app.logger.warning("%s: %s", type(e).__name__, e.message)
        return jsonify(api_error(e.message)), e.status_code
