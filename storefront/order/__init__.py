from flask import Blueprint

bp = Blueprint("order", __name__)

from . import routes  # noqa: E402,F401
