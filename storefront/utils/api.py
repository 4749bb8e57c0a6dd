# --- storefront/utils/api.py ---
from flask import jsonify, request


def api_ok(message, data=None):
    return {
        "success": True,
        "message": message,
        **(data or {}),
    }


def api_error(message, data=None):
    # "error" and "message" carry the same text; catalog clients read the first, order clients the second
    return {
        "success": False,
        "error": message,
        "message": message,
        **(data or {}),
    }


# unified response helpers
def ok(message: str, data=None, status_code=200):
    resp = jsonify(api_ok(message, data))
    resp.status_code = status_code
    return resp


def err(message: str, status_code=400, data=None):
    resp = jsonify(api_error(message, data))
    resp.status_code = status_code
    return resp


def json_body() -> dict:
    """The request's JSON object; arrays, scalars and malformed bodies read as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
