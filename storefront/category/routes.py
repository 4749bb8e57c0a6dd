# --- category/routes.py ---
from flask import current_app

from ..errors import ConflictError, NotFoundError, StorageCorruptError, StorageReadError, StorageWriteError, ValidationError
from ..extensions import get_services
from ..services.catalog import default_categories
from ..storage import CATEGORIES
from ..utils.api import err, json_body, ok
from . import bp


# ------------------------ helpers ------------------------
def _load_categories():
    try:
        return get_services().store.load(CATEGORIES, strict=True), None
    except StorageCorruptError:
        current_app.logger.error("Error parsing categories JSON")
        return None, err("Failed to parse categories", 500)
    except StorageReadError:
        current_app.logger.error("Error reading categories file")
        return None, err("Failed to read categories", 500)


def _save_categories(categories, failure_message):
    try:
        get_services().store.save(CATEGORIES, categories)
    except StorageWriteError:
        current_app.logger.error("Error writing categories file")
        return err(failure_message, 500)
    return None


# ------------------------ CATEGORY ROUTES ------------------------

@bp.get("/categories")
def list_categories():
    store = get_services().store
    try:
        return store.load(CATEGORIES, strict=True)
    except StorageCorruptError:
        current_app.logger.error("Error parsing categories JSON")
        return err("Failed to parse categories", 500)
    except StorageReadError:
        current_app.logger.warning("categories file unreadable, serving defaults")
        return default_categories()


@bp.post("/categories")
def create_category():
    new_category = json_body()
    current_app.logger.info("Adding new category: %s", new_category.get("name"))

    if not new_category.get("name") or not new_category.get("icon"):
        raise ValidationError("Name and icon are required")

    store = get_services().store
    try:
        categories = store.load(CATEGORIES)
    except StorageCorruptError:
        current_app.logger.warning("Error parsing categories file, initializing empty array")
        categories = []

    categories.append(new_category)
    error = _save_categories(categories, "Failed to save category")
    if error is not None:
        return error
    return ok("Category added successfully", {"category": new_category})


@bp.delete("/categories/bulk")
def bulk_delete_categories():
    names = json_body().get("names")
    if not isinstance(names, list):
        raise ValidationError("Names array required")

    categories, error = _load_categories()
    if error is not None:
        return error

    categories = [c for c in categories if c.get("name") not in names]

    error = _save_categories(categories, "Failed to delete categories")
    if error is not None:
        return error
    return ok("Categories deleted successfully")


@bp.delete("/categories/<name>")
def delete_category(name):
    categories, error = _load_categories()
    if error is not None:
        return error

    remaining = [c for c in categories if c.get("name") != name]
    if len(remaining) == len(categories):
        raise NotFoundError("Category not found")

    error = _save_categories(remaining, "Failed to delete category")
    if error is not None:
        return error
    return ok("Category deleted")


@bp.put("/categories/<name>")
def update_category(name):
    data = json_body()
    new_name = data.get("name")
    icon = data.get("icon")

    categories, error = _load_categories()
    if error is not None:
        return error

    c = next((c for c in categories if c.get("name") == name), None)
    if c is None:
        raise NotFoundError("Category not found")

    if new_name and new_name != name and any(o.get("name") == new_name for o in categories):
        raise ConflictError("Category name already exists")

    if new_name:
        c["name"] = new_name
    if icon:
        c["icon"] = icon

    error = _save_categories(categories, "Failed to update category")
    if error is not None:
        return error
    return ok("Category updated")
