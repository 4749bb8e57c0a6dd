# --- product/routes.py ---
from flask import current_app, request

from ..errors import StorageCorruptError, StorageReadError, StorageWriteError, ValidationError
from ..extensions import get_services
from ..services.catalog import parse_index, remove_file, save_image
from ..storage import PRODUCTS
from ..utils.api import err, json_body, ok
from . import bp


# ---------- helpers ----------
def _payload():
    if request.form or request.files:
        return request.form.to_dict()
    return json_body()


def _load_products():
    """Strict read used by every route except create; failures become 500s with the route's wording."""
    try:
        return get_services().store.load(PRODUCTS, strict=True), None
    except StorageCorruptError:
        current_app.logger.error("Error parsing products JSON")
        return None, err("Failed to parse products", 500)
    except StorageReadError:
        current_app.logger.error("Error reading products file")
        return None, err("Failed to read products", 500)


def _save_products(products, failure_message):
    try:
        get_services().store.save(PRODUCTS, products)
    except StorageWriteError:
        current_app.logger.error("Error writing products file")
        return err(failure_message, 500)
    return None


# ---------- routes ----------
@bp.get("/products")
def list_products():
    products, error = _load_products()
    if error is not None:
        return error
    return products


@bp.post("/products")
def create_product():
    new_product = _payload()
    cfg = current_app.config

    public_url, abs_path = save_image(request.files.get("image"), cfg["IMAGES_DIR"])
    if public_url:
        new_product["img"] = public_url

    current_app.logger.info("Adding new product: %s", new_product.get("name"))

    if not new_product.get("name") or not new_product.get("price") or not new_product.get("img"):
        remove_file(abs_path)
        raise ValidationError("Name, price, and image are required")

    store = get_services().store
    try:
        products = store.load(PRODUCTS, strict=True)
    except StorageCorruptError:
        current_app.logger.warning("Error parsing products file, initializing empty array")
        products = []
    except StorageReadError:
        current_app.logger.error("Error reading products file")
        return err("Failed to read products", 500)

    products.append(new_product)
    error = _save_products(products, "Failed to save product")
    if error is not None:
        return error
    return ok("Product added successfully", {"product": new_product})


@bp.delete("/products/bulk")
def bulk_delete_products():
    indices = json_body().get("indices")
    if not isinstance(indices, list):
        raise ValidationError("Indices array required")

    products, error = _load_products()
    if error is not None:
        return error

    doomed = set(i for i in indices if isinstance(i, int) and not isinstance(i, bool))
    products = [p for i, p in enumerate(products) if i not in doomed]

    error = _save_products(products, "Failed to delete products")
    if error is not None:
        return error
    return ok("Products deleted successfully")


@bp.delete("/products/<index>")
def delete_product(index):
    products, error = _load_products()
    if error is not None:
        return error

    index = parse_index(index, len(products))
    deleted = [products.pop(index)]

    error = _save_products(products, "Failed to delete product")
    if error is not None:
        return error
    return ok("Product deleted", {"product": deleted})


@bp.put("/products/<index>")
def update_product(index):
    data = _payload()
    cfg = current_app.config

    products, error = _load_products()
    if error is not None:
        return error

    index = parse_index(index, len(products), "Invalid index")
    product = products[index]

    for key in ("name", "price", "category"):
        if data.get(key):
            product[key] = data[key]

    public_url, _ = save_image(request.files.get("image"), cfg["IMAGES_DIR"])
    if public_url:
        product["img"] = public_url
    elif data.get("img"):
        product["img"] = data["img"]

    error = _save_products(products, "Failed to update product")
    if error is not None:
        return error
    return ok("Product updated", {"product": product})
