# storefront/services/catalog.py
import os
import random
import time

from werkzeug.utils import secure_filename

from ..errors import ValidationError

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "svg"}

# served when categories.json has never been written
DEFAULT_CATEGORIES = [
    {"name": "Phones", "icon": "📱"},
    {"name": "Console", "icon": "🎮"},
    {"name": "Audio", "icon": "🎧"},
    {"name": "Laptops", "icon": "💻"},
    {"name": "Tablets", "icon": "📱"},
    {"name": "Beauty", "icon": "💄"},
]


def default_categories():
    return [dict(c) for c in DEFAULT_CATEGORIES]


def _allowed(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


def save_image(file_storage, images_dir):
    """Save an uploaded product image, return (public path, absolute path)."""
    if not file_storage or not file_storage.filename:
        return None, None
    if not _allowed(file_storage.filename):
        raise ValidationError("Unsupported file type")

    ext = os.path.splitext(secure_filename(file_storage.filename))[1].lower()
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    filename = f"product-{unique_suffix}{ext}"

    os.makedirs(images_dir, exist_ok=True)
    abs_path = os.path.join(images_dir, filename)
    file_storage.save(abs_path)
    return f"images/{filename}", abs_path


def remove_file(abs_path):
    if abs_path and os.path.exists(abs_path):
        os.unlink(abs_path)


def parse_index(value, size, message="Invalid product index"):
    """Position in a collection of ``size`` items; positions shift whenever earlier items are removed."""
    try:
        index = int(value)
    except (TypeError, ValueError):
        index = -1
    if index < 0 or index >= size:
        raise ValidationError(message)
    return index
