# storefront/cli.py
import click
import pandas as pd
from flask import current_app
from flask.cli import with_appcontext

from .extensions import get_services
from .services.catalog import default_categories
from .storage import CATEGORIES, PRODUCTS

# spreadsheet column -> product key
PRODUCT_COLUMNS = {
    "Name": "name",
    "Price": "price",
    "Image": "img",
    "Category": "category",
}


@click.command("seed-categories")
@click.option("--force", is_flag=True, help="Overwrite an existing categories file.")
@with_appcontext
def seed_categories(force):
    store = get_services().store
    if store.exists(CATEGORIES) and not force:
        click.echo("Categories already exist, use --force to overwrite"); return
    store.save(CATEGORIES, default_categories())
    click.echo(f"Seeded {len(default_categories())} categories into {store.path(CATEGORIES)}")


@click.command("export-products")
@click.argument("output", type=click.Path(dir_okay=False))
@with_appcontext
def export_products(output):
    products = get_services().store.load(PRODUCTS, strict=True)

    product_data = [
        {column: p.get(key) for column, key in PRODUCT_COLUMNS.items()}
        for p in products
    ]
    df = pd.DataFrame(product_data, columns=list(PRODUCT_COLUMNS))
    df.to_excel(output, index=False)

    click.echo(f"{len(df)} products have been exported to Excel at {output}")


@click.command("import-products")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--replace", is_flag=True, help="Replace the catalog instead of appending to it.")
@with_appcontext
def import_products(source, replace):
    df = pd.read_excel(source)
    # Clean column names (remove extra spaces)
    df.columns = df.columns.str.strip()
    current_app.logger.info("Importing products, columns: %s", list(df.columns))

    store = get_services().store
    products = [] if replace else store.load(PRODUCTS, strict=False)

    imported = skipped = 0
    for _, row in df.iterrows():
        product = {}
        for column, key in PRODUCT_COLUMNS.items():
            if column in df.columns and not pd.isna(row[column]):
                value = row[column]
                product[key] = value.item() if hasattr(value, "item") else value
        if not product.get("name") or not product.get("price"):
            skipped += 1
            continue
        products.append(product)
        imported += 1

    store.save(PRODUCTS, products)
    click.echo(f"{imported} products imported from {source} ({skipped} skipped)")


def register_cli(app):
    app.cli.add_command(seed_categories)
    app.cli.add_command(export_products)
    app.cli.add_command(import_products)
