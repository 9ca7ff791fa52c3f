from __future__ import annotations

from decimal import Decimal

import click
from flask.cli import with_appcontext

from product_catalog.catalog import get_catalog
from product_catalog.extensions import db
from product_catalog.models import Product
from product_catalog.services.product_store import ProductStore

DEMO_PRODUCTS = [
    ("MacBook Pro", "High-performance laptop for professionals", "1999.99", "Electronics", 50, True),
    ("iPhone 14", "Latest smartphone with advanced features", "999.99", "Electronics", 100, True),
    ("iPad Pro", "Powerful tablet for creative work", "799.99", "Electronics", 75, True),
    ("AirPods Pro", "Wireless noise-cancelling earbuds", "249.99", "Audio", 25, True),
    ("Bluetooth Speaker", "Portable wireless speaker", "89.99", "Audio", 0, False),
]


def demo_products() -> list[Product]:
    return [
        Product(
            name=name,
            description=description,
            price=Decimal(price),
            category=category,
            stock_quantity=stock_quantity,
            available=available,
        )
        for name, description, price, category, stock_quantity, available in DEMO_PRODUCTS
    ]


def seed_demo_products(store: ProductStore) -> list[Product]:
    return store.save_all(demo_products())


@click.command("init-db")
@click.option("--drop", is_flag=True, help="Drop the products table before creating it.")
@click.option("--seed", is_flag=True, help="Load the demo products after creating the schema.")
@with_appcontext
def init_db_command(drop: bool, seed: bool) -> None:
    """Create the product schema, optionally loading demo data."""
    if drop:
        db.session.remove()
        db.drop_all()
    db.create_all()
    click.echo("Initialized the product schema.")

    if seed:
        saved = seed_demo_products(get_catalog().store)
        click.echo(f"Seeded {len(saved)} demo products.")
