from __future__ import annotations

from decimal import Decimal

import pytest

from product_catalog import create_app
from product_catalog.catalog import get_catalog
from product_catalog.extensions import db
from product_catalog.models import Product


class TestConfig:
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False
    LOG_LEVEL = "DEBUG"
    SQL_LOG_LEVEL = "WARNING"
    CORS_ORIGINS = "*"
    TOP_SELLING_MAX_PAGE_SIZE = 3


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def catalog(app):
    return get_catalog()


@pytest.fixture()
def store(catalog):
    return catalog.store


@pytest.fixture()
def queries(catalog):
    return catalog.queries


@pytest.fixture()
def products(store) -> dict[str, Product]:
    store.delete_all()
    saved = store.save_all(
        [
            make_product("MacBook Pro", "1999.99", "Electronics", 50, True, "High-performance laptop for professionals"),
            make_product("iPhone 14", "999.99", "Electronics", 100, True, "Latest smartphone with advanced features"),
            make_product("iPad Pro", "799.99", "Electronics", 75, True, "Powerful tablet for creative work"),
            make_product("AirPods Pro", "249.99", "Audio", 25, True, "Wireless noise-cancelling earbuds"),
            make_product("Bluetooth Speaker", "89.99", "Audio", 0, False, "Portable wireless speaker"),
        ]
    )
    return {product.name: product for product in saved}


def make_product(
    name: str,
    price: str,
    category: str,
    stock_quantity: int,
    available: bool,
    description: str | None = None,
) -> Product:
    return Product(
        name=name,
        description=description,
        price=Decimal(price),
        category=category,
        stock_quantity=stock_quantity,
        available=available,
    )


def names(products: list[Product]) -> list[str]:
    return [product.name for product in products]
