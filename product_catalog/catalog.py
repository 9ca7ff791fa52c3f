from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from sqlalchemy.orm import Session

from product_catalog.services.product_queries import ProductQueries
from product_catalog.services.product_store import ProductStore

EXTENSION_KEY = "product_catalog"


@dataclass(frozen=True)
class ProductCatalog:
    store: ProductStore
    queries: ProductQueries


def build_catalog(session: Session) -> ProductCatalog:
    store = ProductStore(session)
    return ProductCatalog(store=store, queries=ProductQueries(store))


def get_catalog() -> ProductCatalog:
    return current_app.extensions[EXTENSION_KEY]
