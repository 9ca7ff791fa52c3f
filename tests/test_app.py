from __future__ import annotations

from product_catalog.catalog import ProductCatalog, build_catalog, get_catalog
from product_catalog.cli import init_db_command
from product_catalog.extensions import db
from product_catalog.services.product_queries import ProductQueries
from product_catalog.services.product_store import ProductStore


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_app_exposes_catalog_handle(app):
    catalog = get_catalog()

    assert isinstance(catalog, ProductCatalog)
    assert isinstance(catalog.store, ProductStore)
    assert isinstance(catalog.queries, ProductQueries)
    assert catalog.queries.store is catalog.store


def test_build_catalog_binds_queries_to_store(app):
    catalog = build_catalog(db.session)

    assert catalog.store.session is db.session
    assert catalog.queries.session is db.session
    assert catalog.store.count() == 0


def test_init_db_command_seeds_demo_products(app):
    runner = app.test_cli_runner()

    result = runner.invoke(init_db_command, ["--seed"])

    assert result.exit_code == 0
    assert "Seeded 5 demo products." in result.output
    assert get_catalog().store.count() == 5
    assert len(get_catalog().queries.find_by_category("Electronics")) == 3


def test_init_db_command_drop_resets_schema(app):
    runner = app.test_cli_runner()
    runner.invoke(init_db_command, ["--seed"])

    result = runner.invoke(init_db_command, ["--drop"])

    assert result.exit_code == 0
    assert "Initialized the product schema." in result.output
    assert get_catalog().store.count() == 0
