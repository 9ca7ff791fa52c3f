from __future__ import annotations

import logging

from flask import Blueprint, current_app, request

from product_catalog.catalog import get_catalog
from product_catalog.errors import InvalidQueryError, ProductValidationError, StorageUnavailableError
from product_catalog.models import Product
from product_catalog.services.product_store import SQL_INTEGER_MAX

logger = logging.getLogger(__name__)

product_bp = Blueprint("products", __name__)

PRODUCT_FIELDS = ("name", "description", "price", "category", "stock_quantity", "available")


@product_bp.errorhandler(ProductValidationError)
def handle_validation_error(exc: ProductValidationError) -> tuple[dict[str, str], int]:
    return {"message": str(exc), "field": exc.field}, 400


@product_bp.errorhandler(InvalidQueryError)
def handle_invalid_query(exc: InvalidQueryError) -> tuple[dict[str, str], int]:
    return {"message": str(exc)}, 400


@product_bp.errorhandler(StorageUnavailableError)
def handle_storage_unavailable(exc: StorageUnavailableError) -> tuple[dict[str, str], int]:
    logger.warning("%s %s failed: %s", request.method, request.path, exc)
    return {"message": "storage unavailable"}, 503


@product_bp.get("")
def list_products() -> tuple[dict[str, object], int]:
    catalog = get_catalog()
    filters = [name for name in ("category", "available", "name") if request.args.get(name) is not None]
    if len(filters) > 1:
        return {"message": "use only one of category, available, name"}, 400

    if "category" in filters:
        products = catalog.queries.find_by_category(request.args["category"])
    elif "available" in filters:
        available = _bool_query_arg("available")
        if available is None:
            return {"message": "available must be true or false"}, 400
        products = catalog.queries.find_by_available(available)
    elif "name" in filters:
        products = catalog.queries.find_by_name_containing_ignore_case(request.args["name"])
    else:
        products = catalog.store.find_all()
    return _items(products), 200


@product_bp.post("")
def create_product() -> tuple[dict[str, object], int]:
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return {"message": "request body must be a JSON object"}, 400
    product = Product()
    _apply_payload(product, payload)
    saved = get_catalog().store.save(product)
    return saved.to_dict(), 201


@product_bp.delete("")
def delete_all_products() -> tuple[dict[str, str], int]:
    get_catalog().store.delete_all()
    return {"message": "deleted"}, 200


@product_bp.get("/count")
def count_products() -> tuple[dict[str, int], int]:
    return {"count": get_catalog().store.count()}, 200


@product_bp.get("/<int:product_id>")
def get_product(product_id: int) -> tuple[dict[str, object], int]:
    product = get_catalog().store.find_by_id(product_id)
    if product is None:
        return {"message": "product not found"}, 404
    return product.to_dict(), 200


@product_bp.put("/<int:product_id>")
def update_product(product_id: int) -> tuple[dict[str, object], int]:
    store = get_catalog().store
    product = store.find_by_id(product_id)
    if product is None:
        return {"message": "product not found"}, 404

    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return {"message": "request body must be a JSON object"}, 400
    _apply_payload(product, payload)
    saved = store.save(product)
    return saved.to_dict(), 200


@product_bp.delete("/<int:product_id>")
def delete_product(product_id: int) -> tuple[dict[str, str], int]:
    store = get_catalog().store
    if not store.exists_by_id(product_id):
        return {"message": "product not found"}, 404

    store.delete_by_id(product_id)
    return {"message": "deleted"}, 200


@product_bp.get("/search/price-range")
def search_by_price_range() -> tuple[dict[str, object], int]:
    products = get_catalog().queries.find_by_price_range_and_category(
        _required_query_arg("min_price"),
        _required_query_arg("max_price"),
        _required_query_arg("category"),
    )
    return _items(products), 200


@product_bp.get("/search/low-stock")
def search_low_stock() -> tuple[dict[str, object], int]:
    raw_threshold = _required_query_arg("threshold")
    try:
        threshold = int(raw_threshold)
    except ValueError:
        raise InvalidQueryError("threshold must be integer") from None

    products = get_catalog().queries.find_available_products_with_low_stock_by_category(
        threshold,
        _required_query_arg("category"),
    )
    return _items(products), 200


@product_bp.get("/search/top-selling")
def search_top_selling() -> tuple[dict[str, object], int]:
    category = _required_query_arg("category")
    size = _int_query_arg("size", 10, minimum=1, maximum=current_app.config["TOP_SELLING_MAX_PAGE_SIZE"])
    page = _int_query_arg("page", 0, minimum=0, maximum=SQL_INTEGER_MAX // size - 1)

    products = get_catalog().queries.find_top_selling_products_by_category(category, page, size)
    return {**_items(products), "page": page, "size": size}, 200


@product_bp.get("/search/name-pattern")
def search_name_pattern() -> tuple[dict[str, object], int]:
    products = get_catalog().queries.find_by_name_pattern_native(_required_query_arg("pattern"))
    return _items(products), 200


@product_bp.get("/categories/<category>/most-expensive")
def most_expensive_in_category(category: str) -> tuple[dict[str, object], int]:
    product = get_catalog().queries.find_first_by_category_order_by_price_desc(category)
    if product is None:
        return {"message": "no products in category"}, 404
    return product.to_dict(), 200


@product_bp.get("/categories/<category>/average-price")
def average_price_in_category(category: str) -> tuple[dict[str, object], int]:
    average = get_catalog().queries.calculate_average_price_by_category(category)
    return {
        "category": category,
        "average_price": str(average) if average is not None else None,
    }, 200


@product_bp.get("/categories/<category>/count")
def count_in_category(category: str) -> tuple[dict[str, object], int]:
    count = get_catalog().queries.count_by_category_and_price_range(
        category,
        _required_query_arg("min_price"),
        _required_query_arg("max_price"),
    )
    return {"category": category, "count": count}, 200


def _items(products: list[Product]) -> dict[str, list[dict[str, object]]]:
    return {"items": [product.to_dict() for product in products]}


def _apply_payload(product: Product, payload: dict[str, object]) -> None:
    for field in PRODUCT_FIELDS:
        if field in payload:
            setattr(product, field, payload[field])


def _required_query_arg(name: str) -> str:
    raw = request.args.get(name)
    if raw is None or raw == "":
        raise InvalidQueryError(f"{name} is required")
    return raw


def _bool_query_arg(name: str) -> bool | None:
    raw = (request.args.get(name) or "").strip().lower()
    if raw in {"true", "1", "yes"}:
        return True
    if raw in {"false", "0", "no"}:
        return False
    return None


def _int_query_arg(
    name: str,
    default: int,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if minimum is not None and value < minimum:
        return minimum
    if maximum is not None and value > maximum:
        return maximum
    return value
