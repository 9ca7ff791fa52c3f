from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from product_catalog.errors import ProductValidationError, storage_errors
from product_catalog.models import Product

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
CATEGORY_MAX_LENGTH = 255
# Numeric(10, 2) leaves eight digits before the decimal point.
PRICE_LIMIT = Decimal("100000000")
CENTS = Decimal("0.01")
# Integer columns and LIMIT/OFFSET are signed 64-bit in SQLite.
SQL_INTEGER_MIN = -(2**63)
SQL_INTEGER_MAX = 2**63 - 1


def fits_sql_integer(value: int) -> bool:
    return SQL_INTEGER_MIN <= value <= SQL_INTEGER_MAX


def as_decimal(value: object) -> Decimal:
    """Convert a number-like value to a finite Decimal without rounding.

    Raises ValueError for anything that is not a finite number.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"not a number: {value!r}")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValueError(f"not a number: {value!r}") from exc
    if not number.is_finite():
        raise ValueError(f"not a number: {value!r}")
    return number


def as_price(value: object) -> Decimal:
    """Convert a price-like value to a two-place Decimal."""
    try:
        return as_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"not a price: {value!r}") from exc


def validate_product(product: Product) -> None:
    if product.id is not None and (
        isinstance(product.id, bool) or not isinstance(product.id, int) or not fits_sql_integer(product.id)
    ):
        raise ProductValidationError("id", "is out of range")

    name = product.name
    if not isinstance(name, str) or not name.strip():
        raise ProductValidationError("name", "is required")
    if len(name) > NAME_MAX_LENGTH:
        raise ProductValidationError("name", f"exceeds max length {NAME_MAX_LENGTH}")

    description = product.description
    if description is not None:
        if not isinstance(description, str):
            raise ProductValidationError("description", "must be a string")
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise ProductValidationError("description", f"exceeds max length {DESCRIPTION_MAX_LENGTH}")

    if product.price is None:
        raise ProductValidationError("price", "is required")
    try:
        price = as_price(product.price)
    except ValueError:
        raise ProductValidationError("price", "must be a valid decimal number") from None
    if abs(price) >= PRICE_LIMIT:
        raise ProductValidationError("price", "exceeds precision 10, scale 2")
    product.price = price

    category = product.category
    if not isinstance(category, str) or not category.strip():
        raise ProductValidationError("category", "is required")
    if len(category) > CATEGORY_MAX_LENGTH:
        raise ProductValidationError("category", f"exceeds max length {CATEGORY_MAX_LENGTH}")

    stock_quantity = product.stock_quantity
    if stock_quantity is None:
        raise ProductValidationError("stock_quantity", "is required")
    if isinstance(stock_quantity, bool) or not isinstance(stock_quantity, int):
        raise ProductValidationError("stock_quantity", "must be integer")
    if not fits_sql_integer(stock_quantity):
        raise ProductValidationError("stock_quantity", "is out of range")

    if product.available is None:
        product.available = False
    elif not isinstance(product.available, bool):
        raise ProductValidationError("available", "must be boolean")


class ProductStore:
    """Keyed storage of Product rows on top of one SQLAlchemy session.

    Every write commits immediately. Saving a product that carries an id
    overwrites the row with that id, or inserts one under that id when no
    such row exists.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def save(self, product: Product) -> Product:
        try:
            validate_product(product)
        except ProductValidationError:
            # Drop rejected edits so a later commit cannot flush them.
            if product in self.session:
                self.session.expire(product)
            raise
        with storage_errors(self.session, "save"):
            persisted = self._stage(product)
            self.session.commit()
        logger.info("saved product id=%s name=%r", persisted.id, persisted.name)
        return persisted

    def save_all(self, products: Iterable[Product]) -> list[Product]:
        pending = list(products)
        for product in pending:
            validate_product(product)

        with storage_errors(self.session, "save_all"):
            persisted = [self._stage(product) for product in pending]
            self.session.commit()
        logger.info("saved %d products", len(persisted))
        return persisted

    def find_by_id(self, product_id: int) -> Product | None:
        if not fits_sql_integer(product_id):
            return None
        with storage_errors(self.session, "find_by_id"):
            return self.session.get(Product, product_id)

    def find_all(self) -> list[Product]:
        stmt = select(Product).order_by(Product.id.asc())
        with storage_errors(self.session, "find_all"):
            return list(self.session.execute(stmt).scalars().all())

    def find_all_by_id(self, product_ids: Iterable[int]) -> list[Product]:
        ids = [product_id for product_id in product_ids if fits_sql_integer(product_id)]
        if not ids:
            return []
        stmt = select(Product).where(Product.id.in_(ids)).order_by(Product.id.asc())
        with storage_errors(self.session, "find_all_by_id"):
            return list(self.session.execute(stmt).scalars().all())

    def exists_by_id(self, product_id: int) -> bool:
        if not fits_sql_integer(product_id):
            return False
        with storage_errors(self.session, "exists_by_id"):
            return self.session.scalar(select(Product.id).where(Product.id == product_id)) is not None

    def count(self) -> int:
        with storage_errors(self.session, "count"):
            return int(self.session.scalar(select(func.count()).select_from(Product)) or 0)

    def delete(self, product: Product) -> None:
        if product.id is None:
            return
        self.delete_by_id(product.id)

    def delete_by_id(self, product_id: int) -> None:
        if not fits_sql_integer(product_id):
            return
        with storage_errors(self.session, "delete_by_id"):
            product = self.session.get(Product, product_id)
            if product is None:
                return
            self.session.delete(product)
            self.session.commit()
        logger.info("deleted product id=%s", product_id)

    def delete_all(self) -> None:
        with storage_errors(self.session, "delete_all"):
            result = self.session.execute(delete(Product))
            self.session.commit()
        logger.info("deleted all products (%d rows)", result.rowcount)

    def _stage(self, product: Product) -> Product:
        if product.id is None:
            self.session.add(product)
            self.session.flush()
            return product
        merged = self.session.merge(product)
        self.session.flush()
        return merged
