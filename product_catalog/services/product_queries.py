from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select, text
from sqlalchemy.orm import Session
from sqlalchemy.sql.expression import Executable

from product_catalog.errors import InvalidQueryError, storage_errors
from product_catalog.models import Product
from product_catalog.services.product_store import CENTS, SQL_INTEGER_MAX, ProductStore, as_decimal, fits_sql_integer

logger = logging.getLogger(__name__)

# SQLite only: instr() is a case-sensitive substring test, unlike SQLite's
# ASCII case-insensitive LIKE, and is not available on PostgreSQL.
NAME_PATTERN_SQL = text(
    "SELECT p.id, p.name, p.description, p.price, p.category, p.stock_quantity, p.is_available "
    "FROM products p "
    "WHERE instr(p.name, :pattern) > 0 AND p.is_available = :available "
    "ORDER BY p.id"
).columns(*Product.__table__.c)


def _price_arg(name: str, value: object) -> Decimal:
    try:
        return as_decimal(value)
    except ValueError:
        raise InvalidQueryError(f"{name} must be a valid decimal number") from None


class ProductQueries:
    """Parameterized read and aggregate queries over the products table.

    Exact category filters are case-sensitive, name containment is not,
    price ranges include both bounds and low stock means strictly below the
    threshold. A query with no matches returns an empty list, None or zero.
    """

    def __init__(self, store: ProductStore) -> None:
        self.store = store

    @property
    def session(self) -> Session:
        return self.store.session

    def find_by_category(self, category: str) -> list[Product]:
        stmt = select(Product).where(Product.category == category).order_by(Product.id.asc())
        return self._all("find_by_category", stmt)

    def find_by_available(self, available: bool) -> list[Product]:
        stmt = select(Product).where(Product.available.is_(bool(available))).order_by(Product.id.asc())
        return self._all("find_by_available", stmt)

    def find_by_name_containing_ignore_case(self, name: str) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.name.icontains(name, autoescape=True))
            .order_by(Product.id.asc())
        )
        return self._all("find_by_name_containing_ignore_case", stmt)

    def find_by_price_range_and_category(
        self,
        min_price: object,
        max_price: object,
        category: str,
    ) -> list[Product]:
        low = _price_arg("min_price", min_price)
        high = _price_arg("max_price", max_price)
        stmt = (
            select(Product)
            .where(Product.price.between(low, high), Product.category == category)
            .order_by(Product.id.asc())
        )
        return self._all("find_by_price_range_and_category", stmt)

    def find_available_products_with_low_stock_by_category(
        self,
        threshold: int,
        category: str,
    ) -> list[Product]:
        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise InvalidQueryError("threshold must be integer")
        if not fits_sql_integer(threshold):
            raise InvalidQueryError("threshold is out of range")
        stmt = (
            select(Product)
            .where(
                Product.available.is_(True),
                Product.stock_quantity < threshold,
                Product.category == category,
            )
            .order_by(Product.id.asc())
        )
        return self._all("find_available_products_with_low_stock_by_category", stmt)

    def find_top_selling_products_by_category(
        self,
        category: str,
        page: int = 0,
        size: int = 10,
    ) -> list[Product]:
        """Available products in ``category`` with the least stock left first.

        ``page`` is zero-based; the window is ``size`` rows wide.
        """
        if page < 0:
            raise InvalidQueryError("page must be zero or greater")
        if size < 1:
            raise InvalidQueryError("size must be at least 1")
        if (page + 1) * size > SQL_INTEGER_MAX:
            raise InvalidQueryError("page window is out of range")
        stmt = (
            select(Product)
            .where(Product.category == category, Product.available.is_(True))
            .order_by(Product.stock_quantity.asc(), Product.id.asc())
            .offset(page * size)
            .limit(size)
        )
        return self._all("find_top_selling_products_by_category", stmt)

    def find_by_name_pattern_native(self, pattern: str) -> list[Product]:
        stmt = select(Product).from_statement(
            NAME_PATTERN_SQL.bindparams(pattern=pattern, available=True)
        )
        return self._all("find_by_name_pattern_native", stmt)

    def find_first_by_category_order_by_price_desc(self, category: str) -> Product | None:
        stmt = (
            select(Product)
            .where(Product.category == category)
            .order_by(Product.price.desc(), Product.id.asc())
            .limit(1)
        )
        logger.debug("find_first_by_category_order_by_price_desc category=%r", category)
        with storage_errors(self.session, "find_first_by_category_order_by_price_desc"):
            return self.session.execute(stmt).scalars().first()

    def calculate_average_price_by_category(self, category: str) -> Decimal | None:
        """Mean price in ``category`` rounded to cents, or None for an empty category."""
        stmt = select(func.avg(Product.price)).where(Product.category == category)
        logger.debug("calculate_average_price_by_category category=%r", category)
        with storage_errors(self.session, "calculate_average_price_by_category"):
            average = self.session.scalar(stmt)
        if average is None:
            return None
        return Decimal(str(average)).quantize(CENTS, rounding=ROUND_HALF_UP)

    def count_by_category_and_price_range(
        self,
        category: str,
        min_price: object,
        max_price: object,
    ) -> int:
        low = _price_arg("min_price", min_price)
        high = _price_arg("max_price", max_price)
        stmt = (
            select(func.count(Product.id))
            .where(Product.category == category, Product.price.between(low, high))
        )
        logger.debug("count_by_category_and_price_range category=%r [%s, %s]", category, low, high)
        with storage_errors(self.session, "count_by_category_and_price_range"):
            return int(self.session.scalar(stmt) or 0)

    def _all(self, operation: str, stmt: Executable) -> list[Product]:
        logger.debug("running %s", operation)
        with storage_errors(self.session, operation):
            return list(self.session.execute(stmt).scalars().all())
