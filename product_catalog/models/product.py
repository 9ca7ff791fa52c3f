from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from product_catalog.extensions import db


class Product(db.Model):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500))
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False)
    stock_quantity: Mapped[int] = mapped_column(nullable=False)
    available: Mapped[bool] = mapped_column("is_available", default=False, nullable=False)

    def __init__(self, **kwargs: object) -> None:
        kwargs.setdefault("available", False)
        super().__init__(**kwargs)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": str(self.price) if self.price is not None else None,
            "category": self.category,
            "stock_quantity": self.stock_quantity,
            "available": self.available,
        }

    def __repr__(self) -> str:
        return (
            f"Product(id={self.id!r}, name={self.name!r}, description={self.description!r}, "
            f"price={self.price!r}, category={self.category!r}, "
            f"stock_quantity={self.stock_quantity!r}, available={self.available!r})"
        )
