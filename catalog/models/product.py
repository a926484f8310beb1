# catalog/models/product.py
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, Numeric, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column

from catalog.database import Base


class Product(Base):
    """
    One perfume in the catalog.

    Notes:
    - `id` is store-assigned and never reused; on SQLite that needs AUTOINCREMENT,
      Postgres/MySQL sequences already behave that way.
    - `description` and `image_url` are NOT NULL and default to "". `description` has no
      server default because MySQL rejects defaults on TEXT columns.
    - CHECK constraints mirror the request validation for size and price.
    """
    __tablename__ = "product"
    __table_args__ = (
        Index("ix_product_collection", "collection"),
        Index("ix_product_name_lower", func.lower(text("name"))),
        CheckConstraint("size_ml > 0", name="size_ml_positive"),
        CheckConstraint("price_thb >= 0", name="price_thb_nonnegative"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    collection: Mapped[str] = mapped_column(String(255), nullable=False)
    scent_family: Mapped[str] = mapped_column(String(255), nullable=False)
    size_ml: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    price_thb: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False, default="", server_default="")

    def __repr__(self) -> str:
        name_preview = (self.name[:32] + "…") if self.name and len(self.name) > 33 else self.name
        return f"<Product id={self.id!r} name={name_preview!r} collection={self.collection!r}>"
