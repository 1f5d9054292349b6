"""Relational tables for the ordering context."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Table, UniqueConstraint

from shared.database import metadata

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("customer_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("shipping_address_id", Integer, ForeignKey("addresses.id", ondelete="SET NULL")),
    Column("quantity", Integer, nullable=False),
    Column("ordered_at", DateTime(timezone=True), nullable=False),
)

cart_items = Table(
    "cart_items",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("customer_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    UniqueConstraint("customer_id", "product_id", name="uq_cart_items_customer_product"),
)
