"""Relational tables for the catalogue context."""

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Table, Text

from shared.database import metadata

product_categories = Table(
    "product_categories",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(100), nullable=False),
)

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False, index=True),
    Column("category_id", Integer, ForeignKey("product_categories.id"), nullable=False, index=True),
    Column("price", Float, nullable=False),
    Column("old_price", Float),
    Column("rating", Integer),
    Column("description", Text, nullable=False, default=""),
    Column("quantity", Integer, nullable=False, default=0),
)
