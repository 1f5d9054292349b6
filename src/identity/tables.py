"""Relational tables for the identity context."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table

from shared.database import metadata

roles = Table(
    "roles",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", String(50), nullable=False, unique=True),
)

addresses = Table(
    "addresses",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("country", String(100), nullable=False),
    Column("state", String(100), nullable=False, default=""),
    Column("city", String(100), nullable=False),
    Column("postal_code", String(20), nullable=False),
    Column("street", String(255), nullable=False),
)

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(254), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("address_id", Integer, ForeignKey("addresses.id")),
)

role_user_map = Table(
    "role_user_map",
    metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id"), primary_key=True),
)

credit_cards = Table(
    "credit_cards",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("customer_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("name", String(100), nullable=False),
    Column("number", String(19), nullable=False),
    Column("cvc", String(4), nullable=False),
    Column("expiry_date", String(7), nullable=False),
)
