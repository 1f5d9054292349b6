from sqlalchemy import Engine, insert, select

from shared.database import metadata


def _load_tables():
    # Importing the table modules registers them on the shared metadata
    import catalogue.tables  # noqa: F401
    import identity.tables  # noqa: F401
    import ordering.tables  # noqa: F401


def setup_db(engine: Engine):
    """Create all tables and seed the role rows."""
    _load_tables()
    from identity.customer.customer import ROLE_NAMES
    from identity.tables import roles

    metadata.create_all(engine)

    with engine.begin() as conn:
        existing = set(conn.execute(select(roles.c.id)).scalars())
        missing = [{"id": rid, "name": name} for rid, name in ROLE_NAMES.items() if rid not in existing]
        if missing:
            conn.execute(insert(roles), missing)


def drop_db(engine: Engine):
    """Drop all tables"""
    _load_tables()
    metadata.drop_all(engine)
