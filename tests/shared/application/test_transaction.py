"""Tests for the shared transaction boundary."""

import pytest
from sqlalchemy import func, insert, select

from catalogue.tables import product_categories
from shared.database import ping, transaction


def _category_count(engine):
    with engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(product_categories)).scalar_one()


class TestTransaction:
    def test_commits_when_block_succeeds(self, engine):
        with transaction(engine, op="test") as tx:
            tx.execute(insert(product_categories).values(name="Books"))
            tx.execute(insert(product_categories).values(name="Games"))

        assert _category_count(engine) == 2

    def test_rolls_back_every_write_when_block_raises(self, engine):
        with pytest.raises(RuntimeError, match="second write failed"):
            with transaction(engine, op="test") as tx:
                tx.execute(insert(product_categories).values(name="Books"))
                raise RuntimeError("second write failed")

        assert _category_count(engine) == 0


class TestPing:
    def test_ping(self, engine):
        assert ping(engine) is True
