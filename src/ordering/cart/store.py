"""SQL persistence for cart lines."""

from sqlalchemy import Connection, Engine, func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ordering.cart.cart import CartItem
from ordering.tables import cart_items
from shared.database import transaction
from shared.errors import ServiceError, wrap


class CartStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    def begin(self):
        return transaction(self.engine, op="cartStore.begin")

    def cart_rows(self, customer_id: int) -> list[CartItem]:
        op = "cartStore.CartRows"

        query = (
            select(cart_items.c.product_id, cart_items.c.quantity)
            .where(cart_items.c.customer_id == customer_id)
            .order_by(cart_items.c.id)
        )
        try:
            with self.engine.connect() as conn:
                return [CartItem(product_id=row.product_id, quantity=row.quantity) for row in conn.execute(query)]
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

    def add_cart_item_with_tx(self, tx: Connection, customer_id: int, product_id: int, quantity: int) -> None:
        """Insert the line, or add ``quantity`` to the existing one."""
        op = "cartStore.AddCartItemWithTx"

        if tx is None:
            raise ServiceError(op, "transaction is None")

        increment = (
            update(cart_items)
            .where(cart_items.c.customer_id == customer_id, cart_items.c.product_id == product_id)
            .values(quantity=cart_items.c.quantity + quantity)
        )
        try:
            if tx.execute(increment).rowcount > 0:
                return
            tx.execute(insert(cart_items).values(customer_id=customer_id, product_id=product_id, quantity=quantity))
        except IntegrityError as exc:
            raise ServiceError.not_found(op, "customer or product not found") from exc
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

    def cart_item_count(self, customer_id: int) -> int:
        op = "cartStore.CartItemCount"

        query = select(func.coalesce(func.sum(cart_items.c.quantity), 0)).where(cart_items.c.customer_id == customer_id)
        try:
            with self.engine.connect() as conn:
                return int(conn.execute(query).scalar_one())
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc
