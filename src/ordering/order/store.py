"""SQL persistence for orders."""

from sqlalchemy import Connection, Engine, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ordering.order.order import Order
from ordering.tables import orders
from shared.database import transaction
from shared.errors import ServiceError, wrap

_ORDER_COLUMNS = (
    orders.c.id,
    orders.c.product_id,
    orders.c.customer_id,
    orders.c.shipping_address_id,
    orders.c.quantity,
    orders.c.ordered_at,
)


def _to_order(row) -> Order:
    return Order(
        id=row.id,
        product_id=row.product_id,
        customer_id=row.customer_id,
        shipping_address_id=row.shipping_address_id,
        quantity=row.quantity,
        ordered_at=row.ordered_at,
    )


class OrderStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    def begin(self):
        return transaction(self.engine, op="orderStore.begin")

    def save_order_with_tx(self, tx: Connection, order: Order) -> int:
        op = "orderStore.SaveOrderWithTx"

        if tx is None:
            raise ServiceError(op, "transaction is None")

        query = insert(orders).values(
            product_id=order.product_id,
            customer_id=order.customer_id,
            shipping_address_id=order.shipping_address_id,
            quantity=order.quantity,
            ordered_at=order.ordered_at,
        )
        try:
            result = tx.execute(query)
        except IntegrityError as exc:
            raise ServiceError.not_found(op, "customer or product not found") from exc
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        return result.inserted_primary_key[0]

    def orders_by_customer(self, customer_id: int) -> list[Order]:
        """The customer's orders, newest first."""
        op = "orderStore.OrdersByCustomer"

        query = (
            select(*_ORDER_COLUMNS)
            .where(orders.c.customer_id == customer_id)
            .order_by(orders.c.ordered_at.desc(), orders.c.id.desc())
        )
        try:
            with self.engine.connect() as conn:
                return [_to_order(row) for row in conn.execute(query)]
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc
