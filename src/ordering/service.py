"""Ordering service: cart lines and order placement for a customer."""

from datetime import UTC, datetime

from catalogue.product.service import ProductService
from identity.customer.service import CustomerService
from notifications.dispatch import Mailer
from notifications.templates import OrderConfirmationTemplate
from ordering.cart.cart import CartItem
from ordering.cart.store import CartStore
from ordering.order.order import Order
from ordering.order.store import OrderStore
from shared.errors import ServiceError, wrap
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class OrderingService:
    def __init__(
        self,
        orders: OrderStore,
        carts: CartStore,
        products: ProductService,
        customers: CustomerService,
        mailer: Mailer | None = None,
    ):
        self.orders = orders
        self.carts = carts
        self.products = products
        self.customers = customers
        self.mailer = mailer

    def create_order(self, order: Order) -> Order:
        """Record the order and take its quantity out of stock in one transaction.

        Stock is never decremented without the order row being written, and
        the order row is never written without the decrement.
        """
        op = "orderingService.CreateOrder"

        if order.quantity < 1:
            raise ServiceError.validation(op, "quantity must be at least one")

        customer = self.customers.user(order.customer_id)
        if order.shipping_address_id is None:
            order.shipping_address_id = customer.address_id
        elif order.shipping_address_id != customer.address_id:
            raise ServiceError.validation(op, "shipping address does not belong to the customer")

        if order.ordered_at is None:
            order.ordered_at = datetime.now(UTC)

        try:
            with self.orders.begin() as tx:
                product = self.products.product_with_tx(tx, order.product_id, for_update=True)
                if product.quantity < order.quantity:
                    raise ServiceError.conflict(op, f"only {product.quantity} left in stock")

                product.quantity -= order.quantity
                self.products.update_product_with_tx(tx, product)
                order_id = self.orders.save_order_with_tx(tx, order)
        except ServiceError as exc:
            raise wrap(exc, op, "placing order") from exc
        except Exception as exc:
            raise wrap(exc, op, "committing tx") from exc

        order.id = order_id
        order.product = product
        logger.info(
            "Order created",
            order_id=order_id,
            customer_id=order.customer_id,
            product_id=order.product_id,
            quantity=order.quantity,
        )

        if self.mailer is not None:
            self.mailer.send_template(
                customer.email,
                OrderConfirmationTemplate,
                {
                    "order_id": order_id,
                    "product_name": product.name,
                    "quantity": order.quantity,
                    "total": product.price.current * order.quantity,
                },
            )

        return order

    def orders_by_customer(self, customer_id: int) -> list[Order]:
        op = "orderingService.OrdersByCustomer"

        try:
            orders = self.orders.orders_by_customer(customer_id)
            products = {p.id: p for p in self.products.products_from_ids(sorted({o.product_id for o in orders}))}
        except ServiceError as exc:
            raise wrap(exc, op, "getting orders") from exc

        for o in orders:
            o.product = products.get(o.product_id)
        return orders

    def cart_items(self, customer_id: int) -> list[CartItem]:
        """Cart lines joined with the current product data."""
        op = "orderingService.CartItems"

        try:
            rows = self.carts.cart_rows(customer_id)
            products = {p.id: p for p in self.products.products_from_ids([r.product_id for r in rows])}
        except ServiceError as exc:
            raise wrap(exc, op, "getting cart items") from exc

        items = []
        for row in rows:
            product = products.get(row.product_id)
            if product is None:
                continue
            items.append(CartItem(product_id=row.product_id, quantity=row.quantity, product=product))
        return items

    def add_cart_items(self, customer_id: int, items: list[CartItem]) -> list[CartItem]:
        """Add every item in one transaction; repeated products add up."""
        op = "orderingService.AddCartItems"

        if not items:
            raise ServiceError.validation(op, "no items to add")
        for item in items:
            if item.quantity < 1:
                raise ServiceError.validation(op, "quantity must be at least one")

        try:
            with self.carts.begin() as tx:
                for item in items:
                    self.carts.add_cart_item_with_tx(tx, customer_id, item.product_id, item.quantity)
        except ServiceError as exc:
            raise wrap(exc, op, "adding cart items") from exc
        except Exception as exc:
            raise wrap(exc, op, "committing tx") from exc

        logger.info("Cart items added", customer_id=customer_id, lines=len(items))
        return self.cart_items(customer_id)

    def cart_item_count(self, customer_id: int) -> int:
        op = "orderingService.CartItemCount"

        try:
            return self.carts.cart_item_count(customer_id)
        except ServiceError as exc:
            raise wrap(exc, op, "counting cart items") from exc
