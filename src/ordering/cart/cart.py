"""Cart line: a product and how many of it a customer intends to buy."""

from dataclasses import dataclass

from catalogue.product.product import Product


@dataclass
class CartItem:
    product_id: int
    quantity: int = 1
    product: Product | None = None
