"""Order record: one product line placed by a customer."""

from dataclasses import dataclass
from datetime import datetime

from catalogue.product.product import Product


@dataclass
class Order:
    """An order of ``quantity`` units of one product.

    ``product`` is filled with the current product data when orders are read
    back; only ``product_id`` is stored.
    """

    customer_id: int
    product_id: int
    quantity: int
    shipping_address_id: int | None = None
    ordered_at: datetime | None = None
    product: Product | None = None
    id: int | None = None
