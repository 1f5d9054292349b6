"""Product and Category records with the price and search filter value types."""

from dataclasses import dataclass


@dataclass
class Price:
    current: float
    old: float | None = None

    @property
    def discount_percent(self) -> int:
        """Whole percentage off the old price, 0 when there is no old price."""
        if not self.old or self.old <= self.current:
            return 0
        return int((self.old - self.current) / self.old * 100)


@dataclass
class Product:
    """A catalogue item. ``quantity`` is the stock on hand."""

    name: str
    category_id: int
    price: Price
    description: str = ""
    quantity: int = 0
    rating: int | None = None
    id: int | None = None


@dataclass
class Category:
    name: str
    id: int | None = None


@dataclass
class ProductFilter:
    """Optional bounds for a catalogue search. Zero means unbounded."""

    min_price: float = 0
    max_price: float = 0
    discount: int = 0
