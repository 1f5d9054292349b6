"""Product service: catalogue queries and the product side of order placement."""

from sqlalchemy import Connection

from catalogue.product.product import Category, Product, ProductFilter
from catalogue.product.store import ProductStore
from shared.errors import ServiceError, wrap
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    def __init__(self, store: ProductStore):
        self.store = store

    def products(
        self,
        category_id: int = 0,
        search_term: str = "",
        filter: ProductFilter | None = None,
        page: int = 1,
        size: int = 20,
    ) -> list[Product]:
        """Return one page of products matching the optional filters.

        Looks up matching ids first, then loads the full records for them.
        """
        op = "productService.Products"

        if page < 1:
            raise ServiceError.validation(op, "page cannot be less than one")
        if size < 1:
            raise ServiceError.validation(op, "size cannot be less than one")

        try:
            ids = self.store.product_ids(category_id, search_term, filter, page, size)
        except ServiceError as exc:
            raise wrap(exc, op, "getting product ids") from exc

        try:
            return self.products_from_ids(ids)
        except ServiceError as exc:
            raise wrap(exc, op, "getting products from ids") from exc

    def products_from_ids(self, ids: list[int]) -> list[Product]:
        op = "productService.ProductsFromIDs"

        try:
            return self.store.products_from_ids(ids)
        except ServiceError as exc:
            raise wrap(exc, op, "getting products from repo") from exc

    def product(self, id: int) -> Product:
        op = "productService.Product"

        try:
            return self.store.product(id)
        except ServiceError as exc:
            raise wrap(exc, op, "getting product from repo") from exc

    def create_category(self, name: str) -> int:
        op = "productService.CreateCategory"

        if not name.strip():
            raise ServiceError.validation(op, "category name is required")

        try:
            category_id = self.store.create_category(name.strip())
        except ServiceError as exc:
            raise wrap(exc, op, "creating category") from exc

        logger.info("Category created", category_id=category_id)
        return category_id

    def categories(self) -> list[Category]:
        op = "productService.Categories"

        try:
            return self.store.categories()
        except ServiceError as exc:
            raise wrap(exc, op, "getting categories") from exc

    def create_product(self, product: Product) -> int:
        op = "productService.CreateProduct"

        if product.quantity < 0:
            raise ServiceError.validation(op, "quantity cannot be negative")
        if product.price.current < 0:
            raise ServiceError.validation(op, "price cannot be negative")

        try:
            product_id = self.store.create_product(product)
        except ServiceError as exc:
            raise wrap(exc, op, "creating product") from exc

        logger.info("Product created", product_id=product_id, category_id=product.category_id)
        return product_id

    def product_with_tx(self, tx: Connection, id: int, for_update: bool = False) -> Product:
        op = "productService.ProductWithTx"

        try:
            return self.store.product_with_tx(tx, id, for_update=for_update)
        except ServiceError as exc:
            raise wrap(exc, op, "getting product in tx") from exc

    def update_product_with_tx(self, tx: Connection, product: Product) -> None:
        """Update ``product`` on the caller's transaction. The caller commits."""
        op = "productService.UpdateProductWithTx"

        try:
            self.store.update_product_with_tx(tx, product)
        except ServiceError as exc:
            raise wrap(exc, op, "updating product") from exc
