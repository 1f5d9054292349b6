"""SQL persistence for products and categories."""

from sqlalchemy import Connection, Engine, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalogue.product.product import Category, Price, Product, ProductFilter
from catalogue.tables import product_categories, products
from shared.database import transaction
from shared.errors import ServiceError, wrap

_PRODUCT_COLUMNS = (
    products.c.id,
    products.c.name,
    products.c.category_id,
    products.c.price,
    products.c.old_price,
    products.c.rating,
    products.c.description,
    products.c.quantity,
)


def _to_product(row) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        category_id=row.category_id,
        price=Price(current=row.price, old=row.old_price),
        rating=row.rating,
        description=row.description or "",
        quantity=row.quantity,
    )


class ProductStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    def begin(self):
        return transaction(self.engine, op="productStore.begin")

    def product_ids(
        self,
        category_id: int = 0,
        search_term: str = "",
        filter: ProductFilter | None = None,
        page: int = 1,
        size: int = 20,
    ) -> list[int]:
        op = "productStore.ProductIDs"

        if page < 1:
            raise ServiceError.validation(op, "page cannot be less than one")
        if size < 1:
            raise ServiceError.validation(op, "size cannot be less than one")

        conditions = []
        if category_id > 0:
            conditions.append(products.c.category_id == category_id)
        if search_term:
            conditions.append(products.c.name.icontains(search_term, autoescape=True))
        if filter is not None:
            if filter.min_price > 0:
                conditions.append(products.c.price >= filter.min_price)
            if filter.max_price > 0:
                conditions.append(products.c.price <= filter.max_price)
            if filter.discount > 0:
                conditions.append(products.c.old_price.is_not(None))
                conditions.append(
                    (products.c.old_price - products.c.price) * 100 >= products.c.old_price * filter.discount
                )

        query = (
            select(products.c.id)
            .where(*conditions)
            .order_by(products.c.id)
            .limit(size)
            .offset((page - 1) * size)
        )

        try:
            with self.engine.connect() as conn:
                return list(conn.execute(query).scalars())
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

    def products_from_ids(self, ids: list[int]) -> list[Product]:
        op = "productStore.ProductsFromIDs"

        if not ids:
            return []

        query = select(*_PRODUCT_COLUMNS).where(products.c.id.in_(ids))
        try:
            with self.engine.connect() as conn:
                by_id = {row.id: _to_product(row) for row in conn.execute(query)}
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        return [by_id[i] for i in ids if i in by_id]

    def product(self, id: int) -> Product:
        op = "productStore.Product"

        try:
            with self.engine.connect() as conn:
                return self.product_with_tx(conn, id)
        except ServiceError as exc:
            raise wrap(exc, op, "reading product") from exc
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "connecting") from exc

    def product_with_tx(self, tx: Connection, id: int, for_update: bool = False) -> Product:
        op = "productStore.ProductWithTx"

        query = select(*_PRODUCT_COLUMNS).where(products.c.id == id)
        if for_update:
            query = query.with_for_update()

        try:
            row = tx.execute(query).first()
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        if row is None:
            raise ServiceError.not_found(op, f"product {id} not found")
        return _to_product(row)

    def create_category(self, name: str) -> int:
        op = "productStore.CreateCategory"

        try:
            with self.engine.begin() as conn:
                result = conn.execute(insert(product_categories).values(name=name))
                return result.inserted_primary_key[0]
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

    def categories(self) -> list[Category]:
        op = "productStore.Categories"

        query = select(product_categories.c.id, product_categories.c.name).order_by(product_categories.c.id)
        try:
            with self.engine.connect() as conn:
                return [Category(id=row.id, name=row.name) for row in conn.execute(query)]
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

    def create_product(self, product: Product) -> int:
        op = "productStore.CreateProduct"

        values = {
            "name": product.name,
            "category_id": product.category_id,
            "price": product.price.current,
            "old_price": product.price.old,
            "rating": product.rating,
            "description": product.description,
            "quantity": product.quantity,
        }
        try:
            with self.engine.begin() as conn:
                result = conn.execute(insert(products).values(**values))
                return result.inserted_primary_key[0]
        except IntegrityError as exc:
            raise ServiceError.validation(op, f"category {product.category_id} does not exist") from exc
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

    def update_product_with_tx(self, tx: Connection, product: Product) -> None:
        """Write the mutable fields of ``product`` using the caller's transaction."""
        op = "productStore.UpdateProductWithTx"

        if tx is None:
            raise ServiceError(op, "transaction is None")

        query = (
            update(products)
            .where(products.c.id == product.id)
            .values(
                name=product.name,
                category_id=product.category_id,
                price=product.price.current,
                old_price=product.price.old,
                rating=product.rating,
                description=product.description,
                quantity=product.quantity,
            )
        )
        try:
            result = tx.execute(query)
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        if result.rowcount == 0:
            raise ServiceError.not_found(op, f"product {product.id} not found")
