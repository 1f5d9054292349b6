"""Application tests for catalogue queries and product writes."""

from unittest.mock import MagicMock

import pytest

from catalogue.product.product import Price, Product, ProductFilter
from catalogue.product.service import ProductService
from catalogue.product.store import ProductStore
from shared.errors import ErrorKind, ServiceError


class TestPaging:
    @pytest.mark.parametrize("page, size", [(0, 20), (-1, 20), (1, 0), (1, -5)])
    def test_invalid_paging_is_rejected_before_any_query(self, page, size):
        store = MagicMock(spec=ProductStore)
        service = ProductService(store)

        with pytest.raises(ServiceError) as exc:
            service.products(page=page, size=size)

        assert exc.value.kind is ErrorKind.VALIDATION
        store.product_ids.assert_not_called()
        store.products_from_ids.assert_not_called()

    def test_pages_are_ordered_by_id(self, product_service, make_product):
        ids = [make_product(name=f"Item {i}") for i in range(5)]

        first = product_service.products(page=1, size=2)
        third = product_service.products(page=3, size=2)
        beyond = product_service.products(page=4, size=2)

        assert [p.id for p in first] == ids[:2]
        assert [p.id for p in third] == ids[4:]
        assert beyond == []


class TestFilters:
    def test_category_filter(self, product_service, make_product):
        other = product_service.create_category("Garden")
        make_product(name="Headphones")
        rake_id = make_product(name="Rake", category=other)

        found = product_service.products(category_id=other)
        assert [p.id for p in found] == [rake_id]

    def test_search_is_case_insensitive(self, product_service, make_product):
        make_product(name="Wireless Headphones")
        make_product(name="Desk Lamp")

        found = product_service.products(search_term="headphones")
        assert [p.name for p in found] == ["Wireless Headphones"]

    def test_search_matches_wildcards_literally(self, product_service, make_product):
        make_product(name="100% Cotton Tee")
        make_product(name="Desk Lamp")

        assert [p.name for p in product_service.products(search_term="%")] == ["100% Cotton Tee"]
        assert product_service.products(search_term="_") == []

    def test_price_bounds(self, product_service, make_product):
        make_product(name="Cheap", current=5.0)
        mid_id = make_product(name="Mid", current=50.0)
        make_product(name="Pricey", current=500.0)

        found = product_service.products(filter=ProductFilter(min_price=10, max_price=100))
        assert [p.id for p in found] == [mid_id]

    def test_minimum_discount(self, product_service, make_product):
        make_product(name="Full price", current=100.0)
        make_product(name="Small discount", current=90.0, old=100.0)
        big_id = make_product(name="Big discount", current=50.0, old=100.0)

        found = product_service.products(filter=ProductFilter(discount=25))
        assert [p.id for p in found] == [big_id]


class TestLookups:
    def test_product(self, product_service, make_product, category_id):
        product_id = make_product(name="Headphones", quantity=3, current=19.5, old=25.0, description="Over-ear")

        product = product_service.product(product_id)
        assert product.name == "Headphones"
        assert product.category_id == category_id
        assert product.price == Price(current=19.5, old=25.0)
        assert product.quantity == 3
        assert product.description == "Over-ear"

    def test_missing_product_is_not_found(self, product_service):
        with pytest.raises(ServiceError) as exc:
            product_service.product(999)
        assert exc.value.kind is ErrorKind.NOT_FOUND

    def test_products_from_ids_keeps_requested_order(self, product_service, make_product):
        a = make_product(name="A")
        b = make_product(name="B")
        c = make_product(name="C")

        found = product_service.products_from_ids([c, a, b])
        assert [p.id for p in found] == [c, a, b]

    def test_products_from_no_ids(self, product_service):
        assert product_service.products_from_ids([]) == []


class TestWrites:
    def test_categories(self, product_service):
        product_service.create_category("Books")
        product_service.create_category("Games")

        assert [c.name for c in product_service.categories()] == ["Books", "Games"]

    def test_blank_category_name_is_rejected(self, product_service):
        with pytest.raises(ServiceError) as exc:
            product_service.create_category("   ")
        assert exc.value.kind is ErrorKind.VALIDATION

    def test_product_in_unknown_category_is_rejected(self, product_service):
        with pytest.raises(ServiceError) as exc:
            product_service.create_product(Product(name="Orphan", category_id=404, price=Price(current=1.0)))
        assert exc.value.kind is ErrorKind.VALIDATION

    def test_negative_quantity_is_rejected(self, product_service, category_id):
        with pytest.raises(ServiceError) as exc:
            product_service.create_product(
                Product(name="Broken", category_id=category_id, price=Price(current=1.0), quantity=-1)
            )
        assert exc.value.kind is ErrorKind.VALIDATION

    def test_update_with_tx_is_committed_by_the_caller(self, product_service, product_store, make_product):
        product_id = make_product(quantity=5)

        with product_store.begin() as tx:
            product = product_service.product_with_tx(tx, product_id, for_update=True)
            product.quantity = 1
            product_service.update_product_with_tx(tx, product)

        assert product_service.product(product_id).quantity == 1

    def test_update_with_tx_rolls_back_with_the_caller(self, product_service, product_store, make_product):
        product_id = make_product(quantity=5)

        with pytest.raises(RuntimeError):
            with product_store.begin() as tx:
                product = product_service.product_with_tx(tx, product_id)
                product.quantity = 1
                product_service.update_product_with_tx(tx, product)
                raise RuntimeError("later write failed")

        assert product_service.product(product_id).quantity == 5

    def test_update_without_tx_is_rejected(self, product_service, make_product):
        product = product_service.product(make_product())
        with pytest.raises(ServiceError):
            product_service.update_product_with_tx(None, product)
