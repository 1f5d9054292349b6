"""Application tests for the customer's shipping address."""

import pytest
from sqlalchemy import func, select

from identity.customer.customer import Address
from identity.tables import addresses
from shared.errors import ErrorKind, ServiceError


def _address(**overrides):
    fields = {"country": "US", "state": "IL", "city": "Springfield", "postal_code": "62701", "street": "123 Main St"}
    fields.update(overrides)
    return Address(**fields)


def _address_rows(engine):
    with engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(addresses)).scalar_one()


class TestCreateAddress:
    def test_first_address_is_created_and_referenced(self, customer_service, make_customer):
        customer_id = make_customer()

        saved = customer_service.update_customer_address(customer_id, _address())

        assert saved.id is not None
        assert customer_service.user(customer_id).address_id == saved.id
        assert customer_service.customer_address(customer_id) == saved

    def test_second_create_is_a_conflict_and_keeps_the_reference(self, customer_service, make_customer, engine):
        customer_id = make_customer()
        first = customer_service.update_customer_address(customer_id, _address())

        with pytest.raises(ServiceError) as exc:
            customer_service.update_customer_address(customer_id, _address(street="9 Elm St"))

        assert exc.value.kind is ErrorKind.CONFLICT
        assert customer_service.user(customer_id).address_id == first.id
        assert _address_rows(engine) == 1

    def test_failed_reference_update_leaves_no_address_row(
        self, customer_service, make_customer, user_store, engine, monkeypatch
    ):
        customer_id = make_customer()

        def fail(tx, uid, address_id, only_if_unset=False):
            raise ServiceError("userStore.SetAddressWithTx", "executing query")

        monkeypatch.setattr(user_store, "set_address_with_tx", fail)

        with pytest.raises(ServiceError):
            customer_service.update_customer_address(customer_id, _address())

        assert _address_rows(engine) == 0
        assert customer_service.user(customer_id).address_id is None

    def test_unknown_customer_is_not_found(self, customer_service):
        with pytest.raises(ServiceError) as exc:
            customer_service.update_customer_address(999, _address())
        assert exc.value.kind is ErrorKind.NOT_FOUND


class TestUpdateAddress:
    def test_update_in_place(self, customer_service, make_customer):
        customer_id = make_customer()
        saved = customer_service.update_customer_address(customer_id, _address())

        customer_service.update_customer_address(customer_id, _address(id=saved.id, street="9 Elm St"))

        assert customer_service.customer_address(customer_id).street == "9 Elm St"

    def test_updating_someone_elses_address_is_not_found(self, customer_service, make_customer):
        jane = make_customer()
        john = make_customer()
        janes = customer_service.update_customer_address(jane, _address())

        with pytest.raises(ServiceError) as exc:
            customer_service.update_customer_address(john, _address(id=janes.id, street="Hijacked"))

        assert exc.value.kind is ErrorKind.NOT_FOUND
        assert customer_service.customer_address(jane).street == "123 Main St"


class TestDeleteAddress:
    def test_no_address(self, customer_service, make_customer):
        customer_id = make_customer()
        assert customer_service.customer_address(customer_id) is None

        with pytest.raises(ServiceError) as exc:
            customer_service.delete_customer_address(customer_id)
        assert exc.value.kind is ErrorKind.NOT_FOUND

    def test_delete_removes_row_and_reference(self, customer_service, make_customer, engine):
        customer_id = make_customer()
        customer_service.update_customer_address(customer_id, _address())

        customer_service.delete_customer_address(customer_id)

        assert customer_service.user(customer_id).address_id is None
        assert _address_rows(engine) == 0

    def test_failed_row_delete_keeps_the_reference(
        self, customer_service, make_customer, address_store, engine, monkeypatch
    ):
        customer_id = make_customer()
        saved = customer_service.update_customer_address(customer_id, _address())

        def fail(tx, address_id):
            raise ServiceError("addressStore.DeleteAddressWithTx", "executing query")

        monkeypatch.setattr(address_store, "delete_address_with_tx", fail)

        with pytest.raises(ServiceError):
            customer_service.delete_customer_address(customer_id)

        assert customer_service.user(customer_id).address_id == saved.id
        assert _address_rows(engine) == 1
