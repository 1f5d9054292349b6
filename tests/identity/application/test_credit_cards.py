"""Application tests for saved credit cards."""

import pytest

from identity.customer.customer import CreditCard
from shared.errors import ErrorKind, ServiceError


def _card(name="Personal Visa", number="4242424242424242"):
    return CreditCard(name=name, number=number, cvc="123", expiry_date="09/28")


class TestCreditCards:
    def test_save_and_list(self, customer_service, make_customer):
        customer_id = make_customer()

        card_id = customer_service.save_credit_card(_card(), customer_id)

        cards = customer_service.credit_cards(customer_id)
        assert [c.id for c in cards] == [card_id]
        assert cards[0].last4 == "4242"
        assert cards[0].cvc == ""

    def test_cards_are_scoped_to_their_owner(self, customer_service, make_customer):
        jane = make_customer()
        john = make_customer()
        customer_service.save_credit_card(_card(), jane)

        assert customer_service.credit_cards(john) == []

    def test_unknown_customer_is_not_found(self, customer_service):
        with pytest.raises(ServiceError) as exc:
            customer_service.save_credit_card(_card(), 999)
        assert exc.value.kind is ErrorKind.NOT_FOUND

    def test_delete_own_card(self, customer_service, make_customer):
        customer_id = make_customer()
        card_id = customer_service.save_credit_card(_card(), customer_id)

        customer_service.delete_credit_card(customer_id, card_id)

        assert customer_service.credit_cards(customer_id) == []

    def test_deleting_another_customers_card_is_not_found(self, customer_service, make_customer):
        jane = make_customer()
        john = make_customer()
        card_id = customer_service.save_credit_card(_card(), jane)

        with pytest.raises(ServiceError) as exc:
            customer_service.delete_credit_card(john, card_id)

        assert exc.value.kind is ErrorKind.NOT_FOUND
        assert [c.id for c in customer_service.credit_cards(jane)] == [card_id]
