import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from app import create_app
from catalogue.product.product import Price, Product
from catalogue.product.service import ProductService
from catalogue.product.store import ProductStore
from identity.auth.passwords import PasswordHasher
from identity.customer.customer import ROLE_ADMIN, ROLE_CUSTOMER, Customer
from identity.customer.service import CustomerService
from identity.customer.store import AddressStore, UserStore
from notifications.channel import FakeEmailAdapter
from notifications.dispatch import Mailer
from ordering.cart.store import CartStore
from ordering.order.store import OrderStore
from ordering.service import OrderingService
from shared.config import Settings
from shared.database import open_engine
from shared.utils.db import drop_db, setup_db
from shared.utils.logging import configure_logging

DEFAULT_PASSWORD = "correct horse battery"


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    os.environ["STOREFRONT_ENV"] = session.config.option.env
    configure_logging(session.config.option.env, None)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings(tmp_path, request):
    return Settings(
        env=request.config.option.env,
        database_url=f"sqlite:///{tmp_path / 'storefront.db'}",
        jwt_secret=SecretStr("test-signing-secret"),
        jwt_key_id="test",
        bcrypt_rounds=4,
        email_dir=str(tmp_path / "emails"),
        log_dir="",
    )


@pytest.fixture()
def engine(settings):
    engine = open_engine(settings.database_url)
    setup_db(engine)

    yield engine

    drop_db(engine)
    engine.dispose()


@pytest.fixture()
def email_adapter():
    return FakeEmailAdapter()


@pytest.fixture()
def mailer(email_adapter):
    return Mailer(email_adapter)


# ---------------------------------------------------------------------------
# Stores and services
# ---------------------------------------------------------------------------
@pytest.fixture()
def product_store(engine):
    return ProductStore(engine)


@pytest.fixture()
def user_store(engine):
    return UserStore(engine)


@pytest.fixture()
def address_store(engine):
    return AddressStore(engine)


@pytest.fixture()
def order_store(engine):
    return OrderStore(engine)


@pytest.fixture()
def cart_store(engine):
    return CartStore(engine)


@pytest.fixture()
def product_service(product_store):
    return ProductService(product_store)


@pytest.fixture()
def customer_service(user_store, address_store, settings, mailer):
    return CustomerService(user_store, address_store, PasswordHasher(rounds=settings.bcrypt_rounds), mailer=mailer)


@pytest.fixture()
def ordering_service(order_store, cart_store, product_service, customer_service, mailer):
    return OrderingService(order_store, cart_store, product_service, customer_service, mailer=mailer)


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_customer(customer_service):
    counter = {"n": 0}

    def _make(email=None, password=DEFAULT_PASSWORD, first_name="Jane", last_name="Doe"):
        counter["n"] += 1
        email = email or f"customer{counter['n']}@example.com"
        return customer_service.create_customer(
            Customer(first_name=first_name, last_name=last_name, email=email), password
        )

    return _make


@pytest.fixture()
def make_admin(customer_service):
    def _make(email="admin@example.com"):
        return customer_service.create_customer(
            Customer(first_name="Ada", last_name="Admin", email=email), DEFAULT_PASSWORD, extra_roles=[ROLE_ADMIN]
        )

    return _make


@pytest.fixture()
def category_id(product_service):
    return product_service.create_category("Electronics")


@pytest.fixture()
def make_product(product_service, category_id):
    def _make(name="Headphones", quantity=5, current=10.0, old=None, category=None, description=""):
        return product_service.create_product(
            Product(
                name=name,
                category_id=category or category_id,
                price=Price(current=current, old=old),
                description=description,
                quantity=quantity,
            )
        )

    return _make


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture()
def app(settings, engine, email_adapter):
    return create_app(settings, engine=engine, email_adapter=email_adapter)


@pytest.fixture()
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def auth_headers(app):
    """Bearer headers for ``user_id``, signed with the app's active key."""

    def _headers(user_id, roles=(ROLE_CUSTOMER,)):
        token = app.state.token_codec.issue(user_id, list(roles))
        return {"Authorization": f"Bearer {token}"}

    return _headers
