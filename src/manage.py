"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db                     # Create all tables and role rows
    python src/manage.py drop-db                      # Drop all tables
    python src/manage.py seed-db                      # Random categories and products
    python src/manage.py create-admin --email a@b.io  # Account with the admin role
"""

import argparse
import getpass
import sys

from faker import Faker
from pydantic import ValidationError
from sqlalchemy import Engine

from catalogue.product.product import Price, Product
from catalogue.product.service import ProductService
from catalogue.product.store import ProductStore
from identity.api.schemas import CreateCustomerRequest
from identity.auth.passwords import PasswordHasher
from identity.customer.customer import ROLE_ADMIN, Customer
from identity.customer.service import CustomerService
from identity.customer.store import AddressStore, UserStore
from shared.config import Settings, get_settings
from shared.database import open_engine
from shared.errors import ServiceError
from shared.utils.db import drop_db, setup_db
from shared.utils.logging import configure_logging

fake = Faker()


def seed_db(engine: Engine, categories: int = 10, products_per_category: int = 10) -> list[int]:
    """Fill the catalogue with random categories and products. Returns category ids."""
    service = ProductService(ProductStore(engine))

    print(f"Creating {categories} random categories")
    category_ids = [
        service.create_category(f"{fake.word().capitalize()} {fake.word().capitalize()}"[:100])
        for _ in range(categories)
    ]
    print(f"  categories created with ids: {category_ids}")

    print("Creating products")
    for category_id in category_ids:
        for _ in range(products_per_category):
            service.create_product(
                Product(
                    name=f"{fake.word().capitalize()} {fake.word().capitalize()}"[:255],
                    category_id=category_id,
                    price=Price(current=float(fake.pydecimal(left_digits=3, right_digits=2, positive=True))),
                    description="\n".join(fake.paragraphs(nb=3)),
                    quantity=fake.random_int(min=10, max=1000),
                )
            )
    print(f"  {products_per_category} products created each for {len(category_ids)} categories")

    return category_ids


def create_admin(engine: Engine, settings: Settings, email: str, password: str, first_name: str, last_name: str) -> int:
    """Create an account carrying both the customer and the admin role.

    Input goes through the signup request checks, so raises pydantic's
    ``ValidationError`` for an invalid email or password.
    """
    body = CreateCustomerRequest.model_validate(
        {"customer": {"first_name": first_name, "last_name": last_name, "email": email}, "password": password}
    )
    customers = CustomerService(UserStore(engine), AddressStore(engine), PasswordHasher(rounds=settings.bcrypt_rounds))

    return customers.create_customer(
        Customer(first_name=body.customer.first_name, last_name=body.customer.last_name, email=body.customer.email),
        body.password,
        extra_roles=[ROLE_ADMIN],
    )


def main(argv=None, settings: Settings | None = None):
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed-db", help="Create random categories and products")
    seed_parser.add_argument("--categories", type=int, default=10)
    seed_parser.add_argument("--products-per-category", type=int, default=10)

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", help="Prompted for when omitted")
    admin_parser.add_argument("--first-name", default="Admin")
    admin_parser.add_argument("--last-name", default="User")

    args = parser.parse_args(argv)

    settings = settings or get_settings()
    configure_logging(settings.env, None)
    engine = open_engine(settings.database_url, echo=settings.database_echo)

    try:
        if args.command == "setup-db":
            print("Creating database schema...")
            setup_db(engine)
        elif args.command == "drop-db":
            print("Dropping database schema...")
            drop_db(engine)
        elif args.command == "seed-db":
            seed_db(engine, args.categories, args.products_per_category)
        elif args.command == "create-admin":
            password = args.password or getpass.getpass("Password: ")
            admin_id = create_admin(engine, settings, args.email, password, args.first_name, args.last_name)
            print(f"  admin created with id: {admin_id}")
        else:
            parser.print_help()
            sys.exit(1)
    except (ServiceError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        engine.dispose()

    print("Done.")


if __name__ == "__main__":
    main()
