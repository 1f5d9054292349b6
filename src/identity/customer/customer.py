"""User records: customers, their shipping address and saved cards."""

from dataclasses import dataclass, field

ROLE_CUSTOMER = 1
ROLE_ADMIN = 2

ROLE_NAMES = {
    ROLE_CUSTOMER: "customer",
    ROLE_ADMIN: "admin",
}


@dataclass
class User:
    first_name: str
    last_name: str
    email: str
    roles: list[int] = field(default_factory=list)
    address_id: int | None = None
    id: int | None = None

    def has_role(self, role: int) -> bool:
        return role in self.roles


@dataclass
class Customer(User):
    """A user created through signup. Always carries ``ROLE_CUSTOMER`` once saved."""


@dataclass
class Address:
    """A shipping address. Owned by the user whose ``address_id`` points at it."""

    country: str
    city: str
    postal_code: str
    street: str
    state: str = ""
    id: int | None = None


@dataclass
class CreditCard:
    name: str
    number: str
    cvc: str
    expiry_date: str
    customer_id: int | None = None
    id: int | None = None

    @property
    def last4(self) -> str:
        return self.number[-4:]
