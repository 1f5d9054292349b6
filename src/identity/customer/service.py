"""Customer service: signup, credentials, profile, saved cards and shipping address.

Operations that write more than one row open a transaction on the store and
pass it to every write, so they are applied completely or not at all.
"""

from identity.auth.passwords import PasswordHasher
from identity.customer.customer import ROLE_CUSTOMER, Address, CreditCard, Customer, User
from identity.customer.store import AddressStore, UserStore
from identity.shared.email import normalize_email
from notifications.dispatch import Mailer
from notifications.templates import WelcomeTemplate
from shared.errors import ErrorKind, ServiceError, wrap
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class CustomerService:
    def __init__(
        self,
        users: UserStore,
        addresses: AddressStore,
        hasher: PasswordHasher,
        mailer: Mailer | None = None,
    ):
        self.users = users
        self.addresses = addresses
        self.hasher = hasher
        self.mailer = mailer

    # --- accounts ---

    def create_customer(self, customer: Customer, password: str, extra_roles: list[int] | None = None) -> int:
        """Save the user row and give it the customer role in one transaction.

        ``extra_roles`` are granted in the same transaction, on top of the
        customer role.
        """
        op = "customerService.CreateCustomer"

        customer.email = normalize_email(customer.email)
        roles = sorted({ROLE_CUSTOMER, *(extra_roles or [])})
        hashed = self.hasher.hash(password)

        try:
            with self.users.begin() as tx:
                uid = self.users.save_user_with_tx(tx, customer, hashed)
                self.users.update_roles_with_tx(tx, uid, roles)
        except ServiceError as exc:
            raise wrap(exc, op, "saving customer") from exc
        except Exception as exc:
            raise wrap(exc, op, "committing tx") from exc

        customer.id = uid
        customer.roles = roles
        logger.info("Customer created", customer_id=uid, roles=roles)

        if self.mailer is not None:
            self.mailer.send_template(customer.email, WelcomeTemplate, {"first_name": customer.first_name})

        return uid

    def email_match_password(self, email: str, password: str) -> tuple[bool, int]:
        """Check credentials. Returns ``(matched, user_id)``.

        An unknown email is a plain mismatch, not an error.
        """
        op = "customerService.EmailMatchPassword"

        try:
            uid, hashed = self.users.user_id_and_password_by_email(normalize_email(email))
        except ServiceError as exc:
            if exc.kind is ErrorKind.NOT_FOUND:
                return False, 0
            raise wrap(exc, op, "getting user by email") from exc

        try:
            matched = self.hasher.matches(password, hashed)
        except ValueError as exc:
            raise wrap(exc, op, "comparing password hash") from exc

        if not matched:
            return False, 0
        return True, uid

    def user(self, uid: int) -> User:
        op = "customerService.User"

        try:
            return self.users.user(uid)
        except ServiceError as exc:
            raise wrap(exc, op, "getting user") from exc

    def update_user(self, user: User) -> User:
        op = "customerService.UpdateUser"

        user.email = normalize_email(user.email)

        try:
            with self.users.begin() as tx:
                self.users.update_user_with_tx(tx, user)
        except ServiceError as exc:
            raise wrap(exc, op, "updating user") from exc
        except Exception as exc:
            raise wrap(exc, op, "committing tx") from exc

        logger.info("User updated", user_id=user.id)
        return self.user(user.id)

    # --- credit cards ---

    def save_credit_card(self, card: CreditCard, customer_id: int) -> int:
        op = "customerService.SaveCreditCard"

        try:
            card_id = self.users.save_credit_card(card, customer_id)
        except ServiceError as exc:
            raise wrap(exc, op, "saving credit card") from exc

        card.id = card_id
        card.customer_id = customer_id
        logger.info("Credit card saved", customer_id=customer_id, card_id=card_id)
        return card_id

    def credit_cards(self, customer_id: int) -> list[CreditCard]:
        op = "customerService.CreditCards"

        try:
            return self.users.credit_cards(customer_id)
        except ServiceError as exc:
            raise wrap(exc, op, "getting credit cards") from exc

    def delete_credit_card(self, customer_id: int, card_id: int) -> None:
        """Delete one of the customer's cards. Cards of other customers are not found."""
        op = "customerService.DeleteCreditCard"

        try:
            deleted = self.users.delete_credit_card(customer_id, card_id)
        except ServiceError as exc:
            raise wrap(exc, op, "deleting credit card") from exc

        if not deleted:
            raise ServiceError.not_found(op, f"credit card {card_id} not found")
        logger.info("Credit card deleted", customer_id=customer_id, card_id=card_id)

    # --- shipping address ---

    def update_customer_address(self, customer_id: int, address: Address) -> Address:
        """Update the customer's address, or create it when there is none yet.

        An address without an id is only accepted while the customer has no
        address; replacing it that way would orphan the old row.
        """
        op = "customerService.UpdateCustomerAddress"

        user = self.user(customer_id)

        if address.id:
            if address.id != user.address_id:
                raise ServiceError.not_found(op, f"address {address.id} not found")
            try:
                self.addresses.update_address(address)
            except ServiceError as exc:
                raise wrap(exc, op, "updating address") from exc
            logger.info("Address updated", customer_id=customer_id, address_id=address.id)
            return address

        if user.address_id is not None:
            raise ServiceError.conflict(op, "customer already has an address, update it instead")

        try:
            with self.addresses.begin() as tx:
                address_id = self.addresses.save_address_with_tx(tx, address)
                # guarded so a concurrent create cannot overwrite the reference
                if not self.users.set_address_with_tx(tx, customer_id, address_id, only_if_unset=True):
                    raise ServiceError.conflict(op, "customer already has an address, update it instead")
        except ServiceError as exc:
            raise wrap(exc, op, "creating address") from exc
        except Exception as exc:
            raise wrap(exc, op, "committing tx") from exc

        address.id = address_id
        logger.info("Address created", customer_id=customer_id, address_id=address_id)
        return address

    def customer_address(self, customer_id: int) -> Address | None:
        op = "customerService.CustomerAddress"

        user = self.user(customer_id)
        if user.address_id is None:
            return None

        try:
            return self.addresses.address(user.address_id)
        except ServiceError as exc:
            raise wrap(exc, op, "getting address") from exc

    def delete_customer_address(self, customer_id: int) -> None:
        """Clear the reference and delete the address row together."""
        op = "customerService.DeleteCustomerAddress"

        user = self.user(customer_id)
        if user.address_id is None:
            raise ServiceError.not_found(op, "customer has no address")

        try:
            with self.addresses.begin() as tx:
                self.users.set_address_with_tx(tx, customer_id, None)
                self.addresses.delete_address_with_tx(tx, user.address_id)
        except ServiceError as exc:
            raise wrap(exc, op, "deleting address") from exc
        except Exception as exc:
            raise wrap(exc, op, "committing tx") from exc

        logger.info("Address deleted", customer_id=customer_id, address_id=user.address_id)
