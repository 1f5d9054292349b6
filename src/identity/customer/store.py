"""SQL persistence for users, roles, saved cards and addresses."""

from sqlalchemy import Connection, Engine, delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from identity.customer.customer import Address, CreditCard, User
from identity.tables import addresses, credit_cards, role_user_map, users
from shared.database import transaction
from shared.errors import ServiceError, wrap


def _require_tx(tx: Connection | None, op: str) -> None:
    if tx is None:
        raise ServiceError(op, "transaction is None")


class UserStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    def begin(self):
        return transaction(self.engine, op="userStore.begin")

    def save_user_with_tx(self, tx: Connection, user: User, hashed_password: str) -> int:
        op = "userStore.SaveUserWithTx"
        _require_tx(tx, op)

        query = insert(users).values(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            password=hashed_password,
        )
        try:
            result = tx.execute(query)
        except IntegrityError as exc:
            raise ServiceError.conflict(op, "email is already registered") from exc
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        return result.inserted_primary_key[0]

    def update_user_with_tx(self, tx: Connection, user: User) -> None:
        """Update the profile fields. The address reference is left alone."""
        op = "userStore.UpdateUserWithTx"
        _require_tx(tx, op)

        query = (
            update(users)
            .where(users.c.id == user.id)
            .values(first_name=user.first_name, last_name=user.last_name, email=user.email)
        )
        try:
            result = tx.execute(query)
        except IntegrityError as exc:
            raise ServiceError.conflict(op, "email is already registered") from exc
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        if result.rowcount == 0:
            raise ServiceError.not_found(op, f"user {user.id} not found")

    def set_address_with_tx(
        self,
        tx: Connection,
        uid: int,
        address_id: int | None,
        only_if_unset: bool = False,
    ) -> bool:
        """Point the user at ``address_id``.

        With ``only_if_unset`` the row is only touched while its reference is
        still NULL. Returns whether a row was updated.
        """
        op = "userStore.SetAddressWithTx"
        _require_tx(tx, op)

        query = update(users).where(users.c.id == uid).values(address_id=address_id)
        if only_if_unset:
            query = query.where(users.c.address_id.is_(None))

        try:
            result = tx.execute(query)
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        return result.rowcount > 0

    def update_roles_with_tx(self, tx: Connection, uid: int, roles: list[int]) -> None:
        """Replace every role of the user with ``roles``."""
        op = "userStore.UpdateRolesWithTx"
        _require_tx(tx, op)

        try:
            tx.execute(delete(role_user_map).where(role_user_map.c.user_id == uid))
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "deleting roles") from exc

        if not roles:
            return

        try:
            tx.execute(insert(role_user_map), [{"user_id": uid, "role_id": r} for r in sorted(set(roles))])
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "attaching new roles") from exc

    def user_id_and_password_by_email(self, email: str) -> tuple[int, str]:
        op = "userStore.UserIDAndPasswordByEmail"

        query = select(users.c.id, users.c.password).where(users.c.email == email)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(query).first()
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        if row is None:
            raise ServiceError.not_found(op, "user not found")
        return row.id, row.password

    def user(self, uid: int) -> User:
        op = "userStore.User"

        user_query = select(
            users.c.id,
            users.c.first_name,
            users.c.last_name,
            users.c.email,
            users.c.address_id,
        ).where(users.c.id == uid)
        roles_query = select(role_user_map.c.role_id).where(role_user_map.c.user_id == uid).order_by(role_user_map.c.role_id)

        try:
            with self.engine.connect() as conn:
                row = conn.execute(user_query).first()
                if row is None:
                    raise ServiceError.not_found(op, "user not found")
                roles = list(conn.execute(roles_query).scalars())
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        return User(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            address_id=row.address_id,
            roles=roles,
        )

    def save_credit_card(self, card: CreditCard, customer_id: int) -> int:
        op = "userStore.SaveCreditCard"

        query = insert(credit_cards).values(
            customer_id=customer_id,
            name=card.name,
            number=card.number,
            cvc=card.cvc,
            expiry_date=card.expiry_date,
        )
        try:
            with self.engine.begin() as conn:
                result = conn.execute(query)
        except IntegrityError as exc:
            raise ServiceError.not_found(op, f"customer {customer_id} not found") from exc
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        return result.inserted_primary_key[0]

    def credit_cards(self, customer_id: int) -> list[CreditCard]:
        op = "userStore.CreditCards"

        query = (
            select(
                credit_cards.c.id,
                credit_cards.c.customer_id,
                credit_cards.c.name,
                credit_cards.c.number,
                credit_cards.c.expiry_date,
            )
            .where(credit_cards.c.customer_id == customer_id)
            .order_by(credit_cards.c.id)
        )
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(query).all()
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        # the CVC is never read back
        return [
            CreditCard(
                id=row.id,
                customer_id=row.customer_id,
                name=row.name,
                number=row.number,
                cvc="",
                expiry_date=row.expiry_date,
            )
            for row in rows
        ]

    def delete_credit_card(self, customer_id: int, card_id: int) -> bool:
        """Delete the card if it belongs to ``customer_id``. Returns whether a row went away."""
        op = "userStore.DeleteCreditCard"

        query = delete(credit_cards).where(
            credit_cards.c.id == card_id,
            credit_cards.c.customer_id == customer_id,
        )
        try:
            with self.engine.begin() as conn:
                result = conn.execute(query)
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        return result.rowcount > 0


class AddressStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    def begin(self):
        return transaction(self.engine, op="addressStore.begin")

    def save_address_with_tx(self, tx: Connection, address: Address) -> int:
        op = "addressStore.SaveAddressWithTx"
        _require_tx(tx, op)

        query = insert(addresses).values(
            country=address.country,
            state=address.state,
            city=address.city,
            postal_code=address.postal_code,
            street=address.street,
        )
        try:
            result = tx.execute(query)
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        return result.inserted_primary_key[0]

    def update_address(self, address: Address) -> None:
        op = "addressStore.UpdateAddress"

        query = (
            update(addresses)
            .where(addresses.c.id == address.id)
            .values(
                country=address.country,
                state=address.state,
                city=address.city,
                postal_code=address.postal_code,
                street=address.street,
            )
        )
        try:
            with self.engine.begin() as conn:
                result = conn.execute(query)
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        if result.rowcount == 0:
            raise ServiceError.not_found(op, f"address {address.id} not found")

    def address(self, id: int) -> Address:
        op = "addressStore.Address"

        query = select(
            addresses.c.id,
            addresses.c.country,
            addresses.c.state,
            addresses.c.city,
            addresses.c.postal_code,
            addresses.c.street,
        ).where(addresses.c.id == id)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(query).first()
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        if row is None:
            raise ServiceError.not_found(op, f"address {id} not found")

        return Address(
            id=row.id,
            country=row.country,
            state=row.state or "",
            city=row.city,
            postal_code=row.postal_code,
            street=row.street,
        )

    def delete_address_with_tx(self, tx: Connection, id: int) -> None:
        op = "addressStore.DeleteAddressWithTx"
        _require_tx(tx, op)

        try:
            result = tx.execute(delete(addresses).where(addresses.c.id == id))
        except SQLAlchemyError as exc:
            raise wrap(exc, op, "executing query") from exc

        if result.rowcount == 0:
            raise ServiceError.not_found(op, f"address {id} not found")
