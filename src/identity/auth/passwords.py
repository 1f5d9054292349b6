"""bcrypt password hashing."""

import bcrypt

# bcrypt only looks at the first 72 bytes and newer releases reject longer input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def matches(self, password: str, hashed: str) -> bool:
        """Compare ``password`` to a stored hash.

        Raises ``ValueError`` when ``hashed`` is not a bcrypt hash.
        """
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
