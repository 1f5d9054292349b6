"""Signed bearer tokens carrying the user id and roles.

Keys are injected by id. New tokens are signed with the active key and carry
its id in the ``kid`` header; verification looks the key up by that id, so a
key can be rotated by adding a new active key and keeping the old one
available until the tokens it signed have expired.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt


class InvalidToken(Exception):
    """The token is malformed, expired, or signed with an unknown key."""


@dataclass(frozen=True)
class AuthUser:
    """The authenticated caller of a request."""

    id: int
    roles: tuple[int, ...] = field(default_factory=tuple)

    def has_role(self, role: int) -> bool:
        return role in self.roles


class TokenCodec:
    def __init__(
        self,
        keys: dict[str, str],
        active_key_id: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=1),
    ):
        if active_key_id not in keys:
            raise ValueError(f"active key {active_key_id!r} is not among the configured keys")
        self.keys = dict(keys)
        self.active_key_id = active_key_id
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user_id: int, roles: list[int], now: datetime | None = None) -> str:
        now = now or datetime.now(UTC)
        claims = {
            "sub": str(user_id),
            "roles": list(roles),
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(
            claims,
            self.keys[self.active_key_id],
            algorithm=self.algorithm,
            headers={"kid": self.active_key_id},
        )

    def decode(self, token: str) -> AuthUser:
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise InvalidToken("malformed token") from exc

        key = self.keys.get(header.get("kid", self.active_key_id))
        if key is None:
            raise InvalidToken("unknown signing key")

        try:
            claims = jwt.decode(token, key, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidToken(str(exc)) from exc

        try:
            return AuthUser(id=int(claims["sub"]), roles=tuple(int(r) for r in claims.get("roles", [])))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidToken("token claims are malformed") from exc
