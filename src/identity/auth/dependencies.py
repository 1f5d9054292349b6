"""Request-scoped authentication for route functions.

The caller is resolved from the ``Authorization: Bearer <token>`` header and
handed to routes as an ``AuthUser`` parameter.
"""

from typing import Annotated

from fastapi import Depends, Header, Request

from identity.auth.tokens import AuthUser, InvalidToken, TokenCodec
from identity.customer.customer import ROLE_ADMIN
from shared.errors import ServiceError
from shared.utils.logging import add_context, get_logger

logger = get_logger(__name__)


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def optional_user(
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    authorization: Annotated[str | None, Header()] = None,
) -> AuthUser | None:
    """The caller, or ``None`` for anonymous requests and unusable tokens."""
    op = "auth.optionalUser"

    if not authorization:
        return None

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise ServiceError.unauthorized(op, "wrongly formed authentication header")

    try:
        user = codec.decode(parts[1])
    except InvalidToken as exc:
        logger.info("Ignoring invalid bearer token", reason=str(exc))
        return None

    add_context(user_id=user.id)
    return user


def authenticated_user(user: Annotated[AuthUser | None, Depends(optional_user)]) -> AuthUser:
    if user is None:
        raise ServiceError.unauthorized("auth.authenticatedUser", "authentication required")
    return user


def admin_user(user: Annotated[AuthUser, Depends(authenticated_user)]) -> AuthUser:
    if not user.has_role(ROLE_ADMIN):
        raise ServiceError.forbidden("auth.adminUser", "admin role required")
    return user


def ensure_owner(user: AuthUser, customer_id: int) -> None:
    """Reject acting on another customer's resources unless the caller is an admin."""
    if user.id != customer_id and not user.has_role(ROLE_ADMIN):
        raise ServiceError.forbidden("auth.ensureOwner", "not allowed to access this customer")


CurrentUser = Annotated[AuthUser, Depends(authenticated_user)]
AdminUser = Annotated[AuthUser, Depends(admin_user)]
