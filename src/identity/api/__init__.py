"""Identity domain API package."""

from identity.api.routes import customer_router, user_router

__all__ = ["customer_router", "user_router"]
