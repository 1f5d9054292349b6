"""Storefront FastAPI application.

Wires the stores and services of every context onto one engine and exposes
them through the context routers.

Usage:
    uvicorn app:create_app --factory --host 0.0.0.0 --port 8000 --reload
"""

from datetime import timedelta
from http import HTTPStatus
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalogue.api import category_router, product_router
from catalogue.product.service import ProductService
from catalogue.product.store import ProductStore
from identity.api import customer_router, user_router
from identity.auth.passwords import PasswordHasher
from identity.auth.tokens import TokenCodec
from identity.customer.service import CustomerService
from identity.customer.store import AddressStore, UserStore
from notifications.channel import EmailPort, FileEmailAdapter
from notifications.dispatch import Mailer
from ordering.api import cart_router, order_router
from ordering.cart.store import CartStore
from ordering.order.store import OrderStore
from ordering.service import OrderingService
from shared.config import Settings, get_settings
from shared.database import open_engine, ping
from shared.errors import ErrorKind, ServiceError
from shared.utils.logging import add_context, clear_context, configure_logging, get_logger

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------
_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def error_response(status: int, message) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": {"message": message}})


def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status = _STATUS_BY_KIND[exc.kind]

    if exc.kind is ErrorKind.INTERNAL:
        logger.error("Request failed", error=str(exc), exc_info=exc)
        return error_response(status, "internal server error")

    logger.info("Request rejected", kind=exc.kind.value, error=str(exc))
    return error_response(status, exc.public_message or HTTPStatus(status).phrase.lower())


def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", error=repr(exc), exc_info=exc)
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "internal server error")


def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        # drop the "body"/"query"/"path" prefix
        loc = [str(part) for part in error.get("loc", ())[1:]]
        errors.append({"field": ".".join(loc), "message": error.get("msg", "")})
    return error_response(HTTPStatus.BAD_REQUEST, {"type": "validation", "errors": errors})


def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, exc.detail)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------
def create_app(
    settings: Settings | None = None,
    engine: Engine | None = None,
    email_adapter: EmailPort | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.env, settings.log_dir or None)

    engine = engine or open_engine(settings.database_url, echo=settings.database_echo)
    mailer = Mailer(email_adapter or FileEmailAdapter(settings.email_dir))

    product_service = ProductService(ProductStore(engine))
    customer_service = CustomerService(
        UserStore(engine),
        AddressStore(engine),
        PasswordHasher(rounds=settings.bcrypt_rounds),
        mailer=mailer,
    )
    ordering_service = OrderingService(
        OrderStore(engine),
        CartStore(engine),
        product_service,
        customer_service,
        mailer=mailer,
    )

    app = FastAPI(
        title="Storefront API",
        description="Catalogue, customer accounts, carts and orders",
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.product_service = product_service
    app.state.customer_service = customer_service
    app.state.ordering_service = ordering_service
    app.state.token_codec = TokenCodec(
        settings.signing_keys(),
        settings.jwt_key_id,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(minutes=settings.token_ttl_minutes),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind request identifiers to every log line written while serving it."""
        clear_context()
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        add_context(request_id=request_id, method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
        except Exception as exc:
            response = unhandled_error_handler(request, exc)
        finally:
            clear_context()
        response.headers["X-Request-ID"] = request_id
        return response

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(customer_router)
    app.include_router(user_router)
    app.include_router(product_router)
    app.include_router(category_router)
    app.include_router(cart_router)
    app.include_router(order_router)

    @app.get("/health")
    def health():
        database_ok = ping(engine)
        return JSONResponse(
            status_code=200 if database_ok else 503,
            content={"status": "ok" if database_ok else "degraded", "database": database_ok},
        )

    logger.info("Application created", env=settings.env)
    return app
