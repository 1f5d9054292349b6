"""FastAPI endpoints for the Identity domain: accounts, credentials, cards and address."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from identity.api.schemas import (
    AddressRequest,
    AddressResponse,
    AuthenticationRequest,
    AuthenticationResponse,
    CreateCustomerRequest,
    CreditCardRequest,
    CreditCardResponse,
    IdResponse,
    UpdateUserRequest,
    UserResponse,
)
from identity.auth.dependencies import CurrentUser, ensure_owner, get_token_codec
from identity.auth.tokens import TokenCodec
from identity.customer.customer import Address, CreditCard, Customer, User
from identity.customer.service import CustomerService
from shared.errors import ServiceError


def get_customer_service(request: Request) -> CustomerService:
    return request.app.state.customer_service


Customers = Annotated[CustomerService, Depends(get_customer_service)]

customer_router = APIRouter(prefix="/customers", tags=["customers"])
user_router = APIRouter(prefix="/users", tags=["users"])


# --- Customers ---


@customer_router.post("", status_code=201, response_model=IdResponse)
def create_customer(body: CreateCustomerRequest, customers: Customers) -> IdResponse:
    customer = Customer(
        first_name=body.customer.first_name,
        last_name=body.customer.last_name,
        email=body.customer.email,
    )
    customer_id = customers.create_customer(customer, body.password)
    return IdResponse(id=customer_id)


# --- Credit cards (always the caller's own) ---


@customer_router.post("/cards", status_code=201, response_model=IdResponse)
def save_credit_card(body: CreditCardRequest, user: CurrentUser, customers: Customers) -> IdResponse:
    card = CreditCard(name=body.name, number=body.number, cvc=body.cvc, expiry_date=body.expiry_date)
    card_id = customers.save_credit_card(card, user.id)
    return IdResponse(id=card_id)


@customer_router.get("/cards", response_model=list[CreditCardResponse])
def get_credit_cards(user: CurrentUser, customers: Customers) -> list[CreditCardResponse]:
    return [CreditCardResponse.model_validate(card) for card in customers.credit_cards(user.id)]


@customer_router.delete("/cards/{card_id}", status_code=204)
def delete_credit_card(card_id: int, user: CurrentUser, customers: Customers) -> Response:
    customers.delete_credit_card(user.id, card_id)
    return Response(status_code=204)


# --- Shipping address ---


@customer_router.put("/{customer_id}/address", response_model=AddressResponse)
def update_customer_address(
    customer_id: int,
    body: AddressRequest,
    user: CurrentUser,
    customers: Customers,
) -> AddressResponse:
    ensure_owner(user, customer_id)
    address = Address(
        id=body.id,
        country=body.country,
        state=body.state,
        city=body.city,
        postal_code=body.postal_code,
        street=body.street,
    )
    saved = customers.update_customer_address(customer_id, address)
    return AddressResponse.model_validate(saved)


@customer_router.get("/{customer_id}/address", response_model=AddressResponse | None)
def get_customer_address(customer_id: int, user: CurrentUser, customers: Customers) -> AddressResponse | None:
    ensure_owner(user, customer_id)
    address = customers.customer_address(customer_id)
    if address is None:
        return None
    return AddressResponse.model_validate(address)


@customer_router.delete("/{customer_id}/address", status_code=204)
def delete_customer_address(customer_id: int, user: CurrentUser, customers: Customers) -> Response:
    ensure_owner(user, customer_id)
    customers.delete_customer_address(customer_id)
    return Response(status_code=204)


# --- Users ---


@user_router.post("/authentication", response_model=AuthenticationResponse)
def authenticate(
    body: AuthenticationRequest,
    customers: Customers,
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> AuthenticationResponse:
    matched, user_id = customers.email_match_password(body.email, body.password)
    if not matched:
        raise ServiceError.unauthorized("http.authenticate", "invalid email or password")

    user = customers.user(user_id)
    token = codec.issue(user.id, user.roles)
    return AuthenticationResponse(token=token, user=UserResponse.model_validate(user))


@user_router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, user: CurrentUser, customers: Customers) -> UserResponse:
    ensure_owner(user, user_id)
    return UserResponse.model_validate(customers.user(user_id))


@user_router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, body: UpdateUserRequest, user: CurrentUser, customers: Customers) -> UserResponse:
    ensure_owner(user, user_id)
    updated = customers.update_user(
        User(id=user_id, first_name=body.first_name, last_name=body.last_name, email=body.email)
    )
    return UserResponse.model_validate(updated)
