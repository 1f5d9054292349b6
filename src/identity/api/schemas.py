"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from identity.auth.passwords import MAX_PASSWORD_BYTES
from identity.shared.email import validate_email_address

# --- Request Schemas ---


class CustomerFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        return validate_email_address(value)


def _check_password(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must not be longer than {MAX_PASSWORD_BYTES} bytes")
    return value


class CreateCustomerRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "customer": {"first_name": "Jane", "last_name": "Doe", "email": "jane.doe@example.com"},
                    "password": "correct horse battery",
                }
            ]
        },
    )

    customer: CustomerFields
    password: str = Field(..., min_length=8)

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        return _check_password(value)


class UpdateUserRequest(CustomerFields):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [{"first_name": "Jane", "last_name": "Smith", "email": "jane.smith@example.com"}]
        },
    )


class AuthenticationRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"examples": [{"email": "jane.doe@example.com", "password": "correct horse battery"}]},
    )

    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        return validate_email_address(value)

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        return _check_password(value)


class CreditCardRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [{"name": "Personal Visa", "number": "4242424242424242", "cvc": "123", "expiry_date": "09/28"}]
        },
    )

    name: str = Field(..., min_length=1, max_length=100)
    number: str = Field(..., pattern=r"^\d{12,19}$")
    cvc: str = Field(..., pattern=r"^\d{3,4}$")
    expiry_date: str = Field(..., pattern=r"^(0[1-9]|1[0-2])/\d{2}$")


class AddressRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "country": "US",
                    "state": "IL",
                    "city": "Springfield",
                    "postal_code": "62701",
                    "street": "123 Elm Street",
                }
            ]
        },
    )

    id: int | None = Field(None, ge=1)
    country: str = Field(..., min_length=1, max_length=100)
    state: str = Field("", max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    street: str = Field(..., min_length=1, max_length=255)


# --- Response Schemas ---


class IdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"id": 42}]}}

    id: int


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    roles: list[int] = []
    address_id: int | None = None


class AuthenticationResponse(BaseModel):
    token: str
    user: UserResponse


class CreditCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    number: str
    expiry_date: str

    @field_serializer("number")
    def mask_number(self, number: str) -> str:
        return "*" * (len(number) - 4) + number[-4:]


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    country: str
    state: str
    city: str
    postal_code: str
    street: str
