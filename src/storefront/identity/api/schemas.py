"""Pydantic request/response schemas for the auth and user endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.identity.user import User


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    id: str
    name: str
    address: str
    city: str
    state: str | None = None
    postal_code: str
    country: str | None = None
    phone: str
    is_default: bool = False


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    avatar: str | None = None
    is_verified: bool
    is_admin: bool
    is_active: bool
    addresses: list[AddressSchema] = []
    wishlist: list[str] = []
    last_login: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            phone=user.phone,
            avatar=user.avatar,
            is_verified=bool(user.is_verified),
            is_admin=bool(user.is_admin),
            is_active=bool(user.is_active),
            addresses=[
                AddressSchema(
                    id=str(a.id),
                    name=a.name,
                    address=a.address,
                    city=a.city,
                    state=a.state,
                    postal_code=a.postal_code,
                    country=a.country,
                    phone=a.phone,
                    is_default=bool(a.is_default),
                )
                for a in user.addresses
            ],
            wishlist=user.wishlist_ids,
            last_login=user.last_login,
            created_at=user.created_at,
        )


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ayesha Khan",
                    "email": "ayesha@example.com",
                    "password": "s3cret-pass",
                    "phone": "+923001234567",
                }
            ]
        }
    }

    name: str = Field(..., max_length=50)
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    phone: str | None = Field(None, max_length=20)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: UserResponse


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., max_length=254)


class ForgotPasswordResponse(BaseModel):
    success: bool = True
    message: str
    reset_url: str | None = None


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., max_length=128)


class CheckEmailRequest(BaseModel):
    email: str = Field(..., max_length=254)


class CheckEmailResponse(BaseModel):
    available: bool
    message: str


class UpdateDetailsRequest(BaseModel):
    name: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=20)
    avatar: str | None = Field(None, max_length=500)


class UpdatePasswordRequest(BaseModel):
    current_password: str = Field(..., max_length=128)
    new_password: str = Field(..., max_length=128)


class MessageResponse(BaseModel):
    success: bool = True
    message: str


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class AddAddressRequest(BaseModel):
    name: str = Field(..., max_length=100)
    address: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str = Field(..., max_length=20)
    country: str | None = Field(None, max_length=100)
    phone: str = Field(..., max_length=20)
    is_default: bool = False


class UpdateAddressRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=20)
    is_default: bool | None = None


class AdminUpdateUserRequest(BaseModel):
    name: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=254)
    is_admin: bool | None = None
    is_active: bool | None = None
