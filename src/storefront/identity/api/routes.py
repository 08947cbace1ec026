"""FastAPI endpoints for authentication and user accounts."""

from fastapi import APIRouter, Depends, Response
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import ProductResponse
from storefront.catalogue.product import Product
from storefront.config import get_settings
from storefront.identity.addresses import AddAddress, RemoveAddress, UpdateAddress
from storefront.identity.api.schemas import (
    AddAddressRequest,
    AdminUpdateUserRequest,
    AuthResponse,
    CheckEmailRequest,
    CheckEmailResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateAddressRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
    UserResponse,
)
from storefront.identity.authentication import AuthenticateUser, LoginOutcome
from storefront.identity.guards import admin_user, current_user
from storefront.identity.profile import AdminUpdateUser, DeactivateAccount, UpdateUserDetails
from storefront.identity.recovery import ChangePassword, ForgotPassword, ResetPassword
from storefront.identity.registration import RegisterUser
from storefront.identity.tokens import clear_session_cookie, create_access_token, set_session_cookie
from storefront.identity.user import User
from storefront.identity.verification import ResendVerification, VerifyEmail
from storefront.identity.wishlist import AddToWishlist, RemoveFromWishlist
from storefront.notifications.mailer import reset_url
from storefront.shared.errors import AuthenticationError

_LOGIN_FAILURES = {
    LoginOutcome.INVALID_CREDENTIALS.value: "Invalid email or password",
    LoginOutcome.LOCKED.value: "Account temporarily locked due to too many failed login attempts. Please try again later.",
    LoginOutcome.INACTIVE.value: "Account has been deactivated",
}


def _session(user_id: str, response: Response) -> AuthResponse:
    """Issue a token for the user, set it as the session cookie and echo it in the body."""
    token = create_access_token(user_id)
    set_session_cookie(response, token)
    user = current_domain.repository_for(User).get(user_id)
    return AuthResponse(token=token, user=UserResponse.from_user(user))


def _reload(user: User) -> UserResponse:
    return UserResponse.from_user(current_domain.repository_for(User).get(user.id))


# ---------------------------------------------------------------------------
# Auth Router
# ---------------------------------------------------------------------------
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", status_code=201, response_model=AuthResponse)
async def register(body: RegisterRequest, response: Response) -> AuthResponse:
    command = RegisterUser(
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return _session(user_id, response)


@auth_router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, response: Response) -> AuthResponse:
    result = current_domain.process(AuthenticateUser(email=body.email, password=body.password), asynchronous=False)
    if result["outcome"] != LoginOutcome.SUCCESS.value:
        raise AuthenticationError(_LOGIN_FAILURES[result["outcome"]])
    return _session(result["user_id"], response)


@auth_router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@auth_router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(current_user)) -> UserResponse:
    return UserResponse.from_user(user)


@auth_router.put("/updatedetails", response_model=UserResponse)
async def update_details(body: UpdateDetailsRequest, user: User = Depends(current_user)) -> UserResponse:
    command = UpdateUserDetails(
        user_id=user.id,
        name=body.name,
        email=body.email,
        phone=body.phone,
        avatar=body.avatar,
    )
    current_domain.process(command, asynchronous=False)
    return _reload(user)


@auth_router.put("/updatepassword", response_model=AuthResponse)
async def update_password(
    body: UpdatePasswordRequest,
    response: Response,
    user: User = Depends(current_user),
) -> AuthResponse:
    command = ChangePassword(
        user_id=user.id,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    current_domain.process(command, asynchronous=False)
    return _session(user.id, response)


@auth_router.delete("/deleteaccount", response_model=MessageResponse)
async def delete_account(response: Response, user: User = Depends(current_user)) -> MessageResponse:
    current_domain.process(DeactivateAccount(user_id=user.id), asynchronous=False)
    clear_session_cookie(response)
    return MessageResponse(message="Account deactivated")


@auth_router.post("/check-email", response_model=CheckEmailResponse)
async def check_email(body: CheckEmailRequest) -> CheckEmailResponse:
    taken = current_domain.repository_for(User).email_taken(body.email)
    return CheckEmailResponse(
        available=not taken,
        message="Email is already registered" if taken else "Email is available",
    )


@auth_router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(body: ForgotPasswordRequest) -> ForgotPasswordResponse:
    raw_token = current_domain.process(ForgotPassword(email=body.email), asynchronous=False)
    return ForgotPasswordResponse(
        message="Password reset email sent",
        reset_url=None if get_settings().is_production else reset_url(raw_token),
    )


@auth_router.put("/reset-password/{token}", response_model=AuthResponse)
async def reset_password(token: str, body: ResetPasswordRequest, response: Response) -> AuthResponse:
    user_id = current_domain.process(ResetPassword(token=token, password=body.password), asynchronous=False)
    return _session(user_id, response)


@auth_router.get("/verify-email/{token}", response_model=MessageResponse)
async def verify_email(token: str) -> MessageResponse:
    current_domain.process(VerifyEmail(token=token), asynchronous=False)
    return MessageResponse(message="Email verified successfully")


@auth_router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(user: User = Depends(current_user)) -> MessageResponse:
    current_domain.process(ResendVerification(user_id=user.id), asynchronous=False)
    return MessageResponse(message="Verification email sent")


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.get("/profile", response_model=UserResponse)
async def get_profile(user: User = Depends(current_user)) -> UserResponse:
    return UserResponse.from_user(user)


@user_router.put("/profile", response_model=UserResponse)
async def update_profile(body: UpdateDetailsRequest, user: User = Depends(current_user)) -> UserResponse:
    command = UpdateUserDetails(
        user_id=user.id,
        name=body.name,
        email=body.email,
        phone=body.phone,
        avatar=body.avatar,
    )
    current_domain.process(command, asynchronous=False)
    return _reload(user)


@user_router.post("/address", status_code=201, response_model=UserResponse)
async def add_address(body: AddAddressRequest, user: User = Depends(current_user)) -> UserResponse:
    command = AddAddress(
        user_id=user.id,
        name=body.name,
        address=body.address,
        city=body.city,
        state=body.state,
        postal_code=body.postal_code,
        country=body.country,
        phone=body.phone,
        is_default=body.is_default,
    )
    current_domain.process(command, asynchronous=False)
    return _reload(user)


@user_router.put("/address/{address_id}", response_model=UserResponse)
async def update_address(
    address_id: str,
    body: UpdateAddressRequest,
    user: User = Depends(current_user),
) -> UserResponse:
    command = UpdateAddress(user_id=user.id, address_id=address_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return _reload(user)


@user_router.delete("/address/{address_id}", response_model=UserResponse)
async def remove_address(address_id: str, user: User = Depends(current_user)) -> UserResponse:
    current_domain.process(RemoveAddress(user_id=user.id, address_id=address_id), asynchronous=False)
    return _reload(user)


@user_router.get("/wishlist", response_model=list[ProductResponse])
async def get_wishlist(user: User = Depends(current_user)) -> list[ProductResponse]:
    repo = current_domain.repository_for(Product)
    products = [repo.get(pid) for pid in user.wishlist_ids]
    return [ProductResponse.from_product(p) for p in products if p.is_active]


@user_router.post("/wishlist/{product_id}", response_model=MessageResponse)
async def add_to_wishlist(product_id: str, user: User = Depends(current_user)) -> MessageResponse:
    current_domain.process(AddToWishlist(user_id=user.id, product_id=product_id), asynchronous=False)
    return MessageResponse(message="Product added to wishlist")


@user_router.delete("/wishlist/{product_id}", response_model=MessageResponse)
async def remove_from_wishlist(product_id: str, user: User = Depends(current_user)) -> MessageResponse:
    current_domain.process(RemoveFromWishlist(user_id=user.id, product_id=product_id), asynchronous=False)
    return MessageResponse(message="Product removed from wishlist")


@user_router.get("", response_model=list[UserResponse])
async def list_users(_admin: User = Depends(admin_user)) -> list[UserResponse]:
    return [UserResponse.from_user(u) for u in current_domain.repository_for(User).list_users()]


@user_router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, _admin: User = Depends(admin_user)) -> UserResponse:
    return UserResponse.from_user(current_domain.repository_for(User).get(user_id))


@user_router.put("/{user_id}", response_model=UserResponse)
async def admin_update_user(
    user_id: str,
    body: AdminUpdateUserRequest,
    _admin: User = Depends(admin_user),
) -> UserResponse:
    command = AdminUpdateUser(
        user_id=user_id,
        name=body.name,
        email=body.email,
        is_admin=body.is_admin,
        is_active=body.is_active,
    )
    current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get(user_id))


@user_router.delete("/{user_id}", response_model=MessageResponse)
async def admin_delete_user(user_id: str, _admin: User = Depends(admin_user)) -> MessageResponse:
    current_domain.process(DeactivateAccount(user_id=user_id, reason="Removed by admin"), asynchronous=False)
    return MessageResponse(message="User deactivated")
