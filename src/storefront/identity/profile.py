"""Account details, deactivation and admin user management."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class UpdateUserDetails:
    user_id: Identifier(required=True)
    name: String(max_length=50)
    email: String(max_length=254)
    phone: String(max_length=20)
    avatar: String(max_length=500)


@storefront.command(part_of="User")
class DeactivateAccount:
    """Self-service account deletion. Accounts are never removed, only deactivated."""

    user_id: Identifier(required=True)
    reason: String(max_length=255)


@storefront.command(part_of="User")
class AdminUpdateUser:
    user_id: Identifier(required=True)
    name: String(max_length=50)
    email: String(max_length=254)
    is_admin: Boolean()
    is_active: Boolean()


def _ensure_email_available(repo, email, user):
    if email is not None and repo.email_taken(email, exclude_id=user.id):
        raise ValidationError({"email": ["Email is already in use"]})


@storefront.command_handler(part_of=User)
class UserProfileHandler:
    @handle(UpdateUserDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        _ensure_email_available(repo, command.email, user)
        user.update_details(
            name=command.name,
            email=command.email,
            phone=command.phone if command.phone is not None else user.phone,
            avatar=command.avatar,
        )
        repo.add(user)

    @handle(DeactivateAccount)
    def deactivate_account(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.deactivate(reason=command.reason or "Closed by account holder")
        repo.add(user)
        logger.info("Account deactivated", user_id=str(user.id))

    @handle(AdminUpdateUser)
    def admin_update_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        _ensure_email_available(repo, command.email, user)
        user.update_details(name=command.name, email=command.email)

        if command.is_admin is not None:
            user.grant_admin(command.is_admin)
        if command.is_active is False and user.is_active:
            user.deactivate(reason="Deactivated by admin")
        elif command.is_active is True and not user.is_active:
            user.reactivate()

        repo.add(user)
