"""Password recovery and password change."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.notifications.mailer import send_password_reset_email
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class ForgotPassword:
    email: String(required=True, max_length=254)


@storefront.command(part_of="User")
class ResetPassword:
    token: String(required=True, max_length=128)
    password: String(required=True, max_length=128)


@storefront.command(part_of="User")
class ChangePassword:
    user_id: Identifier(required=True)
    current_password: String(required=True, max_length=128)
    new_password: String(required=True, max_length=128)


@storefront.command_handler(part_of=User)
class PasswordRecoveryHandler:
    @handle(ForgotPassword)
    def forgot_password(self, command):
        """Issue a reset token and mail it. Returns the raw token."""
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)
        if user is None:
            raise ObjectNotFoundError("There is no user with that email")

        raw_token = user.issue_reset_token()
        repo.add(user)

        logger.info("Password reset requested", user_id=str(user.id))
        send_password_reset_email(user.name, user.email, raw_token)
        return raw_token

    @handle(ResetPassword)
    def reset_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_reset_token(command.token)
        if user is None:
            raise ValidationError({"token": ["Invalid or expired reset token"]})

        user.reset_password(command.token, command.password)
        repo.add(user)
        return str(user.id)

    @handle(ChangePassword)
    def change_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if not user.change_password(command.current_password, command.new_password):
            raise ValidationError({"current_password": ["Current password is incorrect"]})

        repo.add(user)
