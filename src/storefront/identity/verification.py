"""Email verification: confirming a token and re-issuing one."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.notifications.mailer import send_verification_email


@storefront.command(part_of="User")
class VerifyEmail:
    token: String(required=True, max_length=128)


@storefront.command(part_of="User")
class ResendVerification:
    user_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class EmailVerificationHandler:
    @handle(VerifyEmail)
    def verify_email(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_verification_token(command.token)
        if user is None:
            raise ValidationError({"token": ["Invalid or expired verification token"]})

        user.verify_email(command.token)
        repo.add(user)
        return str(user.id)

    @handle(ResendVerification)
    def resend_verification(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if user.is_verified:
            raise ValidationError({"email": ["Email is already verified"]})

        raw_token = user.issue_verification_token()
        repo.add(user)
        send_verification_email(user.name, user.email, raw_token)
