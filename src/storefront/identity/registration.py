"""User registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.notifications.mailer import send_verification_email
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class RegisterUser:
    """Create an unverified account and mail the verification link."""

    name: String(required=True, max_length=50)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)
    phone: String(max_length=20)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        # Uniqueness is decided before any other rule so a taken email always conflicts
        if repo.email_taken(command.email):
            raise ValidationError({"email": ["User already exists with this email"]})

        user = User.register(
            name=command.name,
            email=command.email,
            password=command.password,
            phone=command.phone,
        )
        raw_token = user.issue_verification_token()
        repo.add(user)

        logger.info("User registered", user_id=str(user.id))
        send_verification_email(user.name, user.email, raw_token)
        return str(user.id)
