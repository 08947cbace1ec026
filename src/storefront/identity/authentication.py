"""Password login with failed-attempt lockout.

The handler reports the outcome instead of raising: a failed attempt has to
be persisted, and raising inside the handler would roll that back.
"""

from enum import Enum

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class LoginOutcome(Enum):
    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"
    LOCKED = "locked"
    INACTIVE = "inactive"


@storefront.command(part_of="User")
class AuthenticateUser:
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)


@storefront.command_handler(part_of=User)
class AuthenticateUserHandler:
    @handle(AuthenticateUser)
    def authenticate(self, command) -> dict:
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)

        if user is None:
            return {"outcome": LoginOutcome.INVALID_CREDENTIALS.value, "user_id": None}

        if user.is_locked():
            logger.info("Login rejected for locked account", user_id=str(user.id))
            return {"outcome": LoginOutcome.LOCKED.value, "user_id": str(user.id)}

        if not user.check_password(command.password):
            user.record_failed_login()
            repo.add(user)
            logger.info(
                "Login failed",
                user_id=str(user.id),
                attempts=user.login_attempts,
                locked=user.is_locked(),
            )
            return {"outcome": LoginOutcome.INVALID_CREDENTIALS.value, "user_id": str(user.id)}

        if not user.is_active:
            return {"outcome": LoginOutcome.INACTIVE.value, "user_id": str(user.id)}

        user.record_successful_login()
        repo.add(user)
        return {"outcome": LoginOutcome.SUCCESS.value, "user_id": str(user.id)}
