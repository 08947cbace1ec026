"""Repository for the User aggregate."""

from storefront.domain import storefront
from storefront.identity.passwords import hash_token
from storefront.identity.user import User
from storefront.shared.email import normalize_email


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        return self._dao.query.filter(email=normalize_email(email)).all().first

    def email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        existing = self.find_by_email(email)
        return existing is not None and existing.id != exclude_id

    def find_by_verification_token(self, raw_token: str) -> User | None:
        return self._dao.query.filter(email_verification_token=hash_token(raw_token)).all().first

    def find_by_reset_token(self, raw_token: str) -> User | None:
        return self._dao.query.filter(reset_password_token=hash_token(raw_token)).all().first

    def list_users(self) -> list[User]:
        return self._dao.query.order_by("-created_at").limit(None).all().items
