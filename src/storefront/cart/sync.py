"""Merging a client-held guest cart into the signed-in user's stored cart."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class SyncGuestCart:
    user_id: Identifier(required=True)
    guest_cart: Text()  # JSON: [{product_id, quantity, variant}]


def _guest_lines(raw) -> list[dict]:
    lines = json.loads(raw) if raw else []
    for line in lines:
        if not line.get("product_id"):
            raise ValidationError({"guest_cart": ["Every line needs a product_id"]})
        if int(line.get("quantity", 1)) < 1:
            raise ValidationError({"guest_cart": ["Quantity must be at least 1"]})
    return lines


@storefront.command_handler(part_of=User)
class SyncGuestCartHandler:
    @handle(SyncGuestCart)
    def sync_guest_cart(self, command):
        lines = _guest_lines(command.guest_cart)
        if not lines:
            return

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.merge_guest_cart(lines)
        repo.add(user)

        logger.info("Guest cart merged", user_id=str(user.id), lines=len(lines))
