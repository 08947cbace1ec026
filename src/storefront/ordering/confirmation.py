"""Mails an order confirmation once an order has been placed."""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.identity.user import User
from storefront.notifications.mailer import send_order_confirmation
from storefront.ordering.events import OrderPlaced
from storefront.ordering.order import Order

logger = structlog.get_logger(__name__)


@storefront.event_handler(part_of=Order)
class OrderConfirmationHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        try:
            order = current_domain.repository_for(Order).get(event.order_id)
            if order.guest_user:
                name, email = order.guest_user.name, order.guest_user.email
            else:
                user = current_domain.repository_for(User).get(order.user_id)
                name, email = user.name, user.email
        except ObjectNotFoundError:
            logger.error("Cannot resolve order confirmation recipient", order_id=str(event.order_id))
            return

        send_order_confirmation(name, email, order)
