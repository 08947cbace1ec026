"""Order cancellation. Stock and sold counters are reversed for every line."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.ordering.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(max_length=500)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(reason=command.reason)

        product_repo = current_domain.repository_for(Product)
        products: dict[str, Product] = {}
        for item in order.order_items:
            product = products.get(item.product_id)
            if product is None:
                try:
                    product = product_repo.get(item.product_id)
                except ObjectNotFoundError:
                    logger.warning(
                        "Skipping stock reversal for missing product",
                        order_id=str(order.id),
                        product_id=str(item.product_id),
                    )
                    continue
                products[product.id] = product
            product.reverse_sale(item.quantity)

        for product in products.values():
            product_repo.add(product)
        repo.add(order)

        logger.info("Order cancelled", order_id=str(order.id))
