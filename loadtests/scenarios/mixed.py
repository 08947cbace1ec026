"""Mixed storefront workload scenario.

Combines browsing, buying and back-office journeys with weights that
model a beauty storefront's traffic: mostly reads, some checkouts, and a
trickle of admin work. This is the recommended scenario for baselines.
"""

from locust import HttpUser, between

from loadtests.scenarios.admin import CatalogAdminJourney, OrderFulfilmentJourney
from loadtests.scenarios.shopper import CatalogBrowsing, GuestCheckoutJourney, RegisteredShopperJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    Browsing (70%): search, product pages, home page carousels.
    Checkout (25%): registered shoppers and guests.
    Back office (5%): catalog upkeep and order fulfilment.

    Every journey runs against the same SQL provider, so checkouts and
    fulfilment compete for the product and order tables.
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        CatalogBrowsing: 14,
        RegisteredShopperJourney: 3,
        GuestCheckoutJourney: 2,
        OrderFulfilmentJourney: 1,
    }


class CatalogAdminUser(HttpUser):
    """Isolated admin writer, run alongside MixedWorkloadUser to churn the catalog."""

    wait_time = between(5.0, 10.0)
    tasks = [CatalogAdminJourney]
    fixed_count = 1
