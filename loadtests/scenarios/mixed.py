"""Mixed cross-domain workload scenario.

Combines journeys from the three bounded contexts with weights that
model a marketplace's traffic. This is the recommended scenario for
load baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.catalogue import ProductLifecycleJourney
from loadtests.scenarios.ordering import (
    AbandonmentAnalyticsJourney,
    CartAbandonmentJourney,
    SplitCheckoutJourney,
)
from loadtests.scenarios.payments import InstallmentJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload simulating concurrent marketplace activity.

    Catalogue (15%): sellers maintaining listings.
    Ordering (60%): browsing with abandonment is the most common path,
    followed by split checkouts.
    Payments (20%): installment plans on fresh orders.
    Back office (5%): abandonment sweeps and reports.
    """

    wait_time = between(1, 5)

    tasks = {
        ProductLifecycleJourney: 15,
        CartAbandonmentJourney: 35,
        SplitCheckoutJourney: 25,
        InstallmentJourney: 20,
        AbandonmentAnalyticsJourney: 5,
    }
