"""Pay plan read-model used by the site limit check."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PayPlan:
    """Subscription plan of a user. ``limit_sites`` of None or 0 means unlimited."""

    id: str
    limit_sites: int | None = None
