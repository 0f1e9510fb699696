"""Parse-backed pay plan lookup: follows the user's payPlan pointer."""

from __future__ import annotations

import logging

from cloudcode.application.dtos.document import Document
from cloudcode.application.dtos.pay_plan import PayPlan
from cloudcode.application.interfaces import IDocumentStore
from cloudcode.domain.exceptions import ObjectNotFoundException

logger = logging.getLogger(__name__)

PAY_PLAN_FIELD = "payPlan"
LIMIT_SITES_FIELD = "limitSites"


class ParsePayPlanProvider:
    """Implements IPayPlanProvider from User.payPlan -> PayPlan.limitSites."""

    def __init__(self, store: IDocumentStore) -> None:
        self._store = store

    async def get_pay_plan(self, user: Document) -> PayPlan | None:
        ref = user.get_ref(PAY_PLAN_FIELD)
        if ref is None and user.object_id is not None:
            # Webhook payloads may carry a partial user; reload before giving up.
            try:
                ref = (await self._store.fetch(user)).get_ref(PAY_PLAN_FIELD)
            except ObjectNotFoundException:
                return None
        if ref is None:
            return None
        try:
            plan = await self._store.fetch(ref)
        except ObjectNotFoundException:
            logger.warning("User %s points at missing pay plan %s", user.object_id, ref.object_id)
            return None
        limit = plan.get(LIMIT_SITES_FIELD)
        return PayPlan(id=ref.object_id, limit_sites=int(limit) if limit else None)
