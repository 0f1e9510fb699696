"""First-save provisioning of site-owned entities and the site count limit."""

from __future__ import annotations

import logging

from cloudcode.application.dtos.document import Document
from cloudcode.application.dtos.query import Query
from cloudcode.application.interfaces import IDocumentStore, IPayPlanProvider
from cloudcode.application.services.collaborators import load_site_collaborators
from cloudcode.application.services.table_registry import TableRegistry
from cloudcode.core.constants import CLASS_SITE
from cloudcode.domain.exceptions import (
    AuthenticationException,
    SitesLimitExceededException,
    ValidationException,
)
from cloudcode.domain.value_objects.table_name import TableName
from cloudcode.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)


class ProvisioningService:
    """Seeds ACLs and table permissions for newly created site entities."""

    def __init__(
        self,
        store: IDocumentStore,
        registry: TableRegistry,
        pay_plans: IPayPlanProvider,
    ) -> None:
        self._store = store
        self._registry = registry
        self._pay_plans = pay_plans

    async def check_site_limit(self, user: Document | None, site: Document) -> None:
        """Reject a new site when the owner's pay plan limit is already met.

        Updates of existing sites always pass. A missing plan, or a plan
        without a positive limit, means unlimited.
        """
        if not site.is_new:
            return
        if user is None or user.object_id is None:
            raise AuthenticationException("Must be signed in to save sites.")
        plan = await self._pay_plans.get_pay_plan(user)
        if plan is None or not plan.limit_sites or plan.limit_sites <= 0:
            return
        sites = await self._store.count(
            Query(CLASS_SITE).equal_to("owner", user.pointer())
        )
        if sites >= plan.limit_sites:
            logger.info(
                "User %s reached the site limit (%s of %s)",
                user.object_id,
                sites,
                plan.limit_sites,
            )
            raise SitesLimitExceededException(user.object_id, plan.limit_sites)

    async def _table_name(self, model: Document, site: Document) -> str:
        table = model.get("tableName")
        if table:
            return table
        site_name_id = site.get("nameId")
        name_id = model.get("nameId")
        if not site_name_id or not name_id:
            raise ValidationException("Model has no tableName to provision", field="tableName")
        table = TableName(site_name_id, name_id).physical
        model.set("tableName", table)
        return table

    @traced("provisioning.provision_model")
    async def provision_model(self, model: Document) -> Document:
        """Seed the model ACL and push matching table permissions.

        The table push is awaited: a model whose table cannot be created
        must not be saved.
        """
        site_ref = model.get_ref("site")
        if site_ref is None:
            raise ValidationException("Model must belong to a site", field="site")
        site, collaborators = await load_site_collaborators(self._store, site_ref)
        model.acl = collaborators.seed_acl()

        table = await self._table_name(model, site)
        add_span_attributes(table=table, count=len(collaborators.members))
        await self._registry.provision(table, collaborators.permission_set())
        return model

    async def seed_field_acl(self, field: Document) -> Document:
        """Seed a new field's ACL from the collaborators of its model's site."""
        model_ref = field.get_ref("model")
        if model_ref is None:
            raise ValidationException("Field must belong to a model", field="model")
        model = await self._store.fetch(model_ref)
        site_ref = model.get_ref("site")
        if site_ref is None:
            raise ValidationException("Model must belong to a site", field="site")
        _, collaborators = await load_site_collaborators(self._store, site_ref)
        field.acl = collaborators.seed_acl()
        return field

    async def seed_media_item_acl(self, item: Document) -> Document:
        site_ref = item.get_ref("site")
        if site_ref is None:
            raise ValidationException("Media item must belong to a site", field="site")
        _, collaborators = await load_site_collaborators(self._store, site_ref)
        item.acl = collaborators.seed_acl()
        return item


def normalize_username(user: Document) -> Document:
    """Keep username equal to email."""
    email = user.get("email")
    if email and user.get("username") != email:
        user.set("username", email)
    return user
