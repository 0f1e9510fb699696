"""Cloud functions and triggers Parse Server calls through its webhooks.

One entry point per function name and per (trigger, class) pair. Triggers
on site-owned classes are skipped for master-key requests, which are how
the engine itself writes.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import urlencode

from cloudcode.application.dtos.document import Document
from cloudcode.application.dtos.hook import HookRequest
from cloudcode.application.interfaces import IContentHookClient, IEmailSender
from cloudcode.application.services.acl_propagation import AclPropagationService
from cloudcode.application.services.cascade_delete import CascadeDeleteService
from cloudcode.application.services.provisioning import (
    ProvisioningService,
    normalize_username,
)
from cloudcode.application.services.rights_checker import ensure_rights
from cloudcode.application.services.table_registry import TableRegistry
from cloudcode.core.constants import (
    CLASS_COLLABORATION,
    CLASS_MEDIA_ITEM,
    CLASS_MODEL,
    CLASS_MODEL_FIELD,
    CLASS_SITE,
    CLASS_USER,
)
from cloudcode.domain.exceptions import (
    AuthenticationException,
    CloudCodeException,
    StoreRequestException,
    ValidationException,
)
from cloudcode.domain.value_objects.table_name import TableName

logger = logging.getLogger(__name__)

BEFORE_SAVE = "beforeSave"
AFTER_SAVE = "afterSave"
BEFORE_DELETE = "beforeDelete"

INVITE_TEMPLATE = "inviteEmail"

Handler = Callable[[HookRequest], Awaitable[Any]]


def _require_user(request: HookRequest) -> Document:
    if request.user is None or request.user.object_id is None:
        raise AuthenticationException()
    return request.user


def _require_object(request: HookRequest) -> Document:
    if request.obj is None:
        raise ValidationException("Trigger request has no object", field="object")
    return request.obj


class CloudHooks:
    """Dispatches webhook calls to the engine services."""

    def __init__(
        self,
        registry: TableRegistry,
        propagation: AclPropagationService,
        cascade: CascadeDeleteService,
        provisioning: ProvisioningService,
        content_hooks: IContentHookClient,
        mailer: IEmailSender,
        site_url: str = "",
    ) -> None:
        self.registry = registry
        self.propagation = propagation
        self.cascade = cascade
        self.provisioning = provisioning
        self.content_hooks = content_hooks
        self.mailer = mailer
        self.site_url = site_url.rstrip("/")
        self._functions: dict[str, Handler] = {
            "deleteContentItem": self.delete_content_item,
            "getSiteNameId": self.get_site_name_id,
            "inviteUser": self.invite_user,
            "onContentModify": self.on_content_modify,
        }
        self._triggers: dict[tuple[str, str], Handler] = {
            (BEFORE_SAVE, CLASS_SITE): self.before_save_site,
            (BEFORE_DELETE, CLASS_SITE): self.before_delete_site,
            (BEFORE_SAVE, CLASS_MODEL): self.before_save_model,
            (BEFORE_DELETE, CLASS_MODEL): self.before_delete_model,
            (BEFORE_SAVE, CLASS_MODEL_FIELD): self.before_save_model_field,
            (BEFORE_SAVE, CLASS_MEDIA_ITEM): self.before_save_media_item,
            (BEFORE_SAVE, CLASS_COLLABORATION): self.before_save_collaboration,
            (BEFORE_DELETE, CLASS_COLLABORATION): self.before_delete_collaboration,
            (BEFORE_SAVE, CLASS_USER): self.before_save_user,
            (AFTER_SAVE, CLASS_USER): self.after_save_user,
        }

    @property
    def functions(self) -> list[str]:
        return sorted(self._functions)

    @property
    def triggers(self) -> list[tuple[str, str]]:
        return sorted(self._triggers)

    async def run_function(self, name: str, request: HookRequest) -> Any:
        handler = self._functions.get(name)
        if handler is None:
            raise ValidationException(f"Unknown cloud function: {name}", field="functionName")
        return await handler(request)

    async def run_trigger(self, trigger: str, class_name: str, request: HookRequest) -> Any:
        """Run a trigger. beforeSave handlers return the object Parse should persist."""
        handler = self._triggers.get((trigger, class_name))
        if handler is None:
            raise ValidationException(
                f"No {trigger} trigger for {class_name}", field="triggerName"
            )
        return await handler(request)

    # Functions

    async def delete_content_item(self, request: HookRequest) -> str:
        user = _require_user(request)
        table_name = request.params.get("tableName")
        item_id = request.params.get("itemId")
        if not table_name or not item_id:
            raise ValidationException("There is no tableName or itemId params!")
        try:
            TableName.parse(table_name)
        except ValueError as e:
            raise ValidationException(str(e), field="tableName") from e
        try:
            await self.cascade.delete_content_item(user, table_name, item_id)
        except CloudCodeException as e:
            raise CloudCodeException(
                f"Could not delete content item: {e.message}", e.error_code, e.details
            ) from e
        return "Successfully deleted content item."

    async def get_site_name_id(self, request: HookRequest) -> dict[str, Any]:
        site_id = request.params.get("siteId")
        if not site_id:
            return {"status": "error", "error": "There is no siteId param!"}
        try:
            site_name_id = await self.registry.site_name_id(site_id)
        except StoreRequestException as e:
            logger.error("Could not resolve nameId of site %s: %s", site_id, e)
            return {"status": "error", "error": e.message}
        if site_name_id is None:
            return {"status": "error", "error": f"Site {site_id} has no nameId"}
        return {"status": "success", "siteNameId": site_name_id}

    async def on_content_modify(self, request: HookRequest) -> Any:
        _require_user(request)
        url = request.params.get("URL")
        if not url:
            return "Warning! There is no content hook!"
        return await self.content_hooks.call(url)

    async def invite_user(self, request: HookRequest) -> str:
        """Email a register link to someone invited to collaborate on a site.

        The pending Collaboration (email, no user) is saved by the client;
        after_save_user attaches the account once they register.
        """
        user = _require_user(request)
        email = request.params.get("email")
        site_name = request.params.get("siteName")
        if not email or not site_name:
            raise ValidationException("Email or siteName is empty!")
        query = urlencode({"mode": "register", "email": email}, safe="@")
        logger.info("Sending invite to %s for site %s", email, site_name)
        await self.mailer.send_template(
            INVITE_TEMPLATE,
            email,
            {
                "siteName": site_name,
                "emailSelf": user.get("email"),
                "link": f"{self.site_url}/sign?{query}",
            },
        )
        return "Invite email sent!"

    # Site

    async def before_save_site(self, request: HookRequest) -> Document | None:
        site = _require_object(request)
        if request.master:
            return None
        await self.provisioning.check_site_limit(request.user, site)
        return site

    async def before_delete_site(self, request: HookRequest) -> None:
        if request.master:
            return
        await self.cascade.delete_site(request.user, _require_object(request))

    # Model

    async def before_save_model(self, request: HookRequest) -> Document | None:
        model = _require_object(request)
        if request.master or not model.is_new:
            return None
        return await self.provisioning.provision_model(model)

    async def before_delete_model(self, request: HookRequest) -> None:
        """Cascade everything but the model record, which Parse deletes itself."""
        if request.master:
            return
        try:
            await self.cascade.delete_model(
                request.user, _require_object(request), delete_ref=True, delete_model=False
            )
        except CloudCodeException as e:
            raise CloudCodeException(
                f"Could not delete model: {e.message}", e.error_code, e.details
            ) from e

    # Field and media

    async def before_save_model_field(self, request: HookRequest) -> Document | None:
        field = _require_object(request)
        if request.master or not field.is_new:
            return None
        return await self.provisioning.seed_field_acl(field)

    async def before_save_media_item(self, request: HookRequest) -> Document | None:
        item = _require_object(request)
        if request.master or not item.is_new:
            return None
        return await self.provisioning.seed_media_item_acl(item)

    # Collaboration

    async def before_save_collaboration(self, request: HookRequest) -> Document | None:
        collab = _require_object(request)
        if request.master:
            return None
        ensure_rights(request.user, collab)
        await self.propagation.on_collaboration_modify(collab)
        return collab

    async def before_delete_collaboration(self, request: HookRequest) -> None:
        collab = _require_object(request)
        if request.master:
            return
        ensure_rights(request.user, collab)
        await self.propagation.on_collaboration_modify(collab, deleting=True)

    # User

    async def before_save_user(self, request: HookRequest) -> Document:
        return normalize_username(_require_object(request))

    async def after_save_user(self, request: HookRequest) -> None:
        await self.propagation.resolve_pending_collaborations(_require_object(request))
