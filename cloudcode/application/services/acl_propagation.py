"""ACL propagation: keep a site's permissions in line with its collaborations.

A collaboration change (role assigned, role changed, collaborator removed)
rewrites the ACL of every entity the site owns and the class-level
permissions of every content table. Entity saves and table updates are
fire-and-forget through the background queue, so ACL state is eventually
consistent once this returns; concurrent changes on one site are
last-write-wins.
"""

from __future__ import annotations

import logging
from functools import partial

from cloudcode.application.dtos.document import Document, ref_id
from cloudcode.application.dtos.query import Query
from cloudcode.application.interfaces import IDocumentStore, ITaskQueue
from cloudcode.application.services.table_registry import TableRegistry
from cloudcode.core.constants import (
    CLASS_COLLABORATION,
    CLASS_MEDIA_ITEM,
    CLASS_MODEL,
    CLASS_MODEL_FIELD,
)
from cloudcode.domain.enums import Role
from cloudcode.shared.telemetry.tracing import add_span_attributes, traced
from cloudcode.shared.utils.concurrency import failed, settle

logger = logging.getLogger(__name__)


class AclPropagationService:
    """Propagates one collaborator's grants across everything a site owns."""

    def __init__(
        self,
        store: IDocumentStore,
        registry: TableRegistry,
        tasks: ITaskQueue,
    ) -> None:
        self._store = store
        self._registry = registry
        self._tasks = tasks

    async def _save_later(self, document: Document) -> None:
        # ACL only: the other fields were read before the queue runs the write.
        await self._tasks.submit(
            partial(self._store.save_acl, document.pointer(), document.acl.copy()),
            f"save ACL of {document.class_name}/{document.object_id}",
        )

    @traced("acl.on_collaboration_modify")
    async def on_collaboration_modify(
        self, collab: Document, deleting: bool = False
    ) -> None:
        """Recompute grants for the collaboration's user.

        The collaboration's own ACL is updated in place and not saved: the
        caller is the beforeSave/beforeDelete trigger (Parse persists the
        object) or resolve_pending_collaborations (saves it afterwards).
        Pending invites (no user yet) are ignored.
        """
        user_ref = collab.get_ref("user")
        site_ref = collab.get_ref("site")
        if user_ref is None or site_ref is None:
            return
        user_id = user_ref.object_id
        role = Role.parse(collab.get("role"))
        add_span_attributes(user_id=user_id, role=role.value, deleting=deleting)

        site = await self._store.fetch(site_ref)
        owner_id = ref_id(site.get("owner"))
        collab_acl = collab.ensure_acl(owner_id)

        siblings = await self._store.find_all(
            Query(CLASS_COLLABORATION)
            .equal_to("site", site.pointer())
            .not_equal_to("user", user_ref)
        )
        for sibling in siblings:
            if collab.object_id is not None and sibling.object_id == collab.object_id:
                continue
            # This user's visibility of the sibling's record: write only when this user is Admin.
            sibling_acl = sibling.ensure_acl(owner_id)
            sibling_acl.set_read_access(user_id, not deleting)
            sibling_acl.set_write_access(user_id, not deleting and role.is_admin)
            await self._save_later(sibling)

            if deleting:
                continue
            sibling_user = ref_id(sibling.get("user"))
            if not sibling_user:
                continue
            # The sibling's visibility of this record: only sibling admins see it.
            sibling_is_admin = Role.parse(sibling.get("role")).is_admin
            collab_acl.grant(sibling_user, read=sibling_is_admin, write=sibling_is_admin)

        collab_acl.grant(user_id, read=True, write=True)

        read = not deleting
        write = not deleting and role.is_admin

        site.ensure_acl(owner_id).grant(user_id, read=read, write=write)
        await self._save_later(site)

        media_items = await self._store.find_all(
            Query(CLASS_MEDIA_ITEM).equal_to("site", site.pointer())
        )
        for item in media_items:
            item.ensure_acl(owner_id).grant(user_id, read=read, write=write)
            await self._save_later(item)

        models = await self._store.find_all(
            Query(CLASS_MODEL).equal_to("site", site.pointer())
        )
        for model in models:
            model.ensure_acl(owner_id).grant(user_id, read=read, write=write)
            await self._save_later(model)
            table = model.get("tableName")
            if table:
                await self._tasks.submit(
                    partial(self._sync_table_permissions, table, user_id, role, deleting),
                    f"sync class-level permissions of {table} for {user_id}",
                )

        fields: list[Document] = []
        if models:
            fields = await self._store.find_all(
                Query(CLASS_MODEL_FIELD).contained_in(
                    "model", [model.pointer() for model in models]
                )
            )
        for field in fields:
            field.ensure_acl(owner_id).grant(user_id, read=read, write=write)
            await self._save_later(field)

        logger.info(
            "Propagated %s %s on site %s: %s siblings, %s media, %s models, %s fields",
            "removal of" if deleting else "grants for",
            user_id,
            site.object_id,
            len(siblings),
            len(media_items),
            len(models),
            len(fields),
        )

    async def _sync_table_permissions(
        self, table: str, user_id: str, role: Role, deleting: bool
    ) -> None:
        await self._registry.update_permissions(
            table,
            lambda permissions: permissions.apply_role(user_id, role, active=not deleting),
        )

    @traced("acl.resolve_pending_collaborations")
    async def resolve_pending_collaborations(self, user: Document) -> list[Document]:
        """Attach a newly saved user to invites sent to their email, then propagate.

        Propagation failures are logged and do not stop the other invites;
        failing to save the resolved collaboration is raised.
        """
        email = user.get("email")
        if not email or user.object_id is None:
            return []
        collabs = await self._store.find_all(
            Query(CLASS_COLLABORATION).equal_to("email", email)
        )
        resolved: list[Document] = []
        for collab in collabs:
            if collab.get_ref("user") is not None:
                continue
            collab.set("user", user.pointer())
            collab.set("email", "")
            result = await settle(
                self.on_collaboration_modify(collab),
                f"propagation for invite {collab.object_id}",
            )
            if failed(result):
                logger.warning("Invite %s resolved without full propagation", collab.object_id)
            await self._store.save(collab)
            resolved.append(collab)
        if resolved:
            logger.info("Resolved %s pending invites for user %s", len(resolved), user.object_id)
        return resolved
