"""Collaborators of a site and the ACL/CLP seeds derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field

from cloudcode.application.dtos.document import Document, Pointer, ref_id
from cloudcode.application.dtos.query import Query
from cloudcode.application.interfaces import IDocumentStore
from cloudcode.core.constants import CLASS_COLLABORATION
from cloudcode.domain.enums import Role
from cloudcode.domain.value_objects.acl import ACL
from cloudcode.domain.value_objects.permissions import PermissionSet


@dataclass(frozen=True)
class Collaborator:
    user_id: str
    role: Role


@dataclass
class SiteCollaborators:
    """Owner plus every collaborator with a resolved user (pending invites excluded)."""

    owner_id: str | None
    members: list[Collaborator] = field(default_factory=list)

    def _ids(self, include) -> list[str]:
        ids = [self.owner_id] if self.owner_id else []
        ids.extend(m.user_id for m in self.members if include(m.role) and m.user_id not in ids)
        return ids

    @property
    def everyone(self) -> list[str]:
        return self._ids(lambda role: True)

    @property
    def writers(self) -> list[str]:
        return self._ids(lambda role: role.can_write_content)

    @property
    def admins(self) -> list[str]:
        return self._ids(lambda role: role.is_admin)

    def seed_acl(self) -> ACL:
        """Owner read+write, every collaborator read, admins write."""
        acl = ACL(self.owner_id)
        for member in self.members:
            acl.set_read_access(member.user_id, True)
            acl.set_write_access(member.user_id, member.role.is_admin)
        if self.owner_id:
            acl.grant(self.owner_id, read=True, write=True)
        return acl

    def permission_set(self) -> PermissionSet:
        """get/find to everyone, create/update/delete to writers, addField to admins."""
        return PermissionSet.for_collaborators(self.everyone, self.writers, self.admins)


async def load_site_collaborators(
    store: IDocumentStore, site_ref: Pointer | Document
) -> tuple[Document, SiteCollaborators]:
    """Refetch the site and list its collaborations."""
    site = await store.fetch(site_ref)
    collabs = await store.find_all(
        Query(CLASS_COLLABORATION).equal_to("site", site.pointer())
    )
    members = []
    for collab in collabs:
        user_id = ref_id(collab.get("user"))
        if not user_id:
            continue
        members.append(Collaborator(user_id, Role.parse(collab.get("role"))))
    return site, SiteCollaborators(ref_id(site.get("owner")), members)
