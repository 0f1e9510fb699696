"""Rights checker: may an actor mutate an entity, judged by the entity's ACL alone."""

from __future__ import annotations

import logging

from cloudcode.application.dtos.document import Document
from cloudcode.domain.exceptions import AccessDeniedException

logger = logging.getLogger(__name__)


def check_rights(actor: Document | None, entity: Document) -> bool:
    """Return True when the actor may touch the entity.

    An entity without an ACL is open to everyone (legacy and system
    records). Otherwise the actor needs both read and write, or the ACL
    must grant both public read and public write. Read-only or
    write-only grants are not enough.
    """
    acl = entity.acl
    if acl is None:
        return True
    actor_id = actor.object_id if actor is not None else None
    if actor_id and acl.get_read_access(actor_id) and acl.get_write_access(actor_id):
        return True
    return acl.get_public_read_access() and acl.get_public_write_access()


def ensure_rights(actor: Document | None, entity: Document) -> None:
    """Raise AccessDeniedException when check_rights fails."""
    if check_rights(actor, entity):
        return
    actor_id = actor.object_id if actor is not None else None
    logger.warning(
        "Access denied: user %s on %s/%s",
        actor_id,
        entity.class_name,
        entity.object_id,
    )
    raise AccessDeniedException(entity.class_name, entity.object_id, actor_id)
