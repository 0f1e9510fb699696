"""Class-level permissions (CLP) of a dynamic content table.

Parse stores CLPs as ``{verb: {identity: true}}``. PermissionSet keeps the
six verbs the engine manages as sets of identities and carries any other
CLP keys (``count``, ``protectedFields``, pointer-permission lists) and the
non-identity entries of a verb (``pointerFields``, ``requiresAuthentication``)
through unchanged so a read-modify-write never drops settings made elsewhere.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from cloudcode.domain.enums import (
    ADMIN_VERBS,
    READ_VERBS,
    WRITE_VERBS,
    PermissionVerb,
    Role,
)

# Verb entries that are settings rather than identities.
VERB_OPTION_KEYS = frozenset({"pointerFields", "requiresAuthentication"})


@dataclass
class PermissionSet:
    """Per-verb allow-lists of user identities for one table."""

    get: set[str] = field(default_factory=set)
    find: set[str] = field(default_factory=set)
    create: set[str] = field(default_factory=set)
    update: set[str] = field(default_factory=set)
    delete: set[str] = field(default_factory=set)
    add_field: set[str] = field(default_factory=set)
    extra: dict[str, Any] = field(default_factory=dict)
    options: dict[str, dict[str, Any]] = field(default_factory=dict)

    def _bucket(self, verb: PermissionVerb) -> set[str]:
        if verb is PermissionVerb.ADD_FIELD:
            return self.add_field
        return getattr(self, verb.value)

    def add(self, verb: PermissionVerb, identity: str) -> None:
        self._bucket(verb).add(identity)

    def remove(self, verb: PermissionVerb, identity: str) -> None:
        self._bucket(verb).discard(identity)

    def grant(
        self, verbs: Iterable[PermissionVerb], identity: str, allowed: bool
    ) -> None:
        """Add identity to every verb when allowed, else remove it."""
        for verb in verbs:
            if allowed:
                self.add(verb, identity)
            else:
                self.remove(verb, identity)

    def apply_role(self, identity: str, role: Role, *, active: bool = True) -> None:
        """Grant the buckets a collaborator of this role gets; revoke all when not active.

        get/find for everyone, create/update/delete for admins and editors,
        addField for admins only.
        """
        self.grant(READ_VERBS, identity, active)
        self.grant(WRITE_VERBS, identity, active and role.can_write_content)
        self.grant(ADMIN_VERBS, identity, active and role.is_admin)

    @classmethod
    def for_collaborators(
        cls,
        everyone: Iterable[str],
        writers: Iterable[str],
        admins: Iterable[str],
    ) -> PermissionSet:
        """Fresh set for a new table from the three role-derived id lists."""
        permissions = cls()
        for identity in everyone:
            permissions.grant(READ_VERBS, identity, True)
        for identity in writers:
            permissions.grant(WRITE_VERBS, identity, True)
        for identity in admins:
            permissions.grant(ADMIN_VERBS, identity, True)
        return permissions

    @classmethod
    def from_clp(cls, clp: dict[str, Any] | None) -> PermissionSet:
        """Parse a CLP map; a missing map yields the six empty buckets."""
        permissions = cls()
        managed = set(PermissionVerb.values())
        for key, value in (clp or {}).items():
            if key not in managed:
                permissions.extra[key] = value
                continue
            if not isinstance(value, dict):
                continue
            bucket = permissions._bucket(PermissionVerb(key))
            for entry, allowed in value.items():
                if entry in VERB_OPTION_KEYS or not isinstance(allowed, bool):
                    permissions.options.setdefault(key, {})[entry] = allowed
                elif allowed:
                    bucket.add(entry)
        return permissions

    def to_clp(self) -> dict[str, Any]:
        clp: dict[str, Any] = dict(self.extra)
        for verb in PermissionVerb:
            bucket: dict[str, Any] = {identity: True for identity in sorted(self._bucket(verb))}
            bucket.update(self.options.get(verb.value, {}))
            clp[verb.value] = bucket
        return clp
