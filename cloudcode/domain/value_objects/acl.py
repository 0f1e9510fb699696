"""Row-level access control list attached to every stored document.

Mirrors the Parse ACL wire shape: a map of identity to ``{"read": bool,
"write": bool}`` where the identity is a user id or ``"*"`` for public
access. Granting ``False`` removes the flag rather than storing it, so an
identity with no remaining flags disappears from the map.
"""

from __future__ import annotations

from typing import Any

from cloudcode.core.constants import PUBLIC_ACL_KEY

_READ = "read"
_WRITE = "write"


class ACL:
    """Mutable per-identity read/write grants.

    ``ACL(owner_id)`` starts with the owner holding read and write, the
    same seed the platform uses for every owned entity.
    """

    def __init__(self, owner_id: str | None = None) -> None:
        self._permissions: dict[str, dict[str, bool]] = {}
        if owner_id:
            self.set_read_access(owner_id, True)
            self.set_write_access(owner_id, True)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ACL:
        """Build from the wire shape; falsy flags are dropped."""
        acl = cls()
        for identity, flags in (data or {}).items():
            if not isinstance(flags, dict):
                continue
            if flags.get(_READ):
                acl.set_read_access(identity, True)
            if flags.get(_WRITE):
                acl.set_write_access(identity, True)
        return acl

    def to_dict(self) -> dict[str, dict[str, bool]]:
        return {identity: dict(flags) for identity, flags in self._permissions.items()}

    def copy(self) -> ACL:
        return ACL.from_dict(self.to_dict())

    def _set(self, identity: str, flag: str, allowed: bool) -> None:
        if allowed:
            self._permissions.setdefault(identity, {})[flag] = True
            return
        flags = self._permissions.get(identity)
        if flags is None:
            return
        flags.pop(flag, None)
        if not flags:
            del self._permissions[identity]

    def _get(self, identity: str, flag: str) -> bool:
        return bool(self._permissions.get(identity, {}).get(flag, False))

    def set_read_access(self, identity: str, allowed: bool) -> None:
        self._set(identity, _READ, allowed)

    def set_write_access(self, identity: str, allowed: bool) -> None:
        self._set(identity, _WRITE, allowed)

    def get_read_access(self, identity: str) -> bool:
        return self._get(identity, _READ)

    def get_write_access(self, identity: str) -> bool:
        return self._get(identity, _WRITE)

    def set_public_read_access(self, allowed: bool) -> None:
        self.set_read_access(PUBLIC_ACL_KEY, allowed)

    def set_public_write_access(self, allowed: bool) -> None:
        self.set_write_access(PUBLIC_ACL_KEY, allowed)

    def get_public_read_access(self) -> bool:
        return self.get_read_access(PUBLIC_ACL_KEY)

    def get_public_write_access(self) -> bool:
        return self.get_write_access(PUBLIC_ACL_KEY)

    def grant(self, identity: str, *, read: bool, write: bool) -> None:
        """Set both flags for one identity."""
        self.set_read_access(identity, read)
        self.set_write_access(identity, write)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ACL):
            return NotImplemented
        return self._permissions == other._permissions

    def __repr__(self) -> str:
        return f"ACL({self._permissions!r})"
