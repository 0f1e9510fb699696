"""Documents and pointers exchanged with the document store (no transport dependency)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cloudcode.domain.value_objects.acl import ACL


@dataclass(frozen=True)
class Pointer:
    """Reference to a document by class and id (Parse ``__type: Pointer``)."""

    class_name: str
    object_id: str


@dataclass
class Document:
    """A stored record: class, id, typed fields, and an optional ACL.

    ``object_id`` is None until the store has created the record. Field
    values are plain JSON types, ``datetime``, ``Pointer`` or nested
    ``Document`` (when the store returned an included object).
    """

    class_name: str
    object_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    acl: ACL | None = None

    @property
    def is_new(self) -> bool:
        return self.object_id is None

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def pointer(self) -> Pointer:
        if self.object_id is None:
            raise ValueError(f"Unsaved {self.class_name} has no pointer")
        return Pointer(self.class_name, self.object_id)

    def get_ref(self, key: str) -> Pointer | None:
        """Return the field as a Pointer whether it holds a Pointer or an included Document."""
        value = self.data.get(key)
        if isinstance(value, Pointer):
            return value
        if isinstance(value, Document) and value.object_id:
            return value.pointer()
        return None

    def ensure_acl(self, owner_id: str | None) -> ACL:
        """Return the ACL, seeding it owner-only when absent."""
        if self.acl is None:
            self.acl = ACL(owner_id)
        return self.acl


def ref_id(value: Any) -> str | None:
    """Object id of a Pointer or Document value, else None."""
    if isinstance(value, (Pointer, Document)):
        return value.object_id
    return None
