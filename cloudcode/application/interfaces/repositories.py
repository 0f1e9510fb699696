"""Store interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain types only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from cloudcode.domain.enums import SchemaMethod

if TYPE_CHECKING:
    from cloudcode.application.dtos.document import Document, Pointer
    from cloudcode.application.dtos.pay_plan import PayPlan
    from cloudcode.application.dtos.query import Query
    from cloudcode.domain.value_objects.acl import ACL


# Document store interface
class IDocumentStore(Protocol):
    """Protocol for the document store. All calls run with elevated privileges."""

    async def get(self, class_name: str, object_id: str) -> Document:
        """Return the document; raise ObjectNotFoundException when missing."""

    async def fetch(self, ref: Pointer | Document) -> Document:
        """Return the current stored state of a referenced document."""

    async def find(self, query: Query) -> list[Document]:
        """Return one page of matching documents (query limit/skip apply)."""

    async def find_all(self, query: Query) -> list[Document]:
        """Return every matching document, paging until exhausted."""

    async def first(self, query: Query) -> Document | None:
        """Return the first matching document or None."""

    async def count(self, query: Query) -> int:
        """Return the number of matching documents."""

    async def save(self, document: Document) -> Document:
        """Create (no id) or update the document including its ACL; sets object_id on create."""

    async def save_acl(self, ref: Pointer | Document, acl: ACL) -> None:
        """Update only the ACL of an existing document; other fields are left untouched."""

    async def destroy(self, ref: Pointer | Document) -> None:
        """Delete the referenced document."""


# Schema administration interface
class ISchemaGateway(Protocol):
    """Protocol for the schema endpoint of dynamically named tables."""

    async def fetch_schema(self, table: str) -> dict[str, Any] | None:
        """Return the table schema, or None on any failure."""

    async def apply_schema(
        self,
        table: str,
        patch: dict[str, Any],
        method: SchemaMethod = SchemaMethod.CREATE,
    ) -> None:
        """Send a schema patch; raise SchemaOperationException on non-200."""

    async def delete_schema(self, table: str) -> None:
        """Drop the table schema; raise SchemaOperationException on non-200."""


# Pay plan lookup interface
class IPayPlanProvider(Protocol):
    """Protocol for resolving a user's subscription plan."""

    async def get_pay_plan(self, user: Document) -> PayPlan | None:
        """Return the user's plan, or None when the user has no plan."""
