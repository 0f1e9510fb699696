"""Registry of tenant content tables: naming, provisioning, permissions and teardown.

Maps (site nameId, model name) to the physical table and owns every call
the engine makes to the schema endpoint for those tables.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from cloudcode.application.interfaces import IDocumentStore, ISchemaGateway
from cloudcode.core.constants import CLASS_MEDIA_ITEM, CLASS_SITE, FIELD_TYPE_POINTER
from cloudcode.domain.enums import SchemaMethod
from cloudcode.domain.exceptions import ObjectNotFoundException, SchemaOperationException
from cloudcode.domain.value_objects.permissions import PermissionSet

logger = logging.getLogger(__name__)

CLP_KEY = "classLevelPermissions"


async def upsert_schema(
    schemas: ISchemaGateway, table: str, patch: dict[str, Any]
) -> None:
    """Create the schema, falling back to an update when the create is rejected."""
    try:
        await schemas.apply_schema(table, patch, SchemaMethod.CREATE)
    except SchemaOperationException:
        await schemas.apply_schema(table, patch, SchemaMethod.UPDATE)


class TableRegistry:
    """Resolves and manages dynamic content tables."""

    def __init__(self, store: IDocumentStore, schemas: ISchemaGateway) -> None:
        self._store = store
        self._schemas = schemas

    async def site_name_id(self, site_id: str) -> str | None:
        """Stable short identifier of the site, or None if the site or its nameId is missing."""
        try:
            site = await self._store.get(CLASS_SITE, site_id)
        except ObjectNotFoundException:
            return None
        return site.get("nameId") or None

    async def provision(self, table: str, permissions: PermissionSet) -> None:
        """Create the table with its CLPs. Failure propagates: a model needs its table."""
        await self._schemas.apply_schema(
            table, {CLP_KEY: permissions.to_clp()}, SchemaMethod.CREATE
        )
        logger.info("Provisioned content table %s", table)

    async def permissions(self, table: str) -> PermissionSet:
        """Current CLPs, or the six empty buckets when the table has none."""
        schema = await self._schemas.fetch_schema(table)
        return PermissionSet.from_clp((schema or {}).get(CLP_KEY))

    async def update_permissions(
        self, table: str, mutate: Callable[[PermissionSet], None]
    ) -> PermissionSet:
        """Read-modify-write the table CLPs (create, then update on rejection)."""
        permissions = await self.permissions(table)
        mutate(permissions)
        await upsert_schema(self._schemas, table, {CLP_KEY: permissions.to_clp()})
        return permissions

    async def media_fields(self, table: str) -> list[str]:
        """Names of fields typed Pointer to MediaItem."""
        schema = await self._schemas.fetch_schema(table)
        fields = (schema or {}).get("fields") or {}
        return [
            name
            for name, definition in fields.items()
            if isinstance(definition, dict)
            and definition.get("type") == FIELD_TYPE_POINTER
            and definition.get("targetClass") == CLASS_MEDIA_ITEM
        ]

    async def teardown(self, table: str) -> bool:
        """Drop the table; best effort. Returns False when the store refused."""
        try:
            await self._schemas.delete_schema(table)
        except SchemaOperationException as e:
            logger.warning("Could not drop content table %s: %s", table, e)
            return False
        logger.info("Dropped content table %s", table)
        return True
