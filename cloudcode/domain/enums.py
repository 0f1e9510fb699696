"""Domain enumerations for the cloud code engine.

Enums represent fixed sets of domain values (collaboration roles, CLP verbs,
schema write methods).
"""

from enum import Enum


class Role(str, Enum):
    """Collaborator role on a site.

    Anything that is not Admin or Editor is treated as a viewer.
    """

    ADMIN = "Admin"
    EDITOR = "Editor"
    VIEWER = "Viewer"

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        """Return the role for a stored string; unknown or missing values are viewers."""
        for role in cls:
            if role.value == value:
                return role
        return cls.VIEWER

    @property
    def can_write_content(self) -> bool:
        """Admins and editors may create/update/delete content rows."""
        return self in (Role.ADMIN, Role.EDITOR)

    @property
    def is_admin(self) -> bool:
        return self is Role.ADMIN


class PermissionVerb(str, Enum):
    """Class-level permission verbs managed by the engine."""

    GET = "get"
    FIND = "find"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ADD_FIELD = "addField"

    @classmethod
    def values(cls) -> list[str]:
        """Return all verb strings in CLP order."""
        return [verb.value for verb in cls]


READ_VERBS = (PermissionVerb.GET, PermissionVerb.FIND)
WRITE_VERBS = (PermissionVerb.CREATE, PermissionVerb.UPDATE, PermissionVerb.DELETE)
ADMIN_VERBS = (PermissionVerb.ADD_FIELD,)


class SchemaMethod(str, Enum):
    """HTTP method used to write a table schema: POST creates, PUT updates."""

    CREATE = "POST"
    UPDATE = "PUT"
