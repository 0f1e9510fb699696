"""Domain layer: value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from cloudcode.domain.enums import PermissionVerb, Role, SchemaMethod
from cloudcode.domain.exceptions import (
    AccessDeniedException,
    AuthenticationException,
    CloudCodeException,
    ObjectNotFoundException,
    SchemaOperationException,
    SitesLimitExceededException,
    StoreRequestException,
    ValidationException,
)
from cloudcode.domain.value_objects import ACL, PermissionSet, TableName

__all__ = [
    # Enums
    "PermissionVerb",
    "Role",
    "SchemaMethod",
    # Exceptions
    "AccessDeniedException",
    "AuthenticationException",
    "CloudCodeException",
    "ObjectNotFoundException",
    "SchemaOperationException",
    "SitesLimitExceededException",
    "StoreRequestException",
    "ValidationException",
    # Value objects
    "ACL",
    "PermissionSet",
    "TableName",
]
