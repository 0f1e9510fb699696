"""Domain value objects and shared value types."""

from cloudcode.domain.value_objects.acl import ACL
from cloudcode.domain.value_objects.permissions import PermissionSet
from cloudcode.domain.value_objects.table_name import TableName

__all__ = [
    "ACL",
    "PermissionSet",
    "TableName",
]
