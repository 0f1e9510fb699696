"""Application services: rights checks, ACL propagation, cascading deletes, provisioning."""

from cloudcode.application.services.acl_propagation import AclPropagationService
from cloudcode.application.services.cascade_delete import CascadeDeleteService
from cloudcode.application.services.collaborators import (
    Collaborator,
    SiteCollaborators,
    load_site_collaborators,
)
from cloudcode.application.services.provisioning import (
    ProvisioningService,
    normalize_username,
)
from cloudcode.application.services.rights_checker import check_rights, ensure_rights
from cloudcode.application.services.table_registry import TableRegistry, upsert_schema

__all__ = [
    "AclPropagationService",
    "CascadeDeleteService",
    "Collaborator",
    "ProvisioningService",
    "SiteCollaborators",
    "TableRegistry",
    "check_rights",
    "ensure_rights",
    "load_site_collaborators",
    "normalize_username",
    "upsert_schema",
]
