"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (document store, schema gateway, task queue).
"""

from cloudcode.application.interfaces import (
    IDocumentStore,
    IPayPlanProvider,
    ISchemaGateway,
    ITaskQueue,
)
from cloudcode.application.services import (
    AclPropagationService,
    CascadeDeleteService,
    ProvisioningService,
    TableRegistry,
)
from cloudcode.application.use_cases import CloudHooks

__all__ = [
    "AclPropagationService",
    "CascadeDeleteService",
    "CloudHooks",
    "IDocumentStore",
    "IPayPlanProvider",
    "ISchemaGateway",
    "ITaskQueue",
    "ProvisioningService",
    "TableRegistry",
]
