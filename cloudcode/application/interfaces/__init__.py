"""Application interfaces (ports). Infrastructure implements these protocols."""

from cloudcode.application.interfaces.repositories import (
    IDocumentStore,
    IPayPlanProvider,
    ISchemaGateway,
)
from cloudcode.application.interfaces.services import (
    IContentHookClient,
    IEmailSender,
    ITaskQueue,
    JobFactory,
)

__all__ = [
    "IContentHookClient",
    "IDocumentStore",
    "IEmailSender",
    "IPayPlanProvider",
    "ISchemaGateway",
    "ITaskQueue",
    "JobFactory",
]
