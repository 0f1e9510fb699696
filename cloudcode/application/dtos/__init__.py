"""Application DTOs (no transport dependency)."""

from cloudcode.application.dtos.deletion import (
    DeletionReport,
    DeletionStep,
    ModelDeletionPlan,
    SiteDeletionReport,
)
from cloudcode.application.dtos.document import Document, Pointer, ref_id
from cloudcode.application.dtos.hook import HookRequest
from cloudcode.application.dtos.pay_plan import PayPlan
from cloudcode.application.dtos.query import Query

__all__ = [
    "DeletionReport",
    "DeletionStep",
    "Document",
    "HookRequest",
    "ModelDeletionPlan",
    "PayPlan",
    "Pointer",
    "Query",
    "SiteDeletionReport",
    "ref_id",
]
