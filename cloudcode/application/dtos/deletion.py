"""Deletion plan and reports for the cascading delete engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from cloudcode.application.dtos.document import Document


class DeletionStep(str, Enum):
    """Ordered stages of a model deletion; each depends on the ones before it."""

    FIELDS = "fields"
    CONTENT = "content"
    TABLE = "table"
    REFERENCES = "references"
    MODEL = "model"


@dataclass(frozen=True)
class ModelDeletionPlan:
    """Which stages to run for one model, in dependency order."""

    model: Document
    steps: tuple[DeletionStep, ...]

    @classmethod
    def build(
        cls, model: Document, delete_ref: bool = True, delete_model: bool = True
    ) -> "ModelDeletionPlan":
        steps = [DeletionStep.FIELDS, DeletionStep.CONTENT, DeletionStep.TABLE]
        if delete_ref:
            steps.append(DeletionStep.REFERENCES)
        if delete_model:
            steps.append(DeletionStep.MODEL)
        return cls(model=model, steps=tuple(steps))


@dataclass
class DeletionReport:
    """Outcome of one model deletion. Failed ids were attempted; skipped ids were not."""

    model_id: str | None
    table_name: str | None
    completed: list[DeletionStep] = field(default_factory=list)
    fields_deleted: list[str] = field(default_factory=list)
    fields_skipped: list[str] = field(default_factory=list)
    fields_failed: list[str] = field(default_factory=list)
    items_deleted: list[str] = field(default_factory=list)
    items_failed: list[str] = field(default_factory=list)
    table_dropped: bool = False
    references_pruned: int = 0


@dataclass
class SiteDeletionReport:
    """Outcome of a site teardown; per-model failures never stop siblings."""

    site_id: str | None
    models: list[DeletionReport] = field(default_factory=list)
    models_failed: list[str] = field(default_factory=list)
    collaborations_deleted: list[str] = field(default_factory=list)
    collaborations_failed: list[str] = field(default_factory=list)
