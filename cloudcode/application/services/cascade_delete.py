"""Cascading deletes across a tenant's models, content rows, media and collaborations.

The store has no foreign keys or multi-document transactions, so deletion
follows an explicit plan (fields, content rows, table, cross-references,
model) and records what each stage did. An access-denied on a guarded
entity aborts the whole call; nothing already destroyed is restored.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any

from cloudcode.application.dtos.deletion import (
    DeletionReport,
    DeletionStep,
    ModelDeletionPlan,
    SiteDeletionReport,
)
from cloudcode.application.dtos.document import Document, ref_id
from cloudcode.application.dtos.query import Query
from cloudcode.application.interfaces import IDocumentStore, ITaskQueue
from cloudcode.application.services.rights_checker import check_rights, ensure_rights
from cloudcode.application.services.table_registry import TableRegistry
from cloudcode.core.constants import (
    CLASS_COLLABORATION,
    CLASS_MODEL,
    CLASS_MODEL_FIELD,
    DRAFT_OWNER_FIELD,
    FIELD_TYPE_REFERENCE,
)
from cloudcode.shared.telemetry.tracing import add_span_attributes, traced
from cloudcode.shared.utils.concurrency import failed, settle

logger = logging.getLogger(__name__)


def _prune_reference(validations: Any, name_id: str) -> bool:
    """Remove name_id from validations.models.modelsList in place.

    Returns False (and leaves the payload alone) when the payload is not
    an active, well-formed models validation or does not list name_id.
    """
    if not isinstance(validations, dict):
        return False
    models = validations.get("models")
    if not isinstance(models, dict) or not models.get("active"):
        return False
    models_list = models.get("modelsList")
    if not isinstance(models_list, list) or name_id not in models_list:
        return False
    models["modelsList"] = [entry for entry in models_list if entry != name_id]
    return True


class CascadeDeleteService:
    """Deletes content items, models and whole sites with their dependents."""

    def __init__(
        self,
        store: IDocumentStore,
        registry: TableRegistry,
        tasks: ITaskQueue,
    ) -> None:
        self._store = store
        self._registry = registry
        self._tasks = tasks

    async def _destroy_media_later(self, row: Document, media_fields: list[str]) -> None:
        """Queue destruction of every MediaItem the row points at; not awaited."""
        for name in media_fields:
            ref = row.get_ref(name)
            if ref is None:
                continue
            await self._tasks.submit(
                partial(self._store.destroy, ref),
                f"destroy {ref.class_name}/{ref.object_id} of {row.class_name}/{row.object_id}",
            )

    @traced("cascade.delete_content_item")
    async def delete_content_item(
        self, actor: Document | None, table_name: str, item_id: str
    ) -> None:
        """Delete a published row, its draft, and the media both point at.

        The draft is removed before the published row so it can never
        outlive it. Media destroys are fire-and-forget.
        """
        item = await self._store.get(table_name, item_id)
        ensure_rights(actor, item)

        media_fields = await self._registry.media_fields(table_name)
        await self._destroy_media_later(item, media_fields)

        draft = await self._store.first(
            Query(table_name).equal_to(DRAFT_OWNER_FIELD, item.pointer())
        )
        if draft is not None:
            ensure_rights(actor, draft)
            await self._destroy_media_later(draft, media_fields)
            await self._store.destroy(draft)

        await self._store.destroy(item)

    async def delete_model(
        self,
        actor: Document | None,
        model: Document,
        delete_ref: bool = True,
        delete_model: bool = True,
    ) -> DeletionReport:
        """Delete a model's fields, rows and table; optionally its references and itself."""
        return await self.execute(actor, ModelDeletionPlan.build(model, delete_ref, delete_model))

    @traced("cascade.execute_model_plan")
    async def execute(
        self, actor: Document | None, plan: ModelDeletionPlan
    ) -> DeletionReport:
        """Run the plan's steps in order; an access-denied on the model aborts before any step."""
        model = plan.model
        ensure_rights(actor, model)
        report = DeletionReport(model_id=model.object_id, table_name=model.get("tableName"))
        add_span_attributes(id=str(model.object_id), count=len(plan.steps))

        for step in plan.steps:
            if step is DeletionStep.FIELDS:
                await self._delete_fields(actor, model, report)
            elif step is DeletionStep.CONTENT:
                await self._delete_content(actor, report)
            elif step is DeletionStep.TABLE:
                if report.table_name:
                    report.table_dropped = await self._registry.teardown(report.table_name)
            elif step is DeletionStep.REFERENCES:
                await self._prune_references(model, report)
            elif step is DeletionStep.MODEL:
                await self._store.destroy(model)
            report.completed.append(step)

        logger.info(
            "Deleted model %s: %s fields (%s skipped, %s failed), %s rows (%s failed), "
            "table dropped=%s, %s references pruned",
            model.object_id,
            len(report.fields_deleted),
            len(report.fields_skipped),
            len(report.fields_failed),
            len(report.items_deleted),
            len(report.items_failed),
            report.table_dropped,
            report.references_pruned,
        )
        return report

    async def _delete_fields(
        self, actor: Document | None, model: Document, report: DeletionReport
    ) -> None:
        fields = await self._store.find_all(
            Query(CLASS_MODEL_FIELD).equal_to("model", model.pointer())
        )
        allowed: list[Document] = []
        for field in fields:
            if check_rights(actor, field):
                allowed.append(field)
            else:
                report.fields_skipped.append(field.object_id)
        results = await asyncio.gather(
            *(settle(self._store.destroy(f), f"destroy ModelField {f.object_id}") for f in allowed)
        )
        for field, result in zip(allowed, results):
            (report.fields_failed if failed(result) else report.fields_deleted).append(
                field.object_id
            )

    async def _delete_content(self, actor: Document | None, report: DeletionReport) -> None:
        table = report.table_name
        if not table:
            return
        rows = await self._store.find_all(Query(table))
        row_ids = {row.object_id for row in rows}
        # Drafts whose published row is in this batch go with it; orphans are deleted directly.
        targets = [
            row for row in rows if ref_id(row.get(DRAFT_OWNER_FIELD)) not in row_ids
        ]
        results = await asyncio.gather(
            *(
                settle(
                    self.delete_content_item(actor, table, row.object_id),
                    f"delete {table}/{row.object_id}",
                )
                for row in targets
            )
        )
        for row, result in zip(targets, results):
            (report.items_failed if failed(result) else report.items_deleted).append(
                row.object_id
            )

    async def _prune_references(self, model: Document, report: DeletionReport) -> None:
        """Drop this model's nameId from Reference fields of the site's other models."""
        name_id = model.get("nameId")
        site = model.get("site")
        if not name_id or site is None:
            return
        models = await self._store.find_all(Query(CLASS_MODEL).equal_to("site", site))
        if not models:
            return
        fields = await self._store.find_all(
            Query(CLASS_MODEL_FIELD)
            .contained_in("model", [m.pointer() for m in models])
            .not_equal_to("model", model.pointer())
            .equal_to("type", FIELD_TYPE_REFERENCE)
        )
        changed = [f for f in fields if _prune_reference(f.get("validations"), name_id)]
        results = await asyncio.gather(
            *(settle(self._store.save(f), f"prune reference on ModelField {f.object_id}") for f in changed)
        )
        report.references_pruned = sum(1 for result in results if not failed(result))

    @traced("cascade.delete_site")
    async def delete_site(self, actor: Document | None, site: Document) -> SiteDeletionReport:
        """Tear down every model (without reference pruning) and every collaboration.

        Per-model and per-collaboration failures are logged and reported
        but never stop their siblings.
        """
        ensure_rights(actor, site)
        report = SiteDeletionReport(site_id=site.object_id)

        models = await self._store.find_all(Query(CLASS_MODEL).equal_to("site", site.pointer()))
        results = await asyncio.gather(
            *(
                settle(self.delete_model(actor, m, delete_ref=False), f"delete model {m.object_id}")
                for m in models
            )
        )
        for model, result in zip(models, results):
            if failed(result):
                report.models_failed.append(model.object_id)
            else:
                report.models.append(result)

        collabs = await self._store.find_all(
            Query(CLASS_COLLABORATION).equal_to("site", site.pointer())
        )
        results = await asyncio.gather(
            *(
                settle(self._store.destroy(c), f"destroy Collaboration {c.object_id}")
                for c in collabs
            )
        )
        for collab, result in zip(collabs, results):
            (report.collaborations_failed if failed(result) else report.collaborations_deleted).append(
                collab.object_id
            )

        logger.info(
            "Deleted site %s: %s models (%s failed), %s collaborations (%s failed)",
            site.object_id,
            len(report.models),
            len(report.models_failed),
            len(report.collaborations_deleted),
            len(report.collaborations_failed),
        )
        return report
