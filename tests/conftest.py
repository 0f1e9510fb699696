"""Pytest configuration and fixtures for the cloud code service.

Engine tests run against in-memory fakes of the document store and the
schema endpoint (FakeDocumentStore, FakeSchemaGateway). HTTP tests use
cloudcode.main:app through ASGITransport with the engine swapped for
one built on the same fakes. Parse settings are set before any
cloudcode import because the app reads them at import time.
"""

import copy
import itertools
import os
from typing import Any

os.environ.setdefault("PARSE_SERVER_URL", "http://parse.test/parse")
os.environ.setdefault("PARSE_APP_ID", "test-app")
os.environ.setdefault("PARSE_MASTER_KEY", "test-master-key")
os.environ.setdefault("TELEMETRY_ENABLED", "false")

import pytest
from httpx import ASGITransport, AsyncClient

from cloudcode.application.dtos.document import Document, Pointer
from cloudcode.application.dtos.pay_plan import PayPlan
from cloudcode.application.dtos.query import Query
from cloudcode.application.services import (
    AclPropagationService,
    CascadeDeleteService,
    ProvisioningService,
    TableRegistry,
)
from cloudcode.application.use_cases import CloudHooks
from cloudcode.core.constants import (
    CLASS_COLLABORATION,
    CLASS_MEDIA_ITEM,
    CLASS_MODEL,
    CLASS_MODEL_FIELD,
    CLASS_SITE,
    CLASS_USER,
    DRAFT_OWNER_FIELD,
)
from cloudcode.domain.enums import SchemaMethod
from cloudcode.domain.exceptions import (
    ObjectNotFoundException,
    SchemaOperationException,
    StoreRequestException,
)
from cloudcode.domain.value_objects.acl import ACL
from cloudcode.domain.value_objects.table_name import TableName
from cloudcode.infrastructure.messaging import BackgroundTaskQueue
from cloudcode.main import app


def _normalize(value: Any) -> Any:
    if isinstance(value, Document) and value.object_id is not None:
        return value.pointer()
    return value


def _same(a: Any, b: Any) -> bool:
    return _normalize(a) == _normalize(b)


def _matches(document: Document, where: dict[str, Any]) -> bool:
    """Evaluate the subset of the Parse where grammar the engine emits."""
    for key, condition in where.items():
        value = document.get(key)
        is_ops = (
            isinstance(condition, dict)
            and condition
            and all(k.startswith("$") for k in condition)
        )
        if not is_ops:
            if not _same(value, condition):
                return False
            continue
        for op, arg in condition.items():
            if op == "$eq" and not _same(value, arg):
                return False
            if op == "$ne" and _same(value, arg):
                return False
            if op == "$in" and not any(_same(value, a) for a in arg):
                return False
            if op == "$nin" and any(_same(value, a) for a in arg):
                return False
            if op == "$exists" and (value is not None) != arg:
                return False
    return True


class FakeDocumentStore:
    """IDocumentStore over dicts. Reads and writes copy, so only save() persists."""

    def __init__(self) -> None:
        self.classes: dict[str, dict[str, Document]] = {}
        self.destroyed: list[Pointer] = []
        self.saved: list[Pointer] = []
        self.fail_destroy: set[str] = set()
        self.fail_save: set[str] = set()
        self._ids = itertools.count(1)

    def _table(self, class_name: str) -> dict[str, Document]:
        return self.classes.setdefault(class_name, {})

    def put(self, document: Document) -> Document:
        """Seed a document directly (assigns an id when missing)."""
        if document.object_id is None:
            document.object_id = f"{document.class_name.lower()}-{next(self._ids)}"
        self._table(document.class_name)[document.object_id] = copy.deepcopy(document)
        return document

    def peek(self, class_name: str, object_id: str) -> Document | None:
        stored = self._table(class_name).get(object_id)
        return copy.deepcopy(stored) if stored is not None else None

    def all(self, class_name: str) -> list[Document]:
        return [copy.deepcopy(d) for d in self._table(class_name).values()]

    async def get(self, class_name: str, object_id: str) -> Document:
        stored = self._table(class_name).get(object_id)
        if stored is None:
            raise ObjectNotFoundException(class_name, object_id)
        return copy.deepcopy(stored)

    async def fetch(self, ref: Pointer | Document) -> Document:
        return await self.get(ref.class_name, ref.object_id)

    async def find(self, query: Query) -> list[Document]:
        rows = [
            copy.deepcopy(d)
            for d in self._table(query.class_name).values()
            if _matches(d, query.where)
        ]
        rows = rows[query.skip_value :]
        if query.limit_value is not None:
            rows = rows[: query.limit_value]
        return rows

    async def find_all(self, query: Query) -> list[Document]:
        return [
            copy.deepcopy(d)
            for d in self._table(query.class_name).values()
            if _matches(d, query.where)
        ]

    async def first(self, query: Query) -> Document | None:
        rows = await self.find_all(query)
        return rows[0] if rows else None

    async def count(self, query: Query) -> int:
        return len(await self.find_all(query))

    async def save(self, document: Document) -> Document:
        if document.object_id in self.fail_save:
            raise StoreRequestException(500, "save failed")
        self.put(document)
        self.saved.append(document.pointer())
        return document

    async def save_acl(self, ref: Pointer | Document, acl: ACL) -> None:
        if ref.object_id in self.fail_save:
            raise StoreRequestException(500, "save failed")
        stored = self._table(ref.class_name).get(ref.object_id)
        if stored is None:
            raise ObjectNotFoundException(ref.class_name, ref.object_id)
        stored.acl = acl.copy()
        self.saved.append(Pointer(ref.class_name, ref.object_id))

    async def destroy(self, ref: Pointer | Document) -> None:
        if ref.object_id in self.fail_destroy:
            raise StoreRequestException(500, "destroy failed")
        if self._table(ref.class_name).pop(ref.object_id, None) is None:
            raise ObjectNotFoundException(ref.class_name, ref.object_id)
        self.destroyed.append(Pointer(ref.class_name, ref.object_id))


class FakeSchemaGateway:
    """ISchemaGateway that behaves like Parse: POST on an existing class and PUT on a missing one fail."""

    def __init__(self) -> None:
        self.schemas: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_delete = False
        self.fail_apply = False

    async def fetch_schema(self, table: str) -> dict[str, Any] | None:
        self.calls.append(("GET", table))
        schema = self.schemas.get(table)
        return copy.deepcopy(schema) if schema is not None else None

    async def apply_schema(
        self,
        table: str,
        patch: dict[str, Any],
        method: SchemaMethod = SchemaMethod.CREATE,
    ) -> None:
        self.calls.append((method.value, table))
        exists = table in self.schemas
        if self.fail_apply or (method is SchemaMethod.CREATE) == exists:
            raise SchemaOperationException(table, method.value, 400)
        schema = self.schemas.setdefault(table, {"className": table, "fields": {}})
        for key, value in copy.deepcopy(patch).items():
            if key == "fields":
                schema["fields"].update(value)
            else:
                schema[key] = value

    async def delete_schema(self, table: str) -> None:
        self.calls.append(("DELETE", table))
        if self.fail_delete or table not in self.schemas:
            raise SchemaOperationException(table, "DELETE", 400)
        del self.schemas[table]


class FakePayPlans:
    def __init__(self) -> None:
        self.plans: dict[str, PayPlan] = {}

    async def get_pay_plan(self, user: Document) -> PayPlan | None:
        return self.plans.get(user.object_id)


class FakeContentHooks:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.response: Any = {"ok": True}

    async def call(self, url: str) -> Any:
        self.calls.append(url)
        return self.response


class FakeMailer:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict[str, Any]]] = []
        self.error: Exception | None = None

    async def send_template(
        self, template: str, recipient: str, variables: dict[str, Any]
    ) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((template, recipient, variables))


class SiteWorld:
    """Builds sites, collaborators, models, fields, media and content rows in a fake store."""

    def __init__(self, store: FakeDocumentStore, schemas: FakeSchemaGateway) -> None:
        self.store = store
        self.schemas = schemas

    def user(self, user_id: str, email: str | None = None) -> Document:
        return self.store.put(
            Document(CLASS_USER, user_id, {"email": email or f"{user_id}@example.com"})
        )

    def site(self, owner: Document, name_id: str = "acme") -> Document:
        return self.store.put(
            Document(
                CLASS_SITE,
                data={"owner": owner.pointer(), "nameId": name_id},
                acl=ACL(owner.object_id),
            )
        )

    def collaboration(
        self,
        site: Document,
        user: Document | None,
        role: str,
        email: str = "",
        acl: ACL | None = None,
    ) -> Document:
        data: dict[str, Any] = {"site": site.pointer(), "role": role, "email": email}
        if user is not None:
            data["user"] = user.pointer()
        return self.store.put(Document(CLASS_COLLABORATION, data=data, acl=acl))

    def model(
        self,
        site: Document,
        name_id: str,
        acl: ACL | None = None,
        media_fields: tuple[str, ...] = (),
    ) -> Document:
        table = TableName(site.get("nameId"), name_id).physical
        fields: dict[str, Any] = {"title": {"type": "String"}}
        for name in media_fields:
            fields[name] = {"type": "Pointer", "targetClass": CLASS_MEDIA_ITEM}
        self.schemas.schemas[table] = {"className": table, "fields": fields}
        return self.store.put(
            Document(
                CLASS_MODEL,
                data={"site": site.pointer(), "nameId": name_id, "tableName": table},
                acl=acl,
            )
        )

    def field(
        self,
        model: Document,
        name: str,
        type_: str = "String",
        validations: Any = None,
        acl: ACL | None = None,
    ) -> Document:
        data: dict[str, Any] = {"model": model.pointer(), "name": name, "type": type_}
        if validations is not None:
            data["validations"] = validations
        return self.store.put(Document(CLASS_MODEL_FIELD, data=data, acl=acl))

    def media(self, site: Document, acl: ACL | None = None) -> Document:
        return self.store.put(Document(CLASS_MEDIA_ITEM, data={"site": site.pointer()}, acl=acl))

    def row(
        self,
        model: Document,
        draft_of: Document | None = None,
        acl: ACL | None = None,
        **values: Any,
    ) -> Document:
        data = dict(values)
        if draft_of is not None:
            data[DRAFT_OWNER_FIELD] = draft_of.pointer()
        return self.store.put(Document(model.get("tableName"), data=data, acl=acl))


@pytest.fixture
def store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def schemas() -> FakeSchemaGateway:
    return FakeSchemaGateway()


@pytest.fixture
def pay_plans() -> FakePayPlans:
    return FakePayPlans()


@pytest.fixture
def content_hooks() -> FakeContentHooks:
    return FakeContentHooks()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def world(store: FakeDocumentStore, schemas: FakeSchemaGateway) -> SiteWorld:
    return SiteWorld(store, schemas)


@pytest.fixture
async def tasks() -> BackgroundTaskQueue:
    """Real queue; tests await tasks.join() before asserting on fire-and-forget writes."""
    queue = BackgroundTaskQueue(workers=4, maxsize=1000)
    yield queue
    await queue.stop()


@pytest.fixture
def registry(store: FakeDocumentStore, schemas: FakeSchemaGateway) -> TableRegistry:
    return TableRegistry(store, schemas)


@pytest.fixture
def propagation(
    store: FakeDocumentStore, registry: TableRegistry, tasks: BackgroundTaskQueue
) -> AclPropagationService:
    return AclPropagationService(store, registry, tasks)


@pytest.fixture
def cascade(
    store: FakeDocumentStore, registry: TableRegistry, tasks: BackgroundTaskQueue
) -> CascadeDeleteService:
    return CascadeDeleteService(store, registry, tasks)


@pytest.fixture
def provisioning(
    store: FakeDocumentStore, registry: TableRegistry, pay_plans: FakePayPlans
) -> ProvisioningService:
    return ProvisioningService(store, registry, pay_plans)


@pytest.fixture
def hooks(
    registry: TableRegistry,
    propagation: AclPropagationService,
    cascade: CascadeDeleteService,
    provisioning: ProvisioningService,
    content_hooks: FakeContentHooks,
    mailer: FakeMailer,
) -> CloudHooks:
    return CloudHooks(
        registry,
        propagation,
        cascade,
        provisioning,
        content_hooks,
        mailer,
        site_url="https://app.example.com/",
    )


@pytest.fixture
async def client(hooks: CloudHooks) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with the engine on fakes.

    ASGITransport does not run the lifespan, so app.state is set here.
    """
    app.state.cloud_hooks = hooks
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.cloud_hooks = None
