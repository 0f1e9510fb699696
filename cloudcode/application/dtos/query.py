"""Store-agnostic query description built by the services and encoded by the store adapter."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

# Operator keys follow the Parse REST "where" grammar.
OP_NOT_EQUAL = "$ne"
OP_IN = "$in"


@dataclass
class Query:
    """Fluent filter over one class.

    Constraints on the same key merge, so ``contained_in("model", ...)``
    and ``not_equal_to("model", ...)`` combine into one operator map.
    Values may be plain JSON values, Pointer or Document.
    """

    class_name: str
    where: dict[str, Any] = field(default_factory=dict)
    order_by: str | None = None
    limit_value: int | None = None
    skip_value: int = 0

    def _add_op(self, key: str, op: str, value: Any) -> "Query":
        current = self.where.get(key)
        if isinstance(current, dict) and all(k.startswith("$") for k in current):
            current[op] = value
        elif key in self.where:
            # An equality already set on this key; Parse has no $eq merge, keep both.
            self.where[key] = {"$eq": current, op: value}
        else:
            self.where[key] = {op: value}
        return self

    def equal_to(self, key: str, value: Any) -> "Query":
        self.where[key] = value
        return self

    def not_equal_to(self, key: str, value: Any) -> "Query":
        return self._add_op(key, OP_NOT_EQUAL, value)

    def contained_in(self, key: str, values: Iterable[Any]) -> "Query":
        return self._add_op(key, OP_IN, list(values))


