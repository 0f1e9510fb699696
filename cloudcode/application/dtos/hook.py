"""Request envelope handed to every cloud hook and function."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cloudcode.application.dtos.document import Document


@dataclass
class HookRequest:
    """What Parse tells us about one trigger or function call.

    ``master`` is True when the originating request used the master key;
    triggers skip their checks in that case. ``user`` is the signed-in
    actor (None for anonymous calls). ``obj`` is the object being saved or
    deleted; ``original`` its stored state for updates.
    """

    user: Document | None = None
    obj: Document | None = None
    original: Document | None = None
    master: bool = False
    params: dict[str, Any] = field(default_factory=dict)
