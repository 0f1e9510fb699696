"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

JobFactory = Callable[[], Awaitable[Any]]


# Background task queue interface
class ITaskQueue(Protocol):
    """Protocol for fire-and-forget work whose result the caller does not await."""

    async def submit(self, factory: JobFactory, description: str) -> None:
        """Enqueue a job; returns once queued, not once run. Failures are logged, not raised."""


# Content hook interface
class IContentHookClient(Protocol):
    """Protocol for notifying a site's content hook URL."""

    async def call(self, url: str) -> Any:
        """GET the URL; return the decoded body on 200, raise otherwise."""


# Email interface
class IEmailSender(Protocol):
    """Protocol for sending templated email (invites)."""

    async def send_template(
        self, template: str, recipient: str, variables: dict[str, Any]
    ) -> None:
        """Send the named template to one recipient; raise when delivery is refused."""
