"""Messaging: background queue for fire-and-forget store writes."""

from cloudcode.infrastructure.messaging.background_queue import BackgroundTaskQueue

__all__ = ["BackgroundTaskQueue"]
