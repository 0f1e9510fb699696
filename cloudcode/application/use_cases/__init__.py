"""Application use cases: one entry point per workflow."""

from cloudcode.application.use_cases.cloud_hooks import CloudHooks

__all__ = ["CloudHooks"]
