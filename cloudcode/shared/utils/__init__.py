"""Shared utilities: concurrency helpers."""

from cloudcode.shared.utils.concurrency import failed, settle

__all__ = [
    "failed",
    "settle",
]
