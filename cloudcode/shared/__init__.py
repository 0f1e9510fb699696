"""Shared helpers: telemetry and concurrency utilities. No business logic."""
