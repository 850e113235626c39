"""Usage statistics."""

from .usage_counter import UsageCounter

__all__ = ["UsageCounter"]
