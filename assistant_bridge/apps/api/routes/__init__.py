"""Router namespace exports for FastAPI include hooks."""

from . import commands, health, webhooks

__all__ = ["commands", "health", "webhooks"]
