"""Broker event handlers."""

from docingest.application.events.status_update_handler import StatusUpdateHandler

__all__ = ["StatusUpdateHandler"]
