"""Use cases for managing admin notification recipients."""

from .manage_recipients import list_recipients, remove_recipient, save_recipient

__all__ = ["list_recipients", "remove_recipient", "save_recipient"]
