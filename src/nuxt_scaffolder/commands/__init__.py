"""Command handlers for the CLI."""

from .create import CreateHandler, CreateRequest

__all__ = ["CreateHandler", "CreateRequest"]
