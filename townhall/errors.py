"""Exceptions shared by the workspace's domain modules."""

from __future__ import annotations


class ValidationError(ValueError):
    """An entity failed validation before being saved."""


class NotFoundError(LookupError):
    """No entity exists with the requested id."""
