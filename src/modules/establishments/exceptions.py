"""Establishment domain exceptions."""

from __future__ import annotations


class EstablishmentNotFound(Exception):
    """The requested establishment does not exist."""
