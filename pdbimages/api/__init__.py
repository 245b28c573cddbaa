"""Metadata gateway: client for the PDBe REST API."""

from .pdbe_api import PDBeAPI

__all__ = ["PDBeAPI"]
