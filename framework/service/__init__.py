"""
Service layer: generic CRUD service over a repository and a unit of work.
"""

from .base import BaseCRUDService, ICRUDService

__all__ = ["BaseCRUDService", "ICRUDService"]
