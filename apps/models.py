"""
Model registration for migrations: import all models that should be migrated by Alembic here.
When adding/removing apps, add/remove the corresponding imports here.
"""
from apps.identity.models import Role, User, UserRoleLink
from apps.catalog.models import Product

__all__ = ["Role", "User", "UserRoleLink", "Product"]
