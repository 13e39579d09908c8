from decimal import Decimal
from typing import Any
from framework.exceptions.handler import BusinessException
from framework.service.base import BaseCRUDService
from .models import Product
from .repository import ProductRepository

UPDATABLE_FIELDS = ("description", "price", "image_url")
REQUIRED_FIELDS = ("description", "price")


def check_price(price) -> None:
    if price is None or Decimal(price) < 0:
        raise BusinessException(f"Price must be non-negative: {price}", code=400)


class ProductService(BaseCRUDService[Product]):
    repository_class = ProductRepository
    entity_name = "Product"

    async def save_or_update(self, entity: Product) -> Product:
        check_price(entity.price)
        return await super().save_or_update(entity)

    async def update_product(self, product_id: int, **changes: Any) -> Product:
        """
        Apply exactly the given fields; omitted fields stay untouched.

        image_url may be set to None to clear it; description and price may not.
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise BusinessException(f"Unknown product fields: {', '.join(sorted(unknown))}", code=400)
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                raise BusinessException(f"Product {field} cannot be empty", code=400)
        # Validate before touching the persistent instance
        if "price" in changes:
            check_price(changes["price"])

        product = await self.get_or_raise(product_id)
        for field, value in changes.items():
            setattr(product, field, value)
        return await self.save_or_update(product)
