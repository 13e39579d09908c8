from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from framework.dependencies import get_uow
from framework.exceptions.handler import NotFoundException
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user
from ..models import Product
from ..service import ProductService

router = APIRouter()


class ProductCreateSchema(BaseModel):
    description: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(default=None, max_length=1024)

class ProductUpdateSchema(BaseModel):
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(default=None, max_length=1024)


def get_product_service(uow: UnitOfWork = Depends(get_uow)) -> ProductService:
    """Dependency: create ProductService."""
    return ProductService(uow)


def product_to_dict(product: Product) -> dict:
    return {
        "id": product.id,
        "description": product.description,
        # Decimal as string keeps cents exact over JSON
        "price": str(product.price),
        "image_url": product.image_url,
    }


@router.get("")
async def list_products(
    limit: int = 100,
    offset: int = 0,
    service: ProductService = Depends(get_product_service)
):
    products = await service.list_all(limit=limit, offset=offset)
    return ResponseModel.success(data=[product_to_dict(p) for p in products])

@router.get("/{product_id}")
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    product = await service.get_or_raise(product_id)
    return ResponseModel.success(data=product_to_dict(product))

@router.post("")
async def create_product(
    data: ProductCreateSchema,
    service: ProductService = Depends(get_product_service),
    _: CurrentUser = Depends(get_current_user)
):
    product = await service.save_or_update(Product(**data.model_dump()))
    return ResponseModel.success(data=product_to_dict(product))

@router.put("/{product_id}")
async def update_product(
    product_id: int,
    data: ProductUpdateSchema,
    service: ProductService = Depends(get_product_service),
    _: CurrentUser = Depends(get_current_user)
):
    product = await service.update_product(product_id, **data.model_dump(exclude_unset=True))
    return ResponseModel.success(data=product_to_dict(product))

@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
    _: CurrentUser = Depends(get_current_user)
):
    if not await service.delete(product_id):
        raise NotFoundException("Product", product_id)
    return ResponseModel.success(data={"id": product_id})
