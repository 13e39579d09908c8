from decimal import Decimal
from typing import Optional
from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    __tablename__ = "products"
    # table=True models skip pydantic validation, so the database enforces it too
    __table_args__ = (CheckConstraint("price >= 0", name="ck_products_price_non_negative"),)
    id: Optional[int] = Field(default=None, primary_key=True)
    description: str = Field(max_length=255)
    price: Decimal = Field(default=Decimal("0.00"), max_digits=10, decimal_places=2, ge=0)
    image_url: Optional[str] = Field(default=None, max_length=1024)
