"""Database Models - Pydantic models for catalog and identity records."""
from decimal import Decimal
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from techmart.services.money import parse_price


class Product(BaseModel):
    """Product as seen by the storefront. Owned by the admin back-office."""
    id: int
    name: str = ""
    brand: Optional[str] = None
    sell_price: Decimal
    quantity: int = Field(default=0, ge=0)  # available stock
    is_active: bool = True
    image_path: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("sell_price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return parse_price(v)


class StaffUser(BaseModel):
    """Back-office account (admin or user role)."""
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str = "user"  # admin | user
    is_active: bool = True
