"""Service catalog data models."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class Service(BaseModel):
    """A bookable service. Its duration drives slot length."""
    id: str
    name: str = Field(min_length=1)
    description: str = ""
    price: Decimal = Field(ge=0)
    duration_minutes: int = Field(gt=0)
    is_active: bool = True
    sort_order: int = 0


class ServiceCreate(BaseModel):
    """Admin request to add a service."""
    name: str = Field(min_length=1)
    description: str = ""
    price: Decimal = Field(ge=0)
    duration_minutes: int = Field(gt=0)


class ServiceUpdate(BaseModel):
    """Admin request to edit a service. Unset fields are left alone."""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None
