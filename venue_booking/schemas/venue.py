from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class VenueCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    city: str = Field(default="", max_length=128)
    category: str = Field(default="", max_length=128)
    min_capacity: int = Field(default=1, ge=1)
    max_capacity: int = Field(default=100, ge=1)
    price_per_hour: Decimal = Field(default=Decimal("0"), ge=0)
    auto_confirm: bool = False


class VenueOut(BaseModel):
    id: str
    name: str
    city: str
    category: str
    owner_id: str
    min_capacity: int
    max_capacity: int
    price_per_hour: Decimal
    auto_confirm: bool
    active: bool

    class Config:
        from_attributes = True
