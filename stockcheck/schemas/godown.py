"""
Pydantic schemas for Godown and GodownItem models.
"""
from typing import Optional
from datetime import datetime
from pydantic import Field

from stockcheck.schemas.base import CamelModel


class GodownBase(CamelModel):
    """Base godown schema."""
    name: str = Field(..., min_length=1, max_length=255)
    city: Optional[str] = Field(None, max_length=255)
    state: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=500)


class GodownCreate(GodownBase):
    """Schema for creating a godown."""
    pass


class GodownResponse(GodownBase):
    """Schema for godown response."""
    id: int
    created_at: datetime


class GodownItemCreate(CamelModel):
    """Schema for placing a barcoded item in a godown."""
    barcode: str = Field(..., min_length=1, max_length=100)
    item_code: Optional[str] = Field(None, max_length=255)
    item_name: Optional[str] = Field(None, max_length=500)


class GodownItemsCreate(CamelModel):
    items: list[GodownItemCreate] = Field(..., min_length=1)


class GodownItemsCreateResponse(CamelModel):
    godown_id: int
    added: int
