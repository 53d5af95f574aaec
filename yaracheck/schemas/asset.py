"""
YaraCheck - Company Asset Schemas
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AssetBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    condition: str = Field("good", max_length=50)
    description: Optional[str] = None
    current_value: Decimal = Field(..., ge=0)
    purchase_price: Optional[Decimal] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    depreciation_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    assigned_to: Optional[str] = Field(None, max_length=255)
    warranty_expiry: Optional[date] = None


class AssetCreate(AssetBase):
    """Register a company asset."""
    pass


class AssetUpdate(BaseModel):
    """Partial asset update."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    condition: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    current_value: Optional[Decimal] = Field(None, ge=0)
    purchase_price: Optional[Decimal] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    depreciation_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    assigned_to: Optional[str] = Field(None, max_length=255)
    warranty_expiry: Optional[date] = None
    is_active: Optional[bool] = None


class AssetResponse(AssetBase):
    """Company asset."""
    id: UUID
    is_active: bool
    created_by_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategoryTotal(BaseModel):
    count: int
    value: Decimal


class AssetSummary(BaseModel):
    """Active asset totals."""
    total_assets: int
    total_value: Decimal
    by_category: Dict[str, CategoryTotal]
