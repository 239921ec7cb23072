from pydantic import BaseModel, EmailStr, Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from .quote_status import QuoteStatus


# --- Pricing ---
# Numeric pricing inputs are typed Any: non-numeric values are coerced to 0
# by the calculator instead of being rejected.

class DimensionsIn(BaseModel):
    height: Any = None
    width: Any = None
    depth: Any = None


class QuoteTotalItem(BaseModel):
    price: Any = 0
    quantity: Any = 0


class QuoteTotalRequest(BaseModel):
    items: List[QuoteTotalItem] = []
    promo_code: Optional[str] = None
    additional_services: Dict[str, bool] = {}


class PromoValidateRequest(BaseModel):
    code: str = ""


class PriceConfigUpdate(BaseModel):
    price_per_unit_area: Any = None
    difficulty_percentage: Any = None
    material_multiplier: Any = None


# --- Quotes ---

class QuoteItemIn(BaseModel):
    item_type: str = Field(min_length=1)
    size: Optional[str] = None
    description: Optional[str] = None
    quantity: int = Field(default=1, ge=1, le=1000)
    price: Optional[float] = Field(default=None, ge=0)  # unit price; omit to price from dimensions
    height: Optional[float] = Field(default=None, ge=0)
    width: Optional[float] = Field(default=None, ge=0)
    depth: Optional[float] = Field(default=None, ge=0)


class CoatingIn(BaseModel):
    type: str = Field(min_length=1)
    color: str = Field(min_length=1)
    finish: str = Field(min_length=1)


class ContactInfoIn(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    notes: Optional[str] = None


class QuoteCreate(BaseModel):
    items: List[QuoteItemIn] = Field(min_length=1)
    coating: CoatingIn
    additional_services: Dict[str, bool] = {}
    promo_code: Optional[str] = None
    contact_info: ContactInfoIn
    status: QuoteStatus = QuoteStatus.PENDING  # draft or pending


class QuoteUpdate(BaseModel):
    items: Optional[List[QuoteItemIn]] = Field(default=None, min_length=1)
    coating: Optional[CoatingIn] = None
    additional_services: Optional[Dict[str, bool]] = None
    promo_code: Optional[str] = None
    contact_info: Optional[ContactInfoIn] = None


class StatusUpdate(BaseModel):
    status: QuoteStatus
    tracking_number: Optional[str] = None


# --- Materials ---

class MaterialBase(BaseModel):
    name: str
    price_per_unit: float
    unit: str = "piece"
    category: Optional[str] = None
    description: Optional[str] = None
    min_quantity: Optional[int] = None
    max_quantity: Optional[int] = None


class Material(MaterialBase):
    id: int
    updated_at: datetime
    class Config:
        from_attributes = True


class MaterialUpdate(BaseModel):
    price_per_unit: Optional[float] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    min_quantity: Optional[int] = None
    max_quantity: Optional[int] = None


# --- Contact form ---

class ContactRequest(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr
    phone: Optional[str] = None
    service: str = Field(min_length=1)
    message: str = Field(min_length=10)
