"""Order related pydantic models with stricter types.

- Use the OrderStatus enum to prevent invalid status values.
- OrderQuery is the typed filter accepted by the store; every legal
  combination of list filters is expressed through its named fields.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from ..data.models import OrderStatus

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"

SORTABLE_FIELDS = ("order_date", "order_id", "status", "total_amount", "created_at")

class OrderCreate(BaseModel):
    order_id: str = Field(pattern=r"^ORD-\d+$")
    customer_email: str = Field(pattern=EMAIL_PATTERN)
    status: OrderStatus = OrderStatus.pending
    items: List[str] = Field(min_length=1)
    shipping_address: str = Field(min_length=1)
    order_date: Optional[datetime] = None
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    total_amount: Optional[float] = Field(default=None, ge=0)

    @field_validator("customer_email")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.lower()

class OrderUpdate(BaseModel):
    customer_email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    status: Optional[OrderStatus] = None
    items: Optional[List[str]] = Field(default=None, min_length=1)
    shipping_address: Optional[str] = Field(default=None, min_length=1)
    order_date: Optional[datetime] = None
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    total_amount: Optional[float] = Field(default=None, ge=0)

class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: str
    customer_email: str
    status: OrderStatus
    items: List[str]
    shipping_address: str
    order_date: Optional[datetime] = None
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    total_amount: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class OrderQuery(BaseModel):
    """Filter, sort and paging parameters for listing orders.

    `customer_email` matches exactly (case-insensitive); `email_contains`
    and `order_id_contains` are case-insensitive substring filters.
    """
    order_id: Optional[str] = None
    customer_email: Optional[str] = None
    email_contains: Optional[str] = None
    order_id_contains: Optional[str] = None
    status: Optional[OrderStatus] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    limit: int = Field(default=50, ge=1, le=500)
    skip: int = Field(default=0, ge=0)
    sort: str = "-order_date"

    @field_validator("sort")
    @classmethod
    def _check_sort(cls, v: str) -> str:
        if v.lstrip("-") not in SORTABLE_FIELDS:
            raise ValueError(f"sort must be one of {', '.join(SORTABLE_FIELDS)} (prefix '-' for descending)")
        return v

    @property
    def sort_field(self) -> str:
        return self.sort.lstrip("-")

    @property
    def descending(self) -> bool:
        return self.sort.startswith("-")
