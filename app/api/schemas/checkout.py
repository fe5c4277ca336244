import re
from typing import Any, Dict, List
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.api.schemas.cart import OrderSummaryOut

_EXPIRY = re.compile(r"^(0[1-9]|1[0-2])/\d{2}$")


class ShippingInfo(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = ""
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = "United States"


class PaymentInfo(BaseModel):
    card_number: str
    expiry_date: str = Field(..., description="MM/YY")
    cvv: str
    name_on_card: str = Field(..., min_length=1)

    @field_validator("card_number")
    def _card_digits(cls, v: str) -> str:
        digits = re.sub(r"[\s-]", "", v or "")
        if not digits.isdigit() or not 12 <= len(digits) <= 19:
            raise ValueError("card number must be 12-19 digits")
        return digits

    @field_validator("expiry_date")
    def _expiry_format(cls, v: str) -> str:
        if not _EXPIRY.match((v or "").strip()):
            raise ValueError("expiry date must look like MM/YY")
        return v.strip()

    @field_validator("cvv")
    def _cvv_digits(cls, v: str) -> str:
        if not (v or "").isdigit() or len(v) not in (3, 4):
            raise ValueError("cvv must be 3 or 4 digits")
        return v


class CheckoutRequest(BaseModel):
    shipping: ShippingInfo
    payment: PaymentInfo


class OrderConfirmation(BaseModel):
    order_id: str
    placed_at: str
    items: List[Dict[str, Any]]
    summary: OrderSummaryOut
    shipping_address: Dict[str, Any]
