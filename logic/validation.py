"""Pydantic schemas for validating API payloads."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class QuoteContact(BaseModel):
    """Contact details entered on the quote form."""

    name: str = Field(min_length=1)
    email: str
    phone: str = Field(min_length=1)
    company: Optional[str] = None
    message: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _validate_email(cls, email: str) -> str:
        if not _EMAIL_PATTERN.match(email.strip()):
            raise ValueError("email must be a valid address")
        return email.strip()


class ColorPayload(BaseModel):
    name: str = Field(min_length=1)
    hex: str = ""


class CustomizationPayload(BaseModel):
    name: str
    number: str
    size: str


def _positive_quantities(size_quantities: Dict[str, int]) -> Dict[str, int]:
    if any(quantity < 0 for quantity in size_quantities.values()):
        raise ValueError("quantities cannot be negative")
    if not any(size_quantities.values()):
        raise ValueError("at least one size needs a positive quantity")
    return size_quantities


class SubmittedQuoteItem(BaseModel):
    """Serializable quote line as sent by the storefront."""

    product: Dict[str, Any]
    selectedColor: ColorPayload
    sizeQuantities: Dict[str, int]
    logoFilename: Optional[str] = None
    designFilename: Optional[str] = None
    customizations: Optional[List[CustomizationPayload]] = None

    @field_validator("product")
    @classmethod
    def _validate_product(cls, product: Dict[str, Any]) -> Dict[str, Any]:
        if not product.get("id"):
            raise ValueError("product.id is required")
        return product

    @field_validator("sizeQuantities")
    @classmethod
    def _validate_quantities(cls, size_quantities: Dict[str, int]) -> Dict[str, int]:
        return _positive_quantities(size_quantities)


class QuoteSubmission(BaseModel):
    contact: QuoteContact
    items: List[SubmittedQuoteItem] = Field(min_length=1)


class SessionQuoteSubmission(BaseModel):
    contact: QuoteContact


class LoginRequest(BaseModel):
    username: str
    password: str


class AddQuoteItemRequest(BaseModel):
    """Add-to-quote request for a session cart."""

    product_id: str = Field(min_length=1)
    color_name: str = Field(min_length=1)
    size_quantities: Dict[str, int]
    logo_filename: Optional[str] = None
    design_filename: Optional[str] = None
    customizations: List[CustomizationPayload] = []

    @field_validator("size_quantities")
    @classmethod
    def _validate_quantities(cls, size_quantities: Dict[str, int]) -> Dict[str, int]:
        return _positive_quantities(size_quantities)


class SizeQuantityUpdate(BaseModel):
    quantity: int


class ChatPart(BaseModel):
    text: str


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    parts: List[ChatPart] = Field(min_length=1)


class AdvisorRequest(BaseModel):
    """Advisor chat request; products default to the stored catalogue."""

    history: List[ChatMessage] = Field(min_length=1)
    products: Optional[List[Dict[str, Any]]] = None

    @field_validator("history")
    @classmethod
    def _last_turn_from_user(cls, history: List[ChatMessage]) -> List[ChatMessage]:
        if history and history[-1].role != "user":
            raise ValueError("the last message must come from the user")
        return history


class CatalogueQuery(BaseModel):
    """Catalogue browse parameters."""

    group: Optional[str] = None
    category: List[str] = []
    gender: List[str] = []
    bestsellers_only: bool = False
    sort: Literal["default", "name-asc", "price-asc", "price-desc"] = "default"


class ValidationResult(BaseModel):
    """Error body returned when a payload fails validation."""

    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic (or FastAPI request) errors into a consistent error payload."""

    details = [{key: value for key, value in error.items() if key in {"loc", "msg", "type"}} for error in exc.errors()]
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "QuoteContact",
    "ColorPayload",
    "CustomizationPayload",
    "SubmittedQuoteItem",
    "QuoteSubmission",
    "SessionQuoteSubmission",
    "LoginRequest",
    "AddQuoteItemRequest",
    "SizeQuantityUpdate",
    "ChatPart",
    "ChatMessage",
    "AdvisorRequest",
    "CatalogueQuery",
    "ValidationResult",
    "validation_failure",
]
