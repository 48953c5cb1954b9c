"""Data Transfer Objects for User Use Cases"""

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from src.domain.user import UserRole


class CreateUserCommandDTO(BaseModel):
    """
    Command DTO for registering a marketplace user

    The profile payload must match the schema of the chosen role.
    """

    email: str = Field(..., min_length=3, max_length=255, description="Login email (unique)")

    role: UserRole = Field(..., description="admin, agency or customer")

    name: str = Field(..., min_length=1, max_length=255, description="Display name")

    profile: Dict[str, Any] = Field(
        default_factory=dict,
        description="Role-specific attributes"
    )

    payment_customer_ref: Optional[str] = Field(
        default=None,
        description="Existing customer id at the payment gateway"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "email": "fleet@citycars.example",
                "role": "agency",
                "name": "City Cars",
                "profile": {"name": "City Cars", "address": "12 Harbour Road"},
            }
        }


class UserResponseDTO(BaseModel):
    id: int
    email: str
    role: str
    name: str
    profile: Dict[str, Any]
    payment_customer_ref: Optional[str] = None
    is_active: bool
    created_at: datetime
