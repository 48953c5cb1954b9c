"""Request schemas for User API"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.user import UserRole


class CreateUserRequestSchema(BaseModel):
    """
    Request schema for registering a user

    Used for POST /users endpoint.
    """

    email: str = Field(..., min_length=3, max_length=255)

    role: UserRole

    name: str = Field(..., min_length=1, max_length=255)

    profile: Dict[str, Any] = Field(default_factory=dict)

    payment_customer_ref: Optional[str] = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Normalize email and require a single @"""
        v = v.strip().lower()
        if v.count("@") != 1 or v.startswith("@") or v.endswith("@"):
            raise ValueError("Invalid email address")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane@example.com",
                "role": "customer",
                "name": "Jane Doe",
                "profile": {"first_name": "Jane", "last_name": "Doe"},
            }
        }
