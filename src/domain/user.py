"""User Domain Entity

One identity table for every marketplace participant. The role tag selects
which attribute set lives in ``profile``: agencies, customers and admins are
users with different payloads, not separate tables.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel as SchemaModel, ConfigDict
from sqlmodel import Field, Column
from sqlalchemy import JSON, String
from src.domain.base import BaseModel, IdType


class UserRole(str, Enum):
    """Marketplace roles"""
    ADMIN = "admin"
    AGENCY = "agency"
    CUSTOMER = "customer"


class AgencyProfile(SchemaModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    address: str
    logo: Optional[str] = None
    is_verified: bool = False


class CustomerProfile(SchemaModel):
    model_config = ConfigDict(extra="forbid")

    first_name: str
    last_name: str
    address: Optional[str] = None


class AdminProfile(SchemaModel):
    model_config = ConfigDict(extra="forbid")

    permissions: List[str] = []


PROFILE_SCHEMAS = {
    UserRole.ADMIN: AdminProfile,
    UserRole.AGENCY: AgencyProfile,
    UserRole.CUSTOMER: CustomerProfile,
}


def validate_profile(role: UserRole, data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a profile payload against the role's schema.

    Raises pydantic.ValidationError when the payload does not fit.
    """
    schema = PROFILE_SCHEMAS[role]
    return schema.model_validate(data).model_dump()


class User(BaseModel, table=True):
    """
    User - Marketplace identity

    Domain Rules:
    - email is unique
    - role is fixed at creation
    - profile shape depends on role (see PROFILE_SCHEMAS)
    - payment_customer_ref is the gateway-side customer id, set lazily
    """

    __tablename__ = "users"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique user identifier (auto-increment)"
    )

    email: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True),
        description="Login email (unique)"
    )

    role: UserRole = Field(
        index=True,
        description="User role (admin, agency, customer)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name"
    )

    profile: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="Role-specific attributes"
    )

    payment_customer_ref: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Customer id at the payment gateway"
    )

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)
