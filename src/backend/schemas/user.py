"""
User-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    """Identity extracted from a verified bearer token."""

    id: str
    email: Optional[str] = None
    is_admin: bool = False


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile."""

    full_name: str = Field(..., min_length=1, max_length=100)
    company_name: Optional[str] = Field(None, max_length=100)


class ProfileRecord(BaseModel):
    """Stored profile as returned by any repository backend."""

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    company_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
