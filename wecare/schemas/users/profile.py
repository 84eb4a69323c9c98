# wecare/schemas/users/profile.py
from datetime import datetime, date
from typing import Any, Dict, Optional
from pydantic import Field

from ..common.common import CamelModel


class AccountResponse(CamelModel):
    id: str
    name: str
    email: str
    role: str
    phone: str = ""
    dob: Optional[date] = None
    gender: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    emergency_contact: str = ""
    notes: str = ""
    blood_group: str = ""
    profile_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UpdateProfileRequest(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    dob: Optional[str] = Field(None, description="Date of birth in YYYY-MM-DD format")
    gender: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip: Optional[str] = Field(None, max_length=20)
    emergency_contact: Optional[str] = None
    notes: Optional[str] = None
    blood_group: Optional[str] = Field(None, max_length=5)
    specialization: Optional[str] = Field(None, description="Nurses only; copied to the directory listing")


class HistoryEntryResponse(CamelModel):
    id: int
    date: datetime
    category: str
    notes: str
    meta: Optional[Dict[str, Any]] = None
