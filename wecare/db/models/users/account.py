# wecare/db/models/users/account.py
from typing import Optional
from sqlmodel import SQLModel, Field
from ..timestamps import timestamp_field
from datetime import datetime, date
import uuid

class Account(SQLModel, table=True):
    __tablename__ = "accounts"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(default="", max_length=100)
    email: str = Field(max_length=255, unique=True, index=True)
    password_hash: str
    role: str = Field(default="patient", max_length=10, index=True)

    # Profile
    phone: str = Field(default="", max_length=20)
    dob: Optional[date] = Field(default=None)
    gender: str = Field(default="", max_length=10)
    address: str = Field(default="")
    city: str = Field(default="", max_length=100)
    state: str = Field(default="", max_length=100)
    zip: str = Field(default="", max_length=20)
    emergency_contact: str = Field(default="")
    notes: str = Field(default="")
    blood_group: str = Field(default="", max_length=5)
    profile_image: Optional[str] = Field(default=None, max_length=255)

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()
