# wecare/db/models/health/nurse.py
from typing import Optional
from sqlmodel import SQLModel, Field
from ..timestamps import timestamp_field
from datetime import datetime
import uuid

class NurseListing(SQLModel, table=True):
    __tablename__ = "nurse_listings"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    account_id: str = Field(foreign_key="accounts.id", unique=True, index=True)
    name: str
    specialization: str = Field(default="")
    hourly_rate: str = Field(default="0")
    experience: str = Field(default="")
    license_number: str = Field(default="PENDING")
    certifications: str = Field(default="")
    profile_image: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = Field(default=True, index=True)
    rating: float = Field(default=4.5, ge=0, le=5)
    review_count: int = Field(default=0)
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()


class NurseReview(SQLModel, table=True):
    __tablename__ = "nurse_reviews"
    id: Optional[int] = Field(default=None, primary_key=True)
    nurse_id: str = Field(foreign_key="nurse_listings.id", index=True)
    appointment_id: str = Field(foreign_key="appointments.id", unique=True)
    reviewer_id: str = Field(foreign_key="accounts.id")
    reviewer_name: str = Field(default="")
    rating: int
    feedback: str = Field(default="")
    created_at: datetime = timestamp_field()
