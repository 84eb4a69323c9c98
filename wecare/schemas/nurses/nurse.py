# wecare/schemas/nurses/nurse.py
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from ..common.common import CamelModel


class NurseListingResponse(CamelModel):
    id: str
    account_id: str
    name: str
    specialization: str
    hourly_rate: str
    experience: str
    license_number: str
    certifications: str
    profile_image: Optional[str] = None
    is_active: bool
    rating: float = Field(ge=0, le=5)
    review_count: int
    created_at: datetime


class NurseReviewResponse(CamelModel):
    id: int
    appointment_id: str
    reviewer_id: str
    reviewer_name: str
    rating: int
    feedback: str
    created_at: datetime


class NurseDetailResponse(NurseListingResponse):
    reviews: List[NurseReviewResponse] = []


class UpdateNurseRequest(CamelModel):
    specialization: Optional[str] = Field(None, max_length=200)
    hourly_rate: Optional[str] = Field(None, max_length=20)
    experience: Optional[str] = Field(None, max_length=50)
    license_number: Optional[str] = Field(None, max_length=100)
    certifications: Optional[str] = None


class AvailabilityRequest(CamelModel):
    is_active: bool
