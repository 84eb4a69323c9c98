# wecare/schemas/appointments/appointment.py
from datetime import datetime, date
from typing import Optional
from pydantic import Field

from ..common.common import CamelModel


class AppointmentCreate(CamelModel):
    # Required fields are checked by the booking service so that missing
    # values come back with per-field messages.
    nurse_id: Optional[str] = None
    service_type: Optional[str] = None
    service_price: Optional[int] = None
    appointment_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    appointment_time: Optional[str] = Field(None, max_length=50)
    payment_method: Optional[str] = Field(None, max_length=50)
    insurance_coverage: bool = False
    notes: Optional[str] = Field(None, max_length=1000)


class AppointmentResponse(CamelModel):
    id: str
    user_id: str
    nurse_id: str
    nurse_name: str
    nurse_image: Optional[str] = None
    specialization: Optional[str] = None
    service_type: str
    service_price: int
    appointment_date: date
    appointment_time: str
    payment_method: Optional[str] = None
    insurance_coverage: bool
    notes: Optional[str] = None
    status: str
    rating: Optional[int] = None
    feedback: Optional[str] = None
    rated_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class RateAppointmentRequest(CamelModel):
    rating: Optional[int] = None
    feedback: Optional[str] = Field(None, max_length=1000)
