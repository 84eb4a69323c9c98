# wecare/db/models/health/appointment.py
from typing import Optional
from sqlmodel import SQLModel, Field
from ..timestamps import timestamp_field
from datetime import datetime, date
import uuid

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="accounts.id", index=True)
    nurse_id: str = Field(foreign_key="nurse_listings.id", index=True)

    # Nurse snapshot at booking time
    nurse_name: str
    nurse_image: Optional[str] = None
    specialization: Optional[str] = None

    service_type: str
    service_price: int
    appointment_date: date
    appointment_time: str
    payment_method: Optional[str] = None
    insurance_coverage: bool = Field(default=False)
    notes: Optional[str] = None
    status: str = Field(default="pending", index=True)

    rating: Optional[int] = Field(default=None)
    feedback: Optional[str] = None
    rated_at: Optional[datetime] = timestamp_field(default=None)

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()
