from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol
from datetime import datetime, date

from ...domain.booking import NurseSnapshot


@dataclass
class AppointmentDto:
    id: str
    user_id: str
    nurse_id: str
    nurse_name: str
    nurse_image: Optional[str]
    specialization: Optional[str]
    service_type: str
    service_price: int
    appointment_date: date
    appointment_time: str
    payment_method: Optional[str]
    insurance_coverage: bool
    notes: Optional[str]
    status: str
    rating: Optional[int]
    feedback: Optional[str]
    rated_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


@dataclass
class NewAppointment:
    user_id: str
    nurse_id: str
    nurse: NurseSnapshot
    service_type: str
    service_price: int
    appointment_date: date
    appointment_time: str
    payment_method: Optional[str]
    insurance_coverage: bool
    notes: Optional[str] = None


class AppointmentsRepository(Protocol):
    def create(self, data: NewAppointment) -> AppointmentDto:
        ...

    def get_by_id(self, appointment_id: str) -> Optional[AppointmentDto]:
        ...

    def list_for_user(self, user_id: str) -> List[AppointmentDto]:
        ...

    def list_for_nurse(self, nurse_id: str, status: Optional[str] = None) -> List[AppointmentDto]:
        ...

    def transition(self, appointment_id: str, legal_from: Iterable[str], to_status: str) -> Optional[AppointmentDto]:
        """Compare-and-set the status. Returns None when the stored status was not in ``legal_from``."""
        ...

    def record_rating(self, appointment_id: str, user_id: str, rating: int, feedback: str, reviewer_name: str) -> Optional[AppointmentDto]:
        """Attach the rating and refresh the nurse aggregate in one transaction.

        Returns None when the appointment is no longer completed-and-unrated.
        """
        ...
