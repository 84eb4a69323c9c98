"""Booking rules shared by the workflow service and the repositories.

The transition table is the single source of truth for which status changes
exist. Repositories apply a transition as a compare-and-set against the
``legal_from`` statuses listed here, so an edge that is not in the table can
never be written.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional


class Role(str, Enum):
    PATIENT = "patient"
    NURSE = "nurse"
    ADMIN = "admin"


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Action(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"
    CANCEL = "cancel"
    COMPLETE = "complete"


class ServiceType(str, Enum):
    CONSULTATION = "Consultation"
    HOME_VISIT = "Home visit"
    EMERGENCY = "Emergency"


SERVICE_PRICES: Dict[ServiceType, int] = {
    ServiceType.CONSULTATION: 500,
    ServiceType.HOME_VISIT: 1200,
    ServiceType.EMERGENCY: 2000,
}


@dataclass(frozen=True)
class Transition:
    role: Role
    legal_from: FrozenSet[AppointmentStatus]
    to: AppointmentStatus


# Nurses may decline a booking they already confirmed; the effect is the same
# as a patient cancellation.
TRANSITIONS: Dict[Action, Transition] = {
    Action.ACCEPT: Transition(
        role=Role.NURSE,
        legal_from=frozenset({AppointmentStatus.PENDING}),
        to=AppointmentStatus.CONFIRMED,
    ),
    Action.DECLINE: Transition(
        role=Role.NURSE,
        legal_from=frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED}),
        to=AppointmentStatus.CANCELLED,
    ),
    Action.CANCEL: Transition(
        role=Role.PATIENT,
        legal_from=frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED}),
        to=AppointmentStatus.CANCELLED,
    ),
    Action.COMPLETE: Transition(
        role=Role.ADMIN,
        legal_from=frozenset({AppointmentStatus.CONFIRMED}),
        to=AppointmentStatus.COMPLETED,
    ),
}

MIN_RATING = 1
MAX_RATING = 5


def canonical_price(service_type: str) -> Optional[int]:
    try:
        return SERVICE_PRICES[ServiceType(service_type)]
    except ValueError:
        return None


def round_rating(ratings: Iterable[int]) -> Optional[float]:
    """Mean of ``ratings`` rounded half-up to one decimal place.

    Decimal arithmetic keeps the result independent of float representation,
    so 4.25 always becomes 4.3. Returns None for an empty sequence.
    """
    values = list(ratings)
    if not values:
        return None
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class NurseSnapshot:
    """Nurse display fields as the patient saw them at booking time."""
    name: str
    image: Optional[str]
    specialization: Optional[str]


@dataclass(frozen=True)
class Actor:
    """Authenticated caller, passed explicitly into every workflow call."""
    account_id: str
    role: Role

    @property
    def is_patient(self) -> bool:
        return self.role == Role.PATIENT

    @property
    def is_nurse(self) -> bool:
        return self.role == Role.NURSE

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
