from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
from datetime import datetime, date
import logging

from ..ports.appointments_repo import AppointmentsRepository, AppointmentDto, NewAppointment
from ..ports.nurse_repo import NurseRepository
from ..ports.account_repo import AccountRepository
from ..ports.audit_logger import AuditLogger
from ...domain.booking import (
    Action,
    Actor,
    AppointmentStatus,
    MAX_RATING,
    MIN_RATING,
    NurseSnapshot,
    Role,
    SERVICE_PRICES,
    TRANSITIONS,
    Transition,
    canonical_price,
)
from ...exceptions import (
    APIException,
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class AppointmentsService:
    """Booking workflow: creation, role-scoped status transitions and rating.

    Every call receives the acting account explicitly. Guards run in a fixed
    order: the appointment must exist, the actor must hold the right role and
    own the appointment, and only then is the current status checked. The
    status write itself is a compare-and-set in the repository, so a guard
    that passed on a stale read still cannot produce an illegal edge.
    """
    repo: AppointmentsRepository
    nurse_repo: NurseRepository
    account_repo: AccountRepository
    audit: Optional[AuditLogger] = None
    strict_pricing: bool = True

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def book(
        self,
        actor: Actor,
        nurse_id: Optional[str],
        service_type: Optional[str],
        service_price: Optional[int],
        appointment_date: Union[str, date, None],
        appointment_time: Optional[str],
        payment_method: Optional[str] = None,
        insurance_coverage: bool = False,
        notes: Optional[str] = None,
    ) -> AppointmentDto:
        if not actor.is_patient:
            raise AuthorizationError("Only patients can book appointments")

        errors: Dict[str, str] = {}
        if not nurse_id:
            errors["nurseId"] = "Nurse is required"

        expected_price = None
        if not service_type:
            errors["serviceType"] = "Service type is required"
        else:
            expected_price = canonical_price(service_type)
            if expected_price is None:
                options = ", ".join(s.value for s in SERVICE_PRICES)
                errors["serviceType"] = f"Service type must be one of: {options}"

        if service_price is None:
            errors["servicePrice"] = "Service price is required"
        elif isinstance(service_price, bool) or not isinstance(service_price, int) or service_price < 0:
            errors["servicePrice"] = "Service price must be a non-negative integer"
        elif self.strict_pricing and expected_price is not None and service_price != expected_price:
            errors["servicePrice"] = f"Price for {service_type} is {expected_price}"

        parsed_date = self._parse_date(appointment_date, errors)

        if not appointment_time or not str(appointment_time).strip():
            errors["appointmentTime"] = "Appointment time is required"

        if errors:
            raise ValidationError("Invalid booking request", errors)

        nurse = self.nurse_repo.get_by_id(nurse_id)
        if not nurse:
            raise NotFoundError("Nurse not found")
        if not nurse.is_active:
            raise ValidationError("Nurse is not available", {"nurseId": "Nurse is not accepting bookings"})

        appt = self.repo.create(
            NewAppointment(
                user_id=actor.account_id,
                nurse_id=nurse.id,
                nurse=NurseSnapshot(name=nurse.name, image=nurse.profile_image, specialization=nurse.specialization),
                service_type=service_type,
                service_price=service_price,
                appointment_date=parsed_date,
                appointment_time=str(appointment_time).strip(),
                payment_method=payment_method,
                insurance_coverage=bool(insurance_coverage),
                notes=notes,
            )
        )
        logger.info(f"Appointment {appt.id} booked by {actor.account_id} with nurse {nurse.id}")
        self._audit("book", actor, appt.id, details={"nurseId": nurse.id, "serviceType": service_type})
        self._record_history(actor.account_id, appt)
        return appt

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_for_patient(self, actor: Actor) -> List[AppointmentDto]:
        if not actor.is_patient:
            raise AuthorizationError("Only patients have booked appointments")
        return self.repo.list_for_user(actor.account_id)

    def list_pending_for_nurse(self, actor: Actor) -> List[AppointmentDto]:
        listing_id = self._nurse_listing_id(actor)
        return self.repo.list_for_nurse(listing_id, status=AppointmentStatus.PENDING.value)

    def list_for_nurse(self, actor: Actor, status: Optional[str] = None) -> List[AppointmentDto]:
        if status is not None and status not in {s.value for s in AppointmentStatus}:
            raise ValidationError("Invalid status filter", {"status": f"Unknown status '{status}'"})
        listing_id = self._nurse_listing_id(actor)
        return self.repo.list_for_nurse(listing_id, status=status)

    def get_for_actor(self, appointment_id: str, actor: Actor) -> AppointmentDto:
        appt = self._get_or_404(appointment_id)
        if actor.is_admin:
            return appt
        if actor.is_patient and appt.user_id == actor.account_id:
            return appt
        if actor.is_nurse and self._owns_as_nurse(actor, appt):
            return appt
        raise AuthorizationError()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def transition(self, appointment_id: str, actor: Actor, action: Union[Action, str]) -> AppointmentDto:
        try:
            action = Action(action)
        except ValueError:
            raise ValidationError("Unknown action", {"action": f"Unknown action '{action}'"})
        rule = TRANSITIONS[action]

        appt = self._get_or_404(appointment_id)
        self._authorize(appt, actor, rule)

        legal_from = [s.value for s in rule.legal_from]
        if appt.status not in legal_from:
            raise InvalidStateError(
                f"Cannot {action.value} an appointment that is {appt.status}", current_status=appt.status
            )

        updated = self.repo.transition(appointment_id, legal_from, rule.to.value)
        if updated is None:
            # Lost a race: another request moved the status after our read
            current = self.repo.get_by_id(appointment_id)
            current_status = current.status if current else None
            self._audit(action.value, actor, appointment_id, success=False, details={"currentStatus": current_status})
            raise InvalidStateError(
                f"Cannot {action.value} an appointment that is {current_status}", current_status=current_status
            )

        logger.info(f"Appointment {appointment_id} {appt.status} -> {updated.status} by {actor.role.value} {actor.account_id}")
        self._audit(action.value, actor, appointment_id, details={"from": appt.status, "to": updated.status})
        return updated

    def accept(self, appointment_id: str, actor: Actor) -> AppointmentDto:
        return self.transition(appointment_id, actor, Action.ACCEPT)

    def decline(self, appointment_id: str, actor: Actor) -> AppointmentDto:
        return self.transition(appointment_id, actor, Action.DECLINE)

    def cancel(self, appointment_id: str, actor: Actor) -> AppointmentDto:
        return self.transition(appointment_id, actor, Action.CANCEL)

    def complete(self, appointment_id: str, actor: Actor) -> AppointmentDto:
        return self.transition(appointment_id, actor, Action.COMPLETE)

    # ------------------------------------------------------------------
    # Rating
    # ------------------------------------------------------------------
    def rate(self, appointment_id: str, actor: Actor, rating: Any, feedback: Optional[str] = None) -> AppointmentDto:
        appt = self._get_or_404(appointment_id)
        if not actor.is_patient:
            raise AuthorizationError("Only patients can rate appointments")
        if appt.user_id != actor.account_id:
            raise AuthorizationError()
        if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError("Invalid rating", {"rating": f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}"})
        if appt.status != AppointmentStatus.COMPLETED.value:
            raise InvalidStateError("Only completed appointments can be rated", current_status=appt.status)
        if appt.rating is not None:
            raise InvalidStateError("Appointment has already been rated", current_status=appt.status)

        patient = self.account_repo.get_by_id(actor.account_id)
        reviewer_name = patient.name if patient else ""
        feedback = (feedback or "").strip()

        try:
            updated = self.repo.record_rating(appointment_id, actor.account_id, rating, feedback, reviewer_name)
        except APIException:
            raise
        except Exception:
            logger.exception(
                f"Failed to record rating for appointment {appointment_id}; nurse {appt.nurse_id} may need reconciliation"
            )
            self._audit("rate", actor, appointment_id, success=False, details={"nurseId": appt.nurse_id})
            raise APIException(500, "Failed to record rating")

        if updated is None:
            current = self.repo.get_by_id(appointment_id)
            raise InvalidStateError(
                "Appointment can no longer be rated", current_status=current.status if current else None
            )

        logger.info(f"Appointment {appointment_id} rated {rating} by {actor.account_id}")
        self._audit("rate", actor, appointment_id, details={"nurseId": appt.nurse_id, "rating": rating})
        return updated

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _get_or_404(self, appointment_id: str) -> AppointmentDto:
        appt = self.repo.get_by_id(appointment_id)
        if not appt:
            raise NotFoundError("Appointment not found")
        return appt

    def _authorize(self, appt: AppointmentDto, actor: Actor, rule: Transition) -> None:
        if actor.role != rule.role:
            raise AuthorizationError()
        if rule.role == Role.PATIENT and appt.user_id != actor.account_id:
            raise AuthorizationError()
        if rule.role == Role.NURSE and not self._owns_as_nurse(actor, appt):
            raise AuthorizationError()

    def _owns_as_nurse(self, actor: Actor, appt: AppointmentDto) -> bool:
        listing = self.nurse_repo.get_by_account(actor.account_id)
        return listing is not None and listing.id == appt.nurse_id

    def _nurse_listing_id(self, actor: Actor) -> str:
        if not actor.is_nurse:
            raise AuthorizationError("Only nurses have an appointment queue")
        listing = self.nurse_repo.get_by_account(actor.account_id)
        if not listing:
            raise NotFoundError("Nurse listing not found")
        return listing.id

    @staticmethod
    def _parse_date(value: Union[str, date, None], errors: Dict[str, str]) -> Optional[date]:
        if value is None or value == "":
            errors["appointmentDate"] = "Appointment date is required"
            return None
        if isinstance(value, datetime):
            parsed = value.date()
        elif isinstance(value, date):
            parsed = value
        else:
            try:
                parsed = datetime.strptime(str(value), "%Y-%m-%d").date()
            except ValueError:
                errors["appointmentDate"] = "Invalid appointment date format. Use YYYY-MM-DD"
                return None
        if parsed < date.today():
            errors["appointmentDate"] = "Appointment date cannot be in the past"
            return None
        return parsed

    def _record_history(self, account_id: str, appt: AppointmentDto) -> None:
        try:
            self.account_repo.add_history_entry(
                account_id,
                category="appointment",
                notes=f"{appt.service_type} with {appt.nurse_name}",
                meta={
                    "appointmentId": appt.id,
                    "nurseId": appt.nurse_id,
                    "appointmentDate": appt.appointment_date.isoformat(),
                    "appointmentTime": appt.appointment_time,
                },
            )
        except Exception:
            logger.exception(f"Failed to write history entry for appointment {appt.id}")

    def _audit(self, action: str, actor: Actor, target_id: Optional[str], success: bool = True, details=None) -> None:
        if self.audit:
            self.audit.log(action, actor_id=actor.account_id, target_id=target_id, success=success, details=details)
