from typing import Iterable, List, Optional
import logging

from sqlalchemy import update
from sqlmodel import Session, select

from .....db.models import Appointment, NurseListing, NurseReview
from .....db.models.timestamps import utc_now
from .....application.ports.appointments_repo import (
    AppointmentsRepository,
    AppointmentDto,
    NewAppointment,
)
from .....domain.booking import AppointmentStatus
from .nurse_repository_sql import recompute_listing_rating

logger = logging.getLogger(__name__)


class SqlAppointmentsRepository(AppointmentsRepository):
    def __init__(self, session: Session):
        self.session = session

    def _appt_to_dto(self, a: Appointment) -> AppointmentDto:
        return AppointmentDto(
            id=a.id,
            user_id=a.user_id,
            nurse_id=a.nurse_id,
            nurse_name=a.nurse_name,
            nurse_image=a.nurse_image,
            specialization=a.specialization,
            service_type=a.service_type,
            service_price=a.service_price,
            appointment_date=a.appointment_date,
            appointment_time=a.appointment_time,
            payment_method=a.payment_method,
            insurance_coverage=a.insurance_coverage,
            notes=a.notes,
            status=a.status,
            rating=a.rating,
            feedback=a.feedback,
            rated_at=a.rated_at,
            created_at=a.created_at,
            updated_at=a.updated_at,
        )

    def create(self, data: NewAppointment) -> AppointmentDto:
        appt = Appointment(
            user_id=data.user_id,
            nurse_id=data.nurse_id,
            nurse_name=data.nurse.name,
            nurse_image=data.nurse.image,
            specialization=data.nurse.specialization,
            service_type=data.service_type,
            service_price=data.service_price,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            payment_method=data.payment_method,
            insurance_coverage=data.insurance_coverage,
            notes=data.notes,
            status=AppointmentStatus.PENDING.value,
        )
        self.session.add(appt)
        self.session.commit()
        self.session.refresh(appt)
        return self._appt_to_dto(appt)

    def get_by_id(self, appointment_id: str) -> Optional[AppointmentDto]:
        a = self.session.exec(select(Appointment).where(Appointment.id == appointment_id)).first()
        return self._appt_to_dto(a) if a else None

    def list_for_user(self, user_id: str) -> List[AppointmentDto]:
        rows = self.session.exec(
            select(Appointment)
            .where(Appointment.user_id == user_id)
            .order_by(Appointment.created_at.desc())
        ).all()
        return [self._appt_to_dto(r) for r in rows]

    def list_for_nurse(self, nurse_id: str, status: Optional[str] = None) -> List[AppointmentDto]:
        query = select(Appointment).where(Appointment.nurse_id == nurse_id)
        if status:
            query = query.where(Appointment.status == status)
        rows = self.session.exec(query.order_by(Appointment.created_at.desc())).all()
        return [self._appt_to_dto(r) for r in rows]

    def transition(self, appointment_id: str, legal_from: Iterable[str], to_status: str) -> Optional[AppointmentDto]:
        # Guard and write in one statement: a concurrent writer that got there
        # first leaves zero matching rows.
        result = self.session.exec(
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.status.in_(list(legal_from)))
            .values(status=to_status, updated_at=utc_now())
        )
        if result.rowcount != 1:
            self.session.rollback()
            return None
        self.session.commit()
        return self.get_by_id(appointment_id)

    def record_rating(self, appointment_id: str, user_id: str, rating: int, feedback: str, reviewer_name: str) -> Optional[AppointmentDto]:
        now = utc_now()
        try:
            result = self.session.exec(
                update(Appointment)
                .where(Appointment.id == appointment_id)
                .where(Appointment.user_id == user_id)
                .where(Appointment.status == AppointmentStatus.COMPLETED.value)
                .where(Appointment.rating.is_(None))
                .values(rating=rating, feedback=feedback, rated_at=now, updated_at=now)
            )
            if result.rowcount != 1:
                self.session.rollback()
                return None

            nurse_id = self.session.exec(select(Appointment.nurse_id).where(Appointment.id == appointment_id)).one()
            listing = self.session.exec(
                select(NurseListing).where(NurseListing.id == nurse_id).with_for_update()
            ).first()
            if listing is None:
                raise LookupError(f"Nurse listing {nurse_id} missing for appointment {appointment_id}")

            self.session.add(
                NurseReview(
                    nurse_id=listing.id,
                    appointment_id=appointment_id,
                    reviewer_id=user_id,
                    reviewer_name=reviewer_name,
                    rating=rating,
                    feedback=feedback,
                    created_at=now,
                )
            )
            new_rating = recompute_listing_rating(self.session, listing)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info(f"Nurse {nurse_id} rating recomputed to {new_rating}")
        return self.get_by_id(appointment_id)
