from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_appointments_service, get_current_actor
from ..domain.booking import Actor
from ..application.services.appointments_service import AppointmentsService
from ..schemas import AppointmentCreate, AppointmentResponse, RateAppointmentRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.post("", response_model=AppointmentResponse, status_code=201)
def book_appointment(
    appointment_data: AppointmentCreate,
    actor: Actor = Depends(get_current_actor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        return appt_service.book(
            actor,
            nurse_id=appointment_data.nurse_id,
            service_type=appointment_data.service_type,
            service_price=appointment_data.service_price,
            appointment_date=appointment_data.appointment_date,
            appointment_time=appointment_data.appointment_time,
            payment_method=appointment_data.payment_method,
            insurance_coverage=appointment_data.insurance_coverage,
            notes=appointment_data.notes,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error booking appointment: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to book appointment")


@router.get("", response_model=List[AppointmentResponse])
def get_my_appointments(
    actor: Actor = Depends(get_current_actor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return appt_service.list_for_patient(actor)


@router.get("/nurse", response_model=List[AppointmentResponse])
def get_nurse_appointments(
    status: Optional[str] = None,
    actor: Actor = Depends(get_current_actor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return appt_service.list_for_nurse(actor, status=status)


@router.get("/nurse/pending", response_model=List[AppointmentResponse])
def get_nurse_pending_appointments(
    actor: Actor = Depends(get_current_actor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return appt_service.list_pending_for_nurse(actor)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: str,
    actor: Actor = Depends(get_current_actor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return appt_service.get_for_actor(appointment_id, actor)


@router.put("/{appointment_id}/accept", response_model=AppointmentResponse)
def accept_appointment(
    appointment_id: str,
    actor: Actor = Depends(get_current_actor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return appt_service.accept(appointment_id, actor)


@router.put("/{appointment_id}/decline", response_model=AppointmentResponse)
def decline_appointment(
    appointment_id: str,
    actor: Actor = Depends(get_current_actor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return appt_service.decline(appointment_id, actor)


@router.put("/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: str,
    actor: Actor = Depends(get_current_actor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return appt_service.cancel(appointment_id, actor)


@router.put("/{appointment_id}/complete", response_model=AppointmentResponse)
def complete_appointment(
    appointment_id: str,
    actor: Actor = Depends(get_current_actor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return appt_service.complete(appointment_id, actor)


@router.post("/{appointment_id}/rate", response_model=AppointmentResponse)
def rate_appointment(
    appointment_id: str,
    payload: RateAppointmentRequest,
    actor: Actor = Depends(get_current_actor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    """Rate a completed appointment once and fold the score into the nurse's rating."""
    return appt_service.rate(appointment_id, actor, payload.rating, payload.feedback)
