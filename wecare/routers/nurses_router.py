from dataclasses import asdict
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_current_actor, get_directory_service
from ..domain.booking import Actor
from ..application.services.nurse_directory_service import NurseDirectoryService
from ..schemas import (
    AvailabilityRequest,
    NurseDetailResponse,
    NurseListingResponse,
    NurseReviewResponse,
    UpdateNurseRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nurses", tags=["Nurses"])


@router.get("", response_model=List[NurseListingResponse])
def browse_nurses(
    specialization: Optional[str] = None,
    min_rating: Optional[float] = Query(None, alias="minRating"),
    sort: Optional[str] = None,
    actor: Actor = Depends(get_current_actor),
    directory: NurseDirectoryService = Depends(get_directory_service),
):
    return directory.browse(specialization=specialization, min_rating=min_rating, sort=sort)


# /me routes are declared before /{nurse_id} so "me" is never read as an id
@router.get("/me", response_model=NurseListingResponse)
def get_my_listing(actor: Actor = Depends(get_current_actor), directory: NurseDirectoryService = Depends(get_directory_service)):
    return directory.get_own_listing(actor)


@router.put("/me", response_model=NurseListingResponse)
def update_my_listing(
    payload: UpdateNurseRequest,
    actor: Actor = Depends(get_current_actor),
    directory: NurseDirectoryService = Depends(get_directory_service),
):
    return directory.update_professional_details(actor, payload.model_dump(exclude_unset=True))


@router.put("/me/availability", response_model=NurseListingResponse)
def set_my_availability(
    payload: AvailabilityRequest,
    actor: Actor = Depends(get_current_actor),
    directory: NurseDirectoryService = Depends(get_directory_service),
):
    listing = directory.set_active(actor, payload.is_active)
    logger.info(f"Nurse {listing.id} availability set to {listing.is_active}")
    return listing


@router.get("/{nurse_id}", response_model=NurseDetailResponse)
def get_nurse(nurse_id: str, actor: Actor = Depends(get_current_actor), directory: NurseDirectoryService = Depends(get_directory_service)):
    listing = directory.get_listing(nurse_id)
    reviews = directory.reviews(nurse_id)
    return NurseDetailResponse(
        **asdict(listing),
        reviews=[NurseReviewResponse.model_validate(r) for r in reviews],
    )


@router.get("/{nurse_id}/reviews", response_model=List[NurseReviewResponse])
def get_nurse_reviews(nurse_id: str, actor: Actor = Depends(get_current_actor), directory: NurseDirectoryService = Depends(get_directory_service)):
    return directory.reviews(nurse_id)
