import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ..config import settings
from ..dependencies import get_current_actor, get_profile_service
from ..domain.booking import Actor
from ..application.services.profile_service import ProfileService
from ..schemas import AccountResponse, HistoryEntryResponse, UpdateProfileRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=AccountResponse)
def get_profile(actor: Actor = Depends(get_current_actor), profiles: ProfileService = Depends(get_profile_service)):
    return profiles.get_profile(actor)


@router.put("", response_model=AccountResponse)
def update_profile(
    payload: UpdateProfileRequest,
    actor: Actor = Depends(get_current_actor),
    profiles: ProfileService = Depends(get_profile_service),
):
    return profiles.update_profile(actor, payload.model_dump(exclude_unset=True))


@router.post("/image", response_model=AccountResponse)
async def upload_profile_image(
    image: UploadFile = File(...),
    actor: Actor = Depends(get_current_actor),
    profiles: ProfileService = Depends(get_profile_service),
):
    try:
        data = await image.read()
        return profiles.upload_profile_image(
            actor,
            image.filename,
            image.content_type,
            data,
            allowed_types=settings.ALLOWED_IMAGE_TYPES,
            max_size=settings.MAX_FILE_SIZE,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error uploading profile image for {actor.account_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to upload image")


@router.get("/history", response_model=List[HistoryEntryResponse])
def get_history(actor: Actor = Depends(get_current_actor), profiles: ProfileService = Depends(get_profile_service)):
    return profiles.history(actor)
