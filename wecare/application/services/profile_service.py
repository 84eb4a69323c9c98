from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from datetime import datetime, date
import io
import logging
import os

from PIL import Image, UnidentifiedImageError

from ..ports.account_repo import AccountRepository, AccountDto, HistoryEntryDto, PROFILE_FIELDS
from ..ports.storage_repo import StorageRepository
from .nurse_directory_service import NurseDirectoryService
from ...domain.booking import Actor
from ...exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

GENDERS = ("male", "female", "other", "")
IMAGE_FORMATS = ("JPEG", "PNG", "WEBP")


@dataclass
class ProfileService:
    account_repo: AccountRepository
    directory: NurseDirectoryService
    storage_repo: Optional[StorageRepository] = None

    def get_profile(self, actor: Actor) -> AccountDto:
        account = self.account_repo.get_by_id(actor.account_id)
        if not account:
            raise NotFoundError("Account not found")
        return account

    def update_profile(self, actor: Actor, changes: Dict[str, Any]) -> AccountDto:
        fields = {k: v for k, v in changes.items() if k in PROFILE_FIELDS and v is not None}
        errors = {}
        if "name" in fields:
            fields["name"] = str(fields["name"]).strip()
            if not fields["name"]:
                errors["name"] = "Name cannot be empty"
        if "gender" in fields and fields["gender"] not in GENDERS:
            errors["gender"] = "Gender must be male, female or other"
        if "dob" in fields and not isinstance(fields["dob"], date):
            try:
                fields["dob"] = datetime.strptime(str(fields["dob"]), "%Y-%m-%d").date()
            except ValueError:
                errors["dob"] = "Invalid date format. Use YYYY-MM-DD"
        if "dob" in fields and "dob" not in errors and fields["dob"] > date.today():
            errors["dob"] = "Date of birth cannot be in the future"
        if errors:
            raise ValidationError("Invalid profile update", errors)

        account = self.account_repo.update_profile_fields(actor.account_id, fields)
        if not account:
            raise NotFoundError("Account not found")
        if actor.is_nurse:
            display = dict(fields)
            if changes.get("specialization") is not None:
                display["specialization"] = str(changes["specialization"]).strip()
            self.directory.sync_display_fields(actor.account_id, display)
        return account

    def upload_profile_image(self, actor: Actor, filename: str, content_type: str, data: bytes,
                             allowed_types=("image/jpeg", "image/png", "image/webp"), max_size: int = 5 * 1024 * 1024) -> AccountDto:
        if content_type not in allowed_types:
            raise ValidationError("Unsupported image type", {"image": f"Allowed types: {', '.join(allowed_types)}"})
        if not data:
            raise ValidationError("Empty upload", {"image": "File is empty"})
        if len(data) > max_size:
            raise ValidationError("Image too large", {"image": f"Image must be smaller than {max_size // (1024 * 1024)}MB"})
        try:
            with Image.open(io.BytesIO(data)) as img:
                img_format = img.format
                img.verify()
        except (UnidentifiedImageError, OSError, ValueError):
            raise ValidationError("Invalid image", {"image": "File is not a readable image"})
        if img_format not in IMAGE_FORMATS:
            raise ValidationError("Invalid image", {"image": "Image must be JPEG, PNG, or WebP format"})

        safe_name = os.path.basename(filename or "profile.jpg").replace(" ", "_")
        url = self.storage_repo.save_bytes("profile", f"{actor.account_id}_{safe_name}", data)
        logger.info(f"Stored profile image for account {actor.account_id}")
        return self.update_profile(actor, {"profile_image": url})

    def history(self, actor: Actor) -> List[HistoryEntryDto]:
        return self.account_repo.list_history(actor.account_id)
