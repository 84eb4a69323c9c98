from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol
from datetime import datetime, timezone


@dataclass
class NurseListingDto:
    id: str
    account_id: str
    name: str
    specialization: str
    hourly_rate: str
    experience: str
    license_number: str
    certifications: str
    profile_image: Optional[str]
    is_active: bool
    rating: float
    review_count: int
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class NurseReviewDto:
    id: int
    nurse_id: str
    appointment_id: str
    reviewer_id: str
    reviewer_name: str
    rating: int
    feedback: str
    created_at: datetime


# Fields a profile or directory edit may touch. rating, review_count and
# reviews are written only by the rating workflow.
DISPLAY_FIELDS = ("name", "profile_image", "specialization")
PROFESSIONAL_FIELDS = ("specialization", "hourly_rate", "experience", "license_number", "certifications")


class NurseRepository(Protocol):
    def get_by_id(self, listing_id: str) -> Optional[NurseListingDto]:
        ...

    def get_by_account(self, account_id: str) -> Optional[NurseListingDto]:
        ...

    def create(self, account_id: str, name: str, rating: float, profile_image: Optional[str], specialization: str = "") -> NurseListingDto:
        ...

    def update_fields(self, listing_id: str, fields: Dict[str, Any]) -> Optional[NurseListingDto]:
        ...

    def list_active(self, specialization: Optional[str] = None, min_rating: Optional[float] = None, sort: Optional[str] = None) -> List[NurseListingDto]:
        ...

    def list_reviews(self, listing_id: str) -> List[NurseReviewDto]:
        ...

    def list_ids(self) -> List[str]:
        ...

    def recompute_rating(self, listing_id: str) -> Optional[float]:
        ...
