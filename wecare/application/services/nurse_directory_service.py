from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from ..ports.nurse_repo import NurseRepository, NurseListingDto, NurseReviewDto, DISPLAY_FIELDS, PROFESSIONAL_FIELDS
from ..ports.account_repo import AccountDto
from ...domain.booking import Actor, Role
from ...exceptions import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("rating-high", "rating-low")


@dataclass
class NurseDirectoryService:
    nurse_repo: NurseRepository
    default_rating: float = 4.5
    default_image: Optional[str] = None

    def create_listing(self, account: AccountDto) -> NurseListingDto:
        """Create the public listing for a freshly registered nurse account."""
        listing = self.nurse_repo.create(
            account_id=account.id,
            name=account.name,
            rating=self.default_rating,
            profile_image=account.profile_image or self.default_image,
        )
        logger.info(f"Created nurse listing {listing.id} for account {account.id}")
        return listing

    def ensure_listing(self, account: AccountDto) -> Optional[NurseListingDto]:
        if account.role != Role.NURSE.value:
            return None
        listing = self.nurse_repo.get_by_account(account.id)
        if listing:
            return listing
        logger.warning(f"Nurse account {account.id} had no listing; recreating it")
        return self.create_listing(account)

    def sync_display_fields(self, account_id: str, changes: Dict[str, Any]) -> Optional[NurseListingDto]:
        """Copy name, image and specialization edits from the account into its listing."""
        listing = self.nurse_repo.get_by_account(account_id)
        if not listing:
            return None
        fields = {k: v for k, v in changes.items() if k in DISPLAY_FIELDS and v is not None}
        if not fields:
            return listing
        return self.nurse_repo.update_fields(listing.id, fields)

    def get_listing(self, listing_id: str) -> NurseListingDto:
        listing = self.nurse_repo.get_by_id(listing_id)
        if not listing:
            raise NotFoundError("Nurse not found")
        return listing

    def get_own_listing(self, actor: Actor) -> NurseListingDto:
        if not actor.is_nurse:
            raise AuthorizationError("Only nurses have a directory listing")
        listing = self.nurse_repo.get_by_account(actor.account_id)
        if not listing:
            raise NotFoundError("Nurse listing not found")
        return listing

    def update_professional_details(self, actor: Actor, changes: Dict[str, Any]) -> NurseListingDto:
        listing = self.get_own_listing(actor)
        fields = {k: v for k, v in changes.items() if k in PROFESSIONAL_FIELDS and v is not None}
        if not fields:
            return listing
        updated = self.nurse_repo.update_fields(listing.id, fields)
        return updated or listing

    def set_active(self, actor: Actor, is_active: bool) -> NurseListingDto:
        listing = self.get_own_listing(actor)
        updated = self.nurse_repo.update_fields(listing.id, {"is_active": bool(is_active)})
        logger.info(f"Nurse listing {listing.id} visibility set to {bool(is_active)}")
        return updated or listing

    def browse(self, specialization: Optional[str] = None, min_rating: Optional[float] = None, sort: Optional[str] = None) -> List[NurseListingDto]:
        if sort is not None and sort not in SORT_OPTIONS:
            raise ValidationError("Invalid sort option", {"sort": f"Must be one of: {', '.join(SORT_OPTIONS)}"})
        if min_rating is not None and not 0 <= min_rating <= 5:
            raise ValidationError("Invalid rating filter", {"minRating": "Must be between 0 and 5"})
        return self.nurse_repo.list_active(specialization=specialization, min_rating=min_rating, sort=sort)

    def reviews(self, listing_id: str) -> List[NurseReviewDto]:
        self.get_listing(listing_id)
        return self.nurse_repo.list_reviews(listing_id)

    def reconcile_ratings(self) -> Dict[str, float]:
        """Recompute every listing's aggregate from its rated appointments.

        Listings without any rated appointment keep their current rating.
        Returns the recomputed ratings keyed by listing id.
        """
        updated: Dict[str, float] = {}
        for listing_id in self.nurse_repo.list_ids():
            rating = self.nurse_repo.recompute_rating(listing_id)
            if rating is not None:
                updated[listing_id] = rating
        logger.info(f"Reconciled ratings for {len(updated)} nurse listings")
        return updated
