from typing import Any, Dict, List, Optional
from sqlmodel import Session, select

from .....db.models import Appointment, NurseListing, NurseReview
from .....db.models.timestamps import utc_now
from .....application.ports.nurse_repo import (
    NurseRepository,
    NurseListingDto,
    NurseReviewDto,
    DISPLAY_FIELDS,
    PROFESSIONAL_FIELDS,
)
from .....domain.booking import round_rating

EDITABLE_FIELDS = set(DISPLAY_FIELDS) | set(PROFESSIONAL_FIELDS) | {"is_active"}


def listing_to_dto(n: NurseListing) -> NurseListingDto:
    return NurseListingDto(
        id=n.id,
        account_id=n.account_id,
        name=n.name,
        specialization=n.specialization,
        hourly_rate=n.hourly_rate,
        experience=n.experience,
        license_number=n.license_number,
        certifications=n.certifications,
        profile_image=n.profile_image,
        is_active=n.is_active,
        rating=n.rating,
        review_count=n.review_count,
        created_at=n.created_at,
        updated_at=n.updated_at,
    )


def review_to_dto(r: NurseReview) -> NurseReviewDto:
    return NurseReviewDto(
        id=r.id,
        nurse_id=r.nurse_id,
        appointment_id=r.appointment_id,
        reviewer_id=r.reviewer_id,
        reviewer_name=r.reviewer_name,
        rating=r.rating,
        feedback=r.feedback,
        created_at=r.created_at,
    )


def recompute_listing_rating(session: Session, listing: NurseListing) -> Optional[float]:
    """Set ``listing.rating`` to the rounded mean of every rated appointment.

    Leaves the listing untouched when no appointment carries a rating. The
    caller owns the transaction.
    """
    ratings = session.exec(
        select(Appointment.rating)
        .where(Appointment.nurse_id == listing.id)
        .where(Appointment.rating.is_not(None))
    ).all()
    rating = round_rating(ratings)
    if rating is None:
        return None
    listing.rating = rating
    listing.review_count = len(ratings)
    listing.updated_at = utc_now()
    session.add(listing)
    return rating


class SqlNurseRepository(NurseRepository):
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, listing_id: str) -> Optional[NurseListingDto]:
        n = self.session.exec(select(NurseListing).where(NurseListing.id == listing_id)).first()
        return listing_to_dto(n) if n else None

    def get_by_account(self, account_id: str) -> Optional[NurseListingDto]:
        n = self.session.exec(select(NurseListing).where(NurseListing.account_id == account_id)).first()
        return listing_to_dto(n) if n else None

    def create(self, account_id: str, name: str, rating: float, profile_image: Optional[str], specialization: str = "") -> NurseListingDto:
        n = NurseListing(
            account_id=account_id,
            name=name,
            rating=rating,
            profile_image=profile_image,
            specialization=specialization,
        )
        self.session.add(n)
        self.session.commit()
        self.session.refresh(n)
        return listing_to_dto(n)

    def update_fields(self, listing_id: str, fields: Dict[str, Any]) -> Optional[NurseListingDto]:
        n = self.session.exec(select(NurseListing).where(NurseListing.id == listing_id)).first()
        if not n:
            return None
        for key, value in fields.items():
            if key in EDITABLE_FIELDS:
                setattr(n, key, value)
        n.updated_at = utc_now()
        self.session.add(n)
        self.session.commit()
        self.session.refresh(n)
        return listing_to_dto(n)

    def list_active(self, specialization: Optional[str] = None, min_rating: Optional[float] = None, sort: Optional[str] = None) -> List[NurseListingDto]:
        query = select(NurseListing).where(NurseListing.is_active == True)  # noqa: E712
        if specialization:
            query = query.where(NurseListing.specialization.ilike(f"%{specialization}%"))
        if min_rating is not None:
            query = query.where(NurseListing.rating >= min_rating)
        if sort == "rating-low":
            query = query.order_by(NurseListing.rating.asc(), NurseListing.name)
        elif sort == "rating-high":
            query = query.order_by(NurseListing.rating.desc(), NurseListing.name)
        else:
            query = query.order_by(NurseListing.created_at.desc())
        return [listing_to_dto(n) for n in self.session.exec(query).all()]

    def list_reviews(self, listing_id: str) -> List[NurseReviewDto]:
        rows = self.session.exec(
            select(NurseReview)
            .where(NurseReview.nurse_id == listing_id)
            .order_by(NurseReview.created_at.desc(), NurseReview.id.desc())
        ).all()
        return [review_to_dto(r) for r in rows]

    def list_ids(self) -> List[str]:
        return list(self.session.exec(select(NurseListing.id)).all())

    def recompute_rating(self, listing_id: str) -> Optional[float]:
        n = self.session.exec(
            select(NurseListing).where(NurseListing.id == listing_id).with_for_update()
        ).first()
        if not n:
            return None
        try:
            rating = recompute_listing_rating(self.session, n)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return rating
