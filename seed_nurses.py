#!/usr/bin/env python3
"""
Seed the nurse directory with sample nurses.

Each sample gets a nurse account (so it can log in and work its queue) and a
listing. Existing accounts with the same email are left alone, so the script
can be re-run safely.
"""
import os
import sys

from dotenv import load_dotenv
from sqlmodel import Session, select

load_dotenv()

from wecare.config import settings
from wecare.database import create_db_and_tables, engine
from wecare.db.models import Account, NurseListing
from wecare.domain.booking import Role
from wecare.infrastructure.security.passlib_hasher import PasslibPasswordHasher

SAMPLE_NURSES = [
    {
        "name": "Priya Sharma",
        "specialization": "General Home Care Nurse",
        "rating": 4.8,
        "review_count": 145,
        "profile_image": "https://i.pinimg.com/736x/42/96/46/429646366c50688783ed4239528f7e95.jpg",
        "hourly_rate": "500",
        "experience": "8 years",
        "license_number": "LN-2024-001",
    },
    {
        "name": "Anjali Kumar",
        "specialization": "Elderly Care Specialist",
        "rating": 4.9,
        "review_count": 203,
        "profile_image": "https://i.pinimg.com/736x/a3/4f/96/a34f968ab546da32e3d2a7a542655e6a.jpg",
        "hourly_rate": "550",
        "experience": "10 years",
        "license_number": "LN-2024-002",
    },
    {
        "name": "Neha Patel",
        "specialization": "Post-Surgery Care Specialist",
        "rating": 4.5,
        "review_count": 98,
        "profile_image": "https://i.pinimg.com/736x/59/8c/80/598c809632f9de89259c069ef1d9bee8.jpg",
        "hourly_rate": "600",
        "experience": "6 years",
        "license_number": "LN-2024-003",
    },
    {
        "name": "Meera Singh",
        "specialization": "Child Care Nurse",
        "rating": 4.7,
        "review_count": 167,
        "profile_image": "https://i.pinimg.com/736x/ad/6c/b0/ad6cb07e44a5e63ffc89d7723b181052.jpg",
        "hourly_rate": "480",
        "experience": "7 years",
        "license_number": "LN-2024-004",
    },
    {
        "name": "Divya Gupta",
        "specialization": "Critical Care Nurse",
        "rating": 4.9,
        "review_count": 189,
        "profile_image": None,
        "hourly_rate": "700",
        "experience": "12 years",
        "license_number": "LN-2024-005",
    },
    {
        "name": "Isha Verma",
        "specialization": "Wound Care Specialist",
        "rating": 4.6,
        "review_count": 112,
        "profile_image": None,
        "hourly_rate": "580",
        "experience": "9 years",
        "license_number": "LN-2024-006",
    },
]


def seed_email(name: str) -> str:
    return name.lower().replace(" ", ".") + "@wecare.example"


def seed_nurses(password: str) -> int:
    create_db_and_tables()
    hasher = PasslibPasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    created = 0
    with Session(engine) as session:
        for sample in SAMPLE_NURSES:
            email = seed_email(sample["name"])
            if session.exec(select(Account).where(Account.email == email)).first():
                print(f"Skipping {sample['name']}: {email} already exists")
                continue
            image = sample["profile_image"] or settings.DEFAULT_NURSE_IMAGE
            account = Account(
                name=sample["name"],
                email=email,
                password_hash=hasher.hash(password),
                role=Role.NURSE.value,
                profile_image=image,
            )
            session.add(account)
            session.flush()
            session.add(
                NurseListing(
                    account_id=account.id,
                    name=sample["name"],
                    specialization=sample["specialization"],
                    hourly_rate=sample["hourly_rate"],
                    experience=sample["experience"],
                    license_number=sample["license_number"],
                    profile_image=image,
                    rating=sample["rating"],
                    review_count=sample["review_count"],
                    is_active=True,
                )
            )
            created += 1
        session.commit()

        listings = session.exec(select(NurseListing).order_by(NurseListing.name)).all()
        print(f"Total nurses in directory: {len(listings)}")
        for idx, listing in enumerate(listings, start=1):
            print(f"{idx}. {listing.name} ({listing.specialization}) - {listing.rating}")
    return created


if __name__ == "__main__":
    try:
        count = seed_nurses(os.environ.get("SEED_NURSE_PASSWORD", "ChangeMe123!"))
        print(f"Seeding complete: {count} nurses added")
    except Exception as e:
        print(f"Seeding failed: {e}")
        sys.exit(1)
