# Models package (re-export feature modules for stable imports)
from .users.account import Account
from .users.history import AccountHistory
from .health.nurse import NurseListing, NurseReview
from .health.appointment import Appointment

__all__ = [
    "Account",
    "AccountHistory",
    "NurseListing",
    "NurseReview",
    "Appointment",
]
