from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol
from datetime import datetime, date, timezone


@dataclass
class AccountDto:
    id: str
    name: str
    email: str
    role: str
    password_hash: str
    phone: str = ""
    dob: Optional[date] = None
    gender: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    emergency_contact: str = ""
    notes: str = ""
    blood_group: str = ""
    profile_image: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class HistoryEntryDto:
    id: int
    account_id: str
    date: datetime
    category: str
    notes: str
    meta: Optional[Dict[str, Any]]


PROFILE_FIELDS = (
    "name",
    "phone",
    "dob",
    "gender",
    "address",
    "city",
    "state",
    "zip",
    "emergency_contact",
    "notes",
    "blood_group",
    "profile_image",
)


class AccountRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[AccountDto]:
        ...

    def get_by_id(self, account_id: str) -> Optional[AccountDto]:
        ...

    def create(self, name: str, email: str, password_hash: str, role: str) -> AccountDto:
        ...

    def update_profile_fields(self, account_id: str, fields: Dict[str, Any]) -> Optional[AccountDto]:
        ...

    def add_history_entry(self, account_id: str, category: str, notes: str, meta: Optional[Dict[str, Any]] = None) -> HistoryEntryDto:
        ...

    def list_history(self, account_id: str) -> List[HistoryEntryDto]:
        ...
