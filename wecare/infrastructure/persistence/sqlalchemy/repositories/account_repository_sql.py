from typing import Any, Dict, List, Optional
from sqlmodel import Session, select

from .....db.models import Account, AccountHistory
from .....db.models.timestamps import utc_now
from .....application.ports.account_repo import AccountRepository, AccountDto, HistoryEntryDto, PROFILE_FIELDS


class SqlAccountRepository(AccountRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, a: Account) -> AccountDto:
        return AccountDto(
            id=a.id,
            name=a.name,
            email=a.email,
            role=a.role,
            password_hash=a.password_hash,
            phone=a.phone,
            dob=a.dob,
            gender=a.gender,
            address=a.address,
            city=a.city,
            state=a.state,
            zip=a.zip,
            emergency_contact=a.emergency_contact,
            notes=a.notes,
            blood_group=a.blood_group,
            profile_image=a.profile_image,
            created_at=a.created_at,
            updated_at=a.updated_at,
        )

    def get_by_email(self, email: str) -> Optional[AccountDto]:
        a = self.session.exec(select(Account).where(Account.email == email)).first()
        return self._to_dto(a) if a else None

    def get_by_id(self, account_id: str) -> Optional[AccountDto]:
        a = self.session.exec(select(Account).where(Account.id == account_id)).first()
        return self._to_dto(a) if a else None

    def create(self, name: str, email: str, password_hash: str, role: str) -> AccountDto:
        a = Account(name=name, email=email, password_hash=password_hash, role=role)
        self.session.add(a)
        self.session.commit()
        self.session.refresh(a)
        return self._to_dto(a)

    def update_profile_fields(self, account_id: str, fields: Dict[str, Any]) -> Optional[AccountDto]:
        a = self.session.exec(select(Account).where(Account.id == account_id)).first()
        if not a:
            return None
        for key, value in fields.items():
            if key in PROFILE_FIELDS:
                setattr(a, key, value)
        a.updated_at = utc_now()
        self.session.add(a)
        self.session.commit()
        self.session.refresh(a)
        return self._to_dto(a)

    def add_history_entry(self, account_id: str, category: str, notes: str, meta: Optional[Dict[str, Any]] = None) -> HistoryEntryDto:
        h = AccountHistory(account_id=account_id, category=category, notes=notes, meta=meta)
        self.session.add(h)
        self.session.commit()
        self.session.refresh(h)
        return HistoryEntryDto(id=h.id, account_id=h.account_id, date=h.date, category=h.category, notes=h.notes, meta=h.meta)

    def list_history(self, account_id: str) -> List[HistoryEntryDto]:
        rows = self.session.exec(
            select(AccountHistory)
            .where(AccountHistory.account_id == account_id)
            .order_by(AccountHistory.date.desc(), AccountHistory.id.desc())
        ).all()
        return [
            HistoryEntryDto(id=h.id, account_id=h.account_id, date=h.date, category=h.category, notes=h.notes, meta=h.meta)
            for h in rows
        ]
