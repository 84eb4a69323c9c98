from dataclasses import dataclass
from typing import Optional
import logging
import re

from ..ports.account_repo import AccountRepository, AccountDto
from ..ports.password_hasher import PasswordHasher
from ..ports.audit_logger import AuditLogger
from .nurse_directory_service import NurseDirectoryService
from ...domain.booking import Role
from ...exceptions import APIException, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8
SIGNUP_ROLES = (Role.PATIENT.value, Role.NURSE.value)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


@dataclass
class AccountService:
    account_repo: AccountRepository
    hasher: PasswordHasher
    directory: NurseDirectoryService
    audit: Optional[AuditLogger] = None

    def signup(self, name: str, email: str, password: str, role: str = Role.PATIENT.value) -> AccountDto:
        email = normalize_email(email)
        name = (name or "").strip()
        errors = {}
        if not name:
            errors["name"] = "Name is required"
        if not EMAIL_RE.match(email):
            errors["email"] = "A valid email address is required"
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        if role not in SIGNUP_ROLES:
            errors["role"] = f"Role must be one of: {', '.join(SIGNUP_ROLES)}"
        if errors:
            raise ValidationError("Invalid signup request", errors)

        if self.account_repo.get_by_email(email):
            raise APIException(409, "An account with this email already exists")

        account = self.account_repo.create(
            name=name,
            email=email,
            password_hash=self.hasher.hash(password),
            role=role,
        )
        if role == Role.NURSE.value:
            self.directory.create_listing(account)
        self._audit("signup", account.id, email=email, details={"role": role})
        logger.info(f"Registered {role} account {account.id}")
        return account

    def authenticate(self, email: str, password: str) -> AccountDto:
        email = normalize_email(email)
        account = self.account_repo.get_by_email(email)
        if not account or not self.hasher.verify(password or "", account.password_hash):
            self._audit("login", account.id if account else None, email=email, success=False)
            raise APIException(401, "Invalid credentials")
        self.directory.ensure_listing(account)
        self._audit("login", account.id, email=email)
        return account

    def get_account(self, account_id: str) -> AccountDto:
        account = self.account_repo.get_by_id(account_id)
        if not account:
            raise NotFoundError("Account not found")
        return account

    def _audit(self, action: str, actor_id: Optional[str], email: Optional[str] = None, success: bool = True, details=None) -> None:
        if self.audit:
            self.audit.log(action, actor_id=actor_id, email=email, success=success, details=details)
