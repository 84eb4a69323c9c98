import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .config import settings
from .database import get_session
from .domain.booking import Actor, Role
from .utils import decode_jwt_token
from .application.services.account_service import AccountService
from .application.services.appointments_service import AppointmentsService
from .application.services.nurse_directory_service import NurseDirectoryService
from .application.services.profile_service import ProfileService
from .application.ports.rate_limiter import RateLimiter
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter
from .infrastructure.security.passlib_hasher import PasslibPasswordHasher
from .infrastructure.storage.local_storage import LocalStorageRepository
from .infrastructure.persistence.sqlalchemy.repositories.account_repository_sql import SqlAccountRepository
from .infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from .infrastructure.persistence.sqlalchemy.repositories.nurse_repository_sql import SqlNurseRepository

logger = logging.getLogger(__name__)

# Auth scheme
oauth2_scheme = HTTPBearer(auto_error=False)

_password_hasher = PasslibPasswordHasher(rounds=settings.BCRYPT_ROUNDS)
_audit_logger = StdAuditLogger()
_login_rate_limiter = InMemoryRateLimiter()


def get_current_actor(request: Request, credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme)) -> Actor:
    token = None
    if credentials and credentials.credentials:
        token = credentials.credentials
    else:
        # Fallback to cookie
        token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Authentication required")

    payload = decode_jwt_token(token)
    if not payload:
        logger.warning("JWT token decode failed - invalid or expired token")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    account_id = payload.get("sub")
    if not account_id:
        raise HTTPException(status_code=401, detail="Invalid token: missing user ID")
    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token: unknown role")
    return Actor(account_id=str(account_id), role=role)


def get_password_hasher() -> PasslibPasswordHasher:
    return _password_hasher


def get_login_rate_limiter() -> RateLimiter:
    return _login_rate_limiter


def get_directory_service(session: Session = Depends(get_session)) -> NurseDirectoryService:
    return NurseDirectoryService(
        nurse_repo=SqlNurseRepository(session),
        default_rating=settings.DEFAULT_NURSE_RATING,
        default_image=settings.DEFAULT_NURSE_IMAGE,
    )


def get_account_service(
    session: Session = Depends(get_session),
    directory: NurseDirectoryService = Depends(get_directory_service),
    hasher: PasslibPasswordHasher = Depends(get_password_hasher),
) -> AccountService:
    return AccountService(
        account_repo=SqlAccountRepository(session),
        hasher=hasher,
        directory=directory,
        audit=_audit_logger,
    )


def get_profile_service(
    session: Session = Depends(get_session),
    directory: NurseDirectoryService = Depends(get_directory_service),
) -> ProfileService:
    return ProfileService(
        account_repo=SqlAccountRepository(session),
        directory=directory,
        storage_repo=LocalStorageRepository(settings.UPLOAD_DIR),
    )


def get_appointments_service(session: Session = Depends(get_session)) -> AppointmentsService:
    return AppointmentsService(
        repo=SqlAppointmentsRepository(session),
        nurse_repo=SqlNurseRepository(session),
        account_repo=SqlAccountRepository(session),
        audit=_audit_logger,
        strict_pricing=settings.STRICT_SERVICE_PRICING,
    )
