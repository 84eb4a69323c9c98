import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ..config import settings
from ..dependencies import get_account_service, get_current_actor, get_directory_service, get_login_rate_limiter
from ..domain.booking import Actor, Role
from ..application.ports.rate_limiter import RateLimiter
from ..application.services.account_service import AccountService, normalize_email
from ..application.services.nurse_directory_service import NurseDirectoryService
from ..schemas import AccountResponse, LoginRequest, MessageResponse, SignupRequest, TokenResponse
from ..utils import create_jwt_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_token(response: Response, account, directory: NurseDirectoryService) -> TokenResponse:
    access_token = create_jwt_token({"sub": account.id, "role": account.role, "email": account.email})
    # httpOnly cookie lets browsers load protected assets without an Authorization header
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    nurse_id = None
    if account.role == Role.NURSE.value:
        nurse_id = directory.get_own_listing(Actor(account.id, Role.NURSE)).id
    return TokenResponse(
        access_token=access_token,
        account=AccountResponse.model_validate(account),
        nurse_id=nurse_id,
    )


@router.post("/signup", response_model=TokenResponse, status_code=201)
def signup(
    payload: SignupRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    directory: NurseDirectoryService = Depends(get_directory_service),
):
    """Register a patient or nurse. Nurses get a directory listing straight away."""
    account = accounts.signup(payload.name, payload.email, payload.password, payload.role)
    return _issue_token(response, account, directory)


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    directory: NurseDirectoryService = Depends(get_directory_service),
    limiter: RateLimiter = Depends(get_login_rate_limiter),
):
    client_ip = request.client.host if request.client else "unknown"
    key = f"login:{client_ip}:{normalize_email(payload.email)}"
    if not limiter.allow(key, settings.LOGIN_RATE_LIMIT_PER_MINUTE, 60):
        logger.warning(f"Login rate limit exceeded for {client_ip}")
        raise HTTPException(status_code=429, detail="Too many login attempts. Please try again later.")

    account = accounts.authenticate(payload.email, payload.password)
    return _issue_token(response, account, directory)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, actor: Actor = Depends(get_current_actor)):
    # Tokens are stateless; clearing the cookie is all the server can do
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    logger.info(f"Account {actor.account_id} logged out")
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=AccountResponse)
def me(actor: Actor = Depends(get_current_actor), accounts: AccountService = Depends(get_account_service)):
    return accounts.get_account(actor.account_id)
