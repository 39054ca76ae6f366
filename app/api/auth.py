"""Register, login, verify-token and logout, plus the auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import get_settings
from app.core.errors import AuthenticationError, AuthorizationError
from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
)
from app.schemas.user import VerifyTokenResponse
from app.services.accounts import AccountService
from app.services.directory import IdentityDirectory
from app.services.profiles import profile_from_identity, user_out
from app.services.roles import is_admin
from app.services.session_verifier import SessionVerifier

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_directory(request: Request) -> IdentityDirectory:
    """Dependency: the process-wide directory client built at startup."""
    return request.app.state.directory


def get_account_service(
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
) -> AccountService:
    return AccountService(directory, get_settings())


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
) -> CurrentUser:
    """Dependency: require a valid Bearer session and return the caller. Raises 401 if missing or invalid."""
    token = credentials.credentials if credentials else None
    try:
        identity = await SessionVerifier(directory).verify(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    return CurrentUser(identity=identity, access_token=token or "")


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for anyone else."""
    if not is_admin(current_user.role):
        raise AuthorizationError("Access denied. Administrator permissions required.")
    return current_user


@router.post("/register", response_model=AuthResponse)
async def register(
    body: RegisterRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> AuthResponse:
    """Create an account from nickname + password and return a session token when one could be issued."""
    result = await accounts.register(body.nickname, body.password, body.terms_accepted)
    return AuthResponse(
        message="Registration successful. Welcome to Cromwell Pay.",
        nickname=result.profile.nickname,
        token=result.token,
        user=user_out(result.profile),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> AuthResponse:
    """
    Authenticate with nickname and password; returns a session token.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = await accounts.login(body.nickname, body.password)
    return AuthResponse(
        message="Signed in successfully.",
        token=result.token,
        user=user_out(result.profile),
    )


@router.get("/verify-token", response_model=VerifyTokenResponse)
def verify_token(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> VerifyTokenResponse:
    return VerifyTokenResponse(user=user_out(profile_from_identity(current_user.identity)))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    await accounts.logout(current_user.access_token)
    return MessageResponse(message="Signed out successfully.")
