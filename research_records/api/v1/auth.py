"""Authentication endpoints: credentials and OAuth login, logout, session info."""

import structlog
from authlib.integrations.starlette_client import OAuthError
from fastapi import APIRouter, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse

from research_records.core.config import get_settings
from research_records.core.database import AsyncSessionDep
from research_records.core.deps import AUTH_COOKIE_NAME, CurrentUser, CurrentUserOptional
from research_records.core.oauth import OAUTH_PROVIDERS, get_oauth_client, is_provider_configured
from research_records.core.rate_limit import RATE_LIMIT_AUTH, limiter
from research_records.core.security import create_cookie_token
from research_records.models.user import User
from research_records.schemas.base import MessageResponse
from research_records.schemas.user import AuthStatus, LoginRequest, TokenResponse, UserResponse
from research_records.services import user_service

settings = get_settings()
logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


def set_auth_cookie(response: Response, user: User) -> str:
    """Issue a token for ``user`` and store it in the httpOnly cookie."""
    token_value, max_age = create_cookie_token(user.id, user.email, user.role)
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token_value,
        max_age=max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )
    return token_value


def _check_provider(provider: str) -> None:
    if provider not in OAUTH_PROVIDERS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown OAuth provider: {provider}",
        )
    if not is_provider_configured(provider):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{provider.capitalize()} OAuth is not configured",
        )


@router.post("/login", response_model=TokenResponse)
@limiter.limit(RATE_LIMIT_AUTH)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    session: AsyncSessionDep,
) -> TokenResponse:
    """Sign in with email and password.

    The token is returned in the body and also set as an httpOnly cookie.
    """
    user = await user_service.authenticate(session, credentials.email, credentials.password)
    if user is None:
        logger.info("Credentials login rejected", email=credentials.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    await session.commit()

    logger.info("Credentials login successful", user_id=str(user.id), role=user.role.value)
    token_value = set_auth_cookie(response, user)
    return TokenResponse(access_token=token_value, user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """Log out the current user by clearing the auth cookie."""
    response.delete_cookie(
        key=AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(user: CurrentUser) -> UserResponse:
    """Get the current authenticated user's information."""
    return UserResponse.model_validate(user)


@router.get("/status", response_model=AuthStatus)
async def auth_status(user: CurrentUserOptional) -> AuthStatus:
    """Check authentication status without a 401 for anonymous callers."""
    if user:
        return AuthStatus(authenticated=True, user=UserResponse.model_validate(user))
    return AuthStatus(authenticated=False)


@router.get("/{provider}")
@limiter.limit(RATE_LIMIT_AUTH)
async def oauth_login(request: Request, provider: str) -> Response:
    """Initiate the OAuth login flow.

    Redirects to the provider's authorization page.
    """
    _check_provider(provider)
    redirect_uri = request.url_for("oauth_callback", provider=provider)
    return await get_oauth_client(provider).authorize_redirect(request, redirect_uri)


@router.get("/{provider}/callback", name="oauth_callback")
@limiter.limit(RATE_LIMIT_AUTH)
async def oauth_callback(
    request: Request,
    provider: str,
    session: AsyncSessionDep,
) -> Response:
    """Handle the OAuth callback.

    Exchanges the code for a token, upserts the user by email, resolves the
    role from the special user list and sets the auth cookie.
    """
    _check_provider(provider)
    try:
        token = await get_oauth_client(provider).authorize_access_token(request)
    except OAuthError as e:
        logger.error("OAuth token exchange failed", provider=provider, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to authenticate with {provider.capitalize()}",
        )

    user_info = token.get("userinfo") or {}
    # Entra ID work accounts may only carry preferred_username
    email = user_info.get("email") or user_info.get("preferred_username")
    if not email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Could not get email from {provider.capitalize()}",
        )

    user, created = await user_service.get_or_create_user_from_oauth(
        session=session,
        provider=provider,
        provider_id=user_info["sub"],
        email=email,
        name=user_info.get("name"),
        image=user_info.get("picture"),
    )
    await session.commit()

    logger.info(
        "OAuth login successful",
        provider=provider,
        user_id=str(user.id),
        role=user.role.value,
        created=created,
    )

    response = RedirectResponse(
        url=f"{settings.frontend_url}/dashboard",
        status_code=status.HTTP_302_FOUND,
    )
    set_auth_cookie(response, user)
    return response
