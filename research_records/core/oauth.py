"""OAuth client configuration for Google and Microsoft Entra ID."""

from authlib.integrations.starlette_client import OAuth

from research_records.core.config import get_settings

settings = get_settings()

OAUTH_PROVIDERS = ("google", "microsoft")

# Initialize OAuth
oauth = OAuth()

# Google OAuth configuration
oauth.register(
    name="google",
    client_id=settings.google_client_id,
    client_secret=settings.google_client_secret,
    server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
    client_kwargs={"scope": "openid email profile"},
)

# Microsoft Entra ID configuration ("common" accepts any tenant)
oauth.register(
    name="microsoft",
    client_id=settings.microsoft_client_id,
    client_secret=settings.microsoft_client_secret,
    server_metadata_url=(
        f"https://login.microsoftonline.com/{settings.microsoft_tenant_id}"
        "/v2.0/.well-known/openid-configuration"
    ),
    client_kwargs={"scope": "openid email profile"},
)


def is_provider_configured(provider: str) -> bool:
    """Whether client credentials are set for the provider."""
    if provider == "google":
        return bool(settings.google_client_id)
    if provider == "microsoft":
        return bool(settings.microsoft_client_id)
    raise ValueError(f"Unknown OAuth provider: {provider}")


def get_oauth_client(provider: str):
    """Get the registered OAuth client for the specified provider."""
    if provider not in OAUTH_PROVIDERS:
        raise ValueError(f"Unknown OAuth provider: {provider}")
    return oauth.create_client(provider)
