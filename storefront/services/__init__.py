from dataclasses import dataclass

from storefront.config import AuthSettings
from storefront.services.auth import AuthService
from storefront.services.revocation import RevocationStore
from utils.security import TokenService


@dataclass
class Services:
    """Per-app service container, kept in app.extensions["storefront"]."""

    settings: AuthSettings
    tokens: TokenService
    revocations: RevocationStore
    auth: AuthService


def build_services(settings: AuthSettings) -> Services:
    tokens = TokenService(settings)
    revocations = RevocationStore()
    return Services(
        settings=settings,
        tokens=tokens,
        revocations=revocations,
        auth=AuthService(settings, tokens, revocations),
    )
