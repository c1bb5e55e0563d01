from __future__ import annotations
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from ..auth.models import NormalizedIdentity
from ..auth.provider import SteamProvider
from ..config import get_settings, Settings
from ..errors import ConfigurationError, ProfileFetchError, Unauthenticated, VerificationTransportError

logger = logging.getLogger(__name__)


class AuthResultOut(BaseModel):
    steam_id: str
    profile: Optional[NormalizedIdentity] = None


router = APIRouter()


def get_settings_dep() -> Settings:
    return get_settings()


def get_provider(settings: Settings = Depends(get_settings_dep)) -> SteamProvider:
    try:
        return SteamProvider(settings.provider_config())
    except ConfigurationError as exc:
        logger.error("Steam provider misconfigured: %s", exc)
        raise HTTPException(500, "Steam provider is not configured")


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/auth/providers")
def providers(provider: SteamProvider = Depends(get_provider)) -> Dict[str, dict]:
    return {provider.id: provider.metadata()}


@router.get("/api/auth/signin/steam")
def signin(provider: SteamProvider = Depends(get_provider)):
    return RedirectResponse(provider.authorization().redirect_url)


@router.get("/api/auth/callback/steam", response_model=AuthResultOut)
async def callback(request: Request, provider: SteamProvider = Depends(get_provider)):
    try:
        tokens = await provider.token(str(request.url))
    except Unauthenticated:
        raise HTTPException(401, "Authentication failed")
    except VerificationTransportError as exc:
        logger.error("Steam verification unavailable: %s", exc)
        raise HTTPException(502, "Steam is unavailable, try again later")

    try:
        identity = await provider.userinfo(tokens)
    except ProfileFetchError as exc:
        logger.warning("Profile lookup failed for %s: %s", tokens.steam_id, exc)
        identity = None
    return AuthResultOut(steam_id=tokens.steam_id, profile=identity)
