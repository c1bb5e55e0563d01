from __future__ import annotations
import logging
import uuid
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from ..config import ProviderConfig, validate_provider_config
from ..errors import ProfileFetchError, Unauthenticated
from ..steam.client import SteamAPIClient
from .models import NormalizedIdentity, PlayerSummariesResponse, SteamPlayerSummary, TokenSet
from .openid import AssertionVerifier, AuthorizationRequest, build_authorization_request, origin_of

logger = logging.getLogger(__name__)

PROVIDER_ID = "steam"
PROVIDER_NAME = "Steam"
EMAIL_DOMAIN = "steamcommunity.com"


def profile(player: SteamPlayerSummary) -> NormalizedIdentity:
    return NormalizedIdentity(
        id=player.steamid,
        display_name=player.personaname,
        avatar_url=player.avatarfull or player.avatar,
        presence_state=player.personastate,
        visibility_state=player.communityvisibilitystate,
        created_at=player.timecreated,
    )


class SteamProvider:
    """Steam OpenID 2.0 login dressed up as an OAuth provider.

    ``authorization`` builds the redirect, ``token`` runs check_authentication
    against Steam and ``userinfo`` loads the player summary for the verified id.
    """

    id = PROVIDER_ID
    name = PROVIDER_NAME
    type = "oauth"
    email_domain = EMAIL_DOMAIN
    checks: List[str] = ["none"]
    style = {"bg": "#121212", "text": "#fff", "bg_dark": "#000", "text_dark": "#fff"}

    def __init__(self, config: ProviderConfig):
        self.config = validate_provider_config(config)
        callback_url = config.callback_url.rstrip("/")
        self.realm = origin_of(callback_url)
        self.return_to = f"{callback_url}/{PROVIDER_ID}"
        self.verifier = AssertionVerifier(timeout=config.timeout)

    def metadata(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "email_domain": self.email_domain,
            "checks": list(self.checks),
            "style": dict(self.style),
            "signin_url": self.authorization().redirect_url,
        }

    def authorization(self, return_to: Optional[str] = None, realm: Optional[str] = None) -> AuthorizationRequest:
        return build_authorization_request(return_to or self.return_to, realm or self.realm)

    async def token(self, callback_url: Optional[str]) -> TokenSet:
        steam_id = await self.verifier.verify(callback_url)
        if not steam_id:
            raise Unauthenticated()
        logger.info("Steam login verified for %s", steam_id)
        return TokenSet(id_token=str(uuid.uuid4()), access_token=str(uuid.uuid4()), steam_id=steam_id)

    async def fetch_player(self, steam_id: str, api_key: Optional[str] = None) -> SteamPlayerSummary:
        api = SteamAPIClient(api_key or self.config.client_secret, timeout=self.config.timeout)
        try:
            resp = await api.get_player_summaries([steam_id])
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as exc:
            raise ProfileFetchError(f"Player summary request failed: {exc}") from exc
        except ValueError as exc:
            raise ProfileFetchError("Player summary response is not JSON") from exc

        try:
            players = PlayerSummariesResponse.model_validate(payload).response.players
        except ValidationError as exc:
            raise ProfileFetchError("Unexpected player summary shape") from exc
        if not players:
            raise ProfileFetchError(f"No player summary returned for {steam_id}")
        return players[0]

    async def userinfo(self, tokens: TokenSet, api_key: Optional[str] = None) -> NormalizedIdentity:
        player = await self.fetch_player(tokens.steam_id, api_key)
        return profile(player)
