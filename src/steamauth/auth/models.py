from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenSet(BaseModel):
    """Stand-in for an OAuth token response.

    ``id_token`` and ``access_token`` are random UUID4 values. They are unique
    per login and carry no other guarantee: never use them as bearer
    credentials outside of the token/userinfo exchange.
    """

    model_config = ConfigDict(frozen=True)

    id_token: str
    access_token: str
    steam_id: str


class SteamPlayerSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    steamid: str
    personaname: Optional[str] = None
    avatarfull: Optional[str] = None
    avatar: Optional[str] = None
    personastate: Optional[int] = None
    communityvisibilitystate: Optional[int] = None
    timecreated: Optional[int] = None


class PlayerSummariesBody(BaseModel):
    players: List[SteamPlayerSummary] = Field(default_factory=list)


class PlayerSummariesResponse(BaseModel):
    response: PlayerSummariesBody


class NormalizedIdentity(BaseModel):
    id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    presence_state: Optional[int] = None
    visibility_state: Optional[int] = None
    created_at: Optional[int] = None
