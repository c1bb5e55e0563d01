from __future__ import annotations
from typing import Callable, Dict, Optional
from urllib.parse import parse_qs, urlencode

import httpx
import pytest

from steamauth.auth.provider import SteamProvider
from steamauth.config import ProviderConfig

STEAM_ID = "76561197960287930"
CALLBACK_BASE = "http://localhost:3000/api/auth/callback"
OPENID_LOGIN = "https://steamcommunity.com/openid/login"
PLAYER_SUMMARIES = "https://api.steampowered.com/ISteamUser/GetPlayerSummaries/v0002"
SIGNED = "signed,op_endpoint,claimed_id,identity,return_to,response_nonce,assoc_handle"

VALID_BODY = "ns:http://specs.openid.net/auth/2.0\nis_valid:true\n"
INVALID_BODY = "ns:http://specs.openid.net/auth/2.0\nis_valid:false\n"


def build_callback_url(
    claimed_id: str = f"https://steamcommunity.com/openid/id/{STEAM_ID}",
    base: str = f"{CALLBACK_BASE}/steam",
    **overrides: Optional[str],
) -> str:
    params = {
        "openid.ns": "http://specs.openid.net/auth/2.0",
        "openid.mode": "id_res",
        "openid.op_endpoint": OPENID_LOGIN,
        "openid.claimed_id": claimed_id,
        "openid.identity": claimed_id,
        "openid.return_to": f"{CALLBACK_BASE}/steam",
        "openid.response_nonce": "2026-10-16T12:00:00ZabcDEF",
        "openid.assoc_handle": "1234567890",
        "openid.signed": SIGNED,
        "openid.sig": "c2lnbmF0dXJl",
    }
    # keyword names cannot hold dots: op_endpoint -> openid.op_endpoint
    for key, value in overrides.items():
        params[f"openid.{key}"] = value
    params = {k: v for k, v in params.items() if v is not None}
    return f"{base}?{urlencode(params)}"


def form_of(request: httpx.Request) -> Dict[str, str]:
    parsed = parse_qs(request.content.decode(), keep_blank_values=True)
    return {k: v[0] for k, v in parsed.items()}


def player(**overrides) -> dict:
    data = {
        "steamid": STEAM_ID,
        "communityvisibilitystate": 3,
        "profilestate": 1,
        "personaname": "Gabe",
        "avatar": "https://avatars.steamstatic.com/abc.jpg",
        "avatarfull": "https://avatars.steamstatic.com/abc_full.jpg",
        "personastate": 1,
        "timecreated": 1063407589,
    }
    data.update(overrides)
    return data


@pytest.fixture
def callback_url() -> Callable[..., str]:
    return build_callback_url


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(client_secret="api-key-123", callback_url=CALLBACK_BASE)


@pytest.fixture
def provider(provider_config: ProviderConfig) -> SteamProvider:
    return SteamProvider(provider_config)


@pytest.fixture
def steam_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STEAM_API_KEY", raising=False)
    monkeypatch.setenv("STEAM_CLIENT_SECRET", "api-key-123")
    monkeypatch.setenv("STEAMAUTH_URL", "http://localhost:3000")
    monkeypatch.setenv("STEAMAUTH_HTTP_TIMEOUT", "5")
