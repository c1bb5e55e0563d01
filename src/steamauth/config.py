from __future__ import annotations
import os
from typing import Optional

import httpx
from pydantic import BaseModel, Field, ConfigDict
from dotenv import load_dotenv

from .errors import InvalidConfiguration, MissingCredential

DEFAULT_APP_URL = "http://localhost:8000"
CALLBACK_PATH = "/api/auth/callback"


class ProviderConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_secret: Optional[str] = Field(default=None, description="Steam Web API key")
    callback_url: str = Field(description="Absolute callback base URL, provider id is appended")
    timeout: float = Field(default=10.0, gt=0)


def validate_provider_config(config: ProviderConfig) -> ProviderConfig:
    # secret first: it is the common misconfiguration
    if not config.client_secret or not config.client_secret.strip():
        raise MissingCredential("Steam API key is missing")
    try:
        url = httpx.URL(config.callback_url)
    except httpx.InvalidURL as exc:
        raise InvalidConfiguration(f"Invalid callback URL: {config.callback_url!r}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidConfiguration(f"Callback URL must be absolute: {config.callback_url!r}")
    return config


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    steam_client_secret: Optional[str] = Field(default=None, description="Steam Web API key")
    app_url: str = Field(default=DEFAULT_APP_URL, description="Public base URL of the app")
    http_timeout: float = Field(default=10.0, gt=0)

    @property
    def callback_url(self) -> str:
        return self.app_url.rstrip("/") + CALLBACK_PATH

    def provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            client_secret=self.steam_client_secret,
            callback_url=self.callback_url,
            timeout=self.http_timeout,
        )


def get_settings(env_file: Optional[str] = None) -> Settings:
    if env_file and os.path.exists(env_file):
        load_dotenv(env_file)
    else:
        load_dotenv()
    data = {
        "steam_client_secret": os.getenv("STEAM_CLIENT_SECRET") or os.getenv("STEAM_API_KEY"),
        "app_url": os.getenv("STEAMAUTH_URL", DEFAULT_APP_URL),
        "http_timeout": os.getenv("STEAMAUTH_HTTP_TIMEOUT", "10"),
    }
    return Settings(**data)
