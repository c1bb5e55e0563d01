from __future__ import annotations
from typing import Any, Dict, List

import httpx

STEAM_API_BASE = "https://api.steampowered.com"


class SteamAPIClient:
    def __init__(self, api_key: str, timeout: float = 10.0, base_url: str = STEAM_API_BASE):
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")

    async def _get(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}/{path}"
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(url, params=params)
        return resp

    async def get_player_summaries(self, steamids: List[str]) -> httpx.Response:
        params = {"key": self.api_key, "steamids": ",".join(steamids)}
        return await self._get("ISteamUser/GetPlayerSummaries/v0002", params)
